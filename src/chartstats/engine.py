r"""
chartstats.engine
=================
Evaluate several distribution statistics over one sample.

This module defines:

- :class:`DistributionContext`: a typed, explicit configuration object shared by all statistics.
- :class:`FnStatistic`: a frozen adapter that names a statistic function.
- :class:`DistributionEngine`: an orchestrator that evaluates one or more statistics.

The engine validates and sorts the sample once (see :class:`~chartstats.sample.Sample`)
and hands the same instance to every statistic, so computing quartiles, a
box plot, a histogram and a density curve together costs a single sort.

See Also
--------
chartstats.boxplot.summarize
    Box-plot statistics.
chartstats.density.kde
    Gaussian kernel density estimate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Generic, Hashable, Iterable, Mapping, Optional, Protocol, Sequence, TypeVar

import numpy as np

from .backends import BackendSpec, check_backend
from .bandwidth import BandwidthSpec, resolve_bandwidth, validate_bandwidth
from .bins import BinSpec, resolve_bins
from .boxplot import BoxPlotStats, WhiskerMethod, notch_interval, summarize
from .density import DEFAULT_NUM_POINTS, DensityPoint, kde
from .errors import ChartStatsError, DegenerateInputError, InvalidArgumentError
from .histogram import HistogramBin, histogram
from .quantiles import iqr, quantiles, quartiles
from .sample import NanPolicy, Sample, SampleLike

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)


_PROBS = (0.05, 0.25, 0.5, 0.75, 0.95)  # default quantile probabilities


@dataclass(slots=True)
class DistributionContext:
    r"""
    Shared, explicit configuration for distribution statistics.

    Attributes
    ----------
    bins : {"auto", "fd", "sturges"}, int or sequence of float, default "auto"
        Histogram bin specification (see :func:`~chartstats.bins.resolve_bins`).
    bandwidth : {"auto"} or float, default "auto"
        KDE bandwidth; ``"auto"`` applies Silverman's rule.
    num_points : int, default 100
        Number of KDE evaluation points.
    whisker_method : {"tukey", "minmax"}, default "tukey"
        Box-plot whisker convention.
    nan_policy : {"raise", "omit"}, default "raise"
        Handling of non-finite observations when the sample is built.
    probabilities : tuple of float, default ``(0.05, 0.25, 0.5, 0.75, 0.95)``
        Probabilities evaluated by the ``quantiles`` statistic.
    backend : {None, "sequential", "thread", "process"} or ExecutionBackend
        Where KDE grid blocks are evaluated.
    require_data : bool, default False
        If True, an empty sample raises
        :class:`~chartstats.errors.DegenerateInputError` instead of returning
        the documented fallbacks.

    Notes
    -----
    The context is immutable by convention at runtime; prefer :meth:`with_overrides`
    to construct a modified copy with a small set of changed fields.

    Examples
    --------
    >>> ctx = DistributionContext(bins="sturges", whisker_method="minmax")
    >>> ctx.with_overrides(num_points=50).num_points
    50
    """

    bins: BinSpec = "auto"
    bandwidth: BandwidthSpec = "auto"
    num_points: int = DEFAULT_NUM_POINTS
    whisker_method: WhiskerMethod = WhiskerMethod.tukey
    nan_policy: NanPolicy = NanPolicy.raise_
    probabilities: tuple[float, ...] = _PROBS
    backend: BackendSpec = None
    require_data: bool = False

    def with_overrides(self, **changes) -> "DistributionContext":
        r"""
        Return a shallow copy with selected fields replaced.

        Parameters
        ----------
        **changes :
            Field overrides passed to :func:`dataclasses.replace`.

        Returns
        -------
        DistributionContext
            Modified copy.
        """
        return replace(self, **changes)

    def __post_init__(self) -> None:
        r"""
        Validate field ranges and normalise enum-valued fields.

        Raises
        ------
        InvalidArgumentError
            If any field is outside its allowed range.
        """
        try:
            self.whisker_method = WhiskerMethod(self.whisker_method)
        except ValueError:
            raise InvalidArgumentError(f"whisker_method must be 'tukey' or 'minmax', got {self.whisker_method!r}") from None
        try:
            self.nan_policy = NanPolicy(self.nan_policy)
        except ValueError:
            raise InvalidArgumentError(f"nan_policy must be 'raise' or 'omit', got {self.nan_policy!r}") from None
        if isinstance(self.num_points, bool) or not isinstance(self.num_points, (int, np.integer)):
            raise InvalidArgumentError("num_points must be an integer")
        if self.num_points < 2:
            raise InvalidArgumentError("num_points must be >= 2")
        self.probabilities = tuple(float(p) for p in self.probabilities)
        if any(not (0.0 <= p <= 1.0) for p in self.probabilities):
            raise InvalidArgumentError("probabilities must be in [0,1]")
        if not isinstance(self.bandwidth, str):
            validate_bandwidth(self.bandwidth)
        elif self.bandwidth.lower() != "auto":
            raise InvalidArgumentError(f"bandwidth must be 'auto' or a number, got {self.bandwidth!r}")
        check_backend(self.backend)


class Statistic(Protocol):
    r"""
    Protocol for statistic callables used by :class:`DistributionEngine`.

    A statistic exposes a ``name`` attribute and is callable as:

    ``statistic(sample: Sample, ctx: DistributionContext) -> Any``

    Attributes
    ----------
    name : str
        Key under which the statistic's value is returned.
    """

    name: str

    def __call__(self, sample: Sample, ctx: DistributionContext, /) -> Any: ...


T = TypeVar("T")


@dataclass(frozen=True)
class FnStatistic(Generic[T]):
    r"""
    Lightweight adapter that binds a ``name`` to a statistic function.

    Parameters
    ----------
    name : str
        Key under which the result is stored in :meth:`DistributionEngine.compute`.
    fn : callable
        Function with signature ``fn(sample: Sample, ctx: DistributionContext) -> T``.
    doc : str, optional
        Short description displayed by UIs or docs.

    Examples
    --------
    >>> stat = FnStatistic("n", lambda s, ctx: s.size)
    >>> stat(Sample([1, 2, 3]), DistributionContext())
    3
    """

    name: str
    fn: Callable[[Sample, DistributionContext], T]
    doc: str = ""

    def __call__(self, sample: Sample, ctx: DistributionContext) -> T:
        return self.fn(sample, ctx)


def _ensure_ctx(ctx: Any) -> DistributionContext:
    r"""
    Normalize arbitrary context inputs into a :class:`DistributionContext`.

    Parameters
    ----------
    ctx : Any
        A :class:`DistributionContext`, mapping, object with attributes, or ``None``.

    Returns
    -------
    DistributionContext

    Raises
    ------
    TypeError
        If ``ctx`` cannot be interpreted as configuration data.
    """
    if isinstance(ctx, DistributionContext):
        return ctx
    if ctx is None:
        return DistributionContext()
    if isinstance(ctx, dict):
        return DistributionContext(**ctx)

    # Fallback: try to read attributes
    try:
        data = dict(vars(ctx))
    except TypeError:
        raise TypeError("ctx must be a DistributionContext, dict, None, or an object with attributes")
    return DistributionContext(**data)


class DistributionEngine:
    r"""
    Orchestrator that evaluates a set of statistics over one sample.

    Parameters
    ----------
    statistics : iterable of Statistic
        Callables with a ``name`` and signature ``statistic(sample, ctx)``.

    Notes
    -----
    All statistics receive the *same* :class:`~chartstats.sample.Sample` and
    :class:`DistributionContext`. A statistic that fails with a
    :class:`~chartstats.errors.ChartStatsError` is logged and left out of the
    result, so one bad parameter does not blank the whole chart; any other
    exception propagates.

    Examples
    --------
    >>> eng = DistributionEngine([FnStatistic("iqr", stat_iqr)])
    >>> eng.compute([1, 2, 3, 4, 5])
    {'iqr': 2.0}
    """

    def __init__(self, statistics: Iterable[Statistic]):
        self._statistics = list(statistics)

    def available(self) -> tuple[str, ...]:
        return tuple(s.name for s in self._statistics)

    def compute(
        self,
        data: SampleLike,
        ctx: Optional[DistributionContext] = None,
        select: Sequence[str] | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        r"""
        Evaluate the registered statistics on ``data``.

        Parameters
        ----------
        data : Sample or array_like
            Observations. Built into a :class:`~chartstats.sample.Sample`
            with ``ctx.nan_policy`` unless it already is one.
        ctx : DistributionContext, optional
            Configuration. If None, one is built from **kwargs.
        select : sequence of str, optional
            If given, compute only the statistics with these names.
        **kwargs :
            Used to build a DistributionContext if ctx is None.

        Returns
        -------
        dict
            Mapping from statistic name to computed value.

        Raises
        ------
        InvalidArgumentError
            If the sample is invalid or ``select`` names an unknown statistic.
        DegenerateInputError
            If the sample is empty and ``ctx.require_data`` is set.
        """
        ctx = _ensure_ctx(ctx) if ctx is not None else DistributionContext(**kwargs)
        sample = Sample.coerce(data, nan_policy=ctx.nan_policy)

        if sample.is_empty and ctx.require_data:
            raise DegenerateInputError("sample has no finite observations")

        if select is None:
            to_compute = self._statistics
        else:
            wanted = set(select)
            unknown = wanted - set(self.available())
            if unknown:
                raise InvalidArgumentError(f"Unknown statistics: {sorted(unknown)}; available: {self.available()}")
            to_compute = [s for s in self._statistics if s.name in wanted]

        out: dict[str, Any] = {}
        for stat in to_compute:
            try:
                out[stat.name] = stat(sample, ctx)
            except ChartStatsError as e:
                logger.warning(f"Skipping statistic {stat.name}: {e}")
                continue

        return out

    def compute_groups(
        self,
        groups: Mapping[Hashable, SampleLike],
        ctx: Optional[DistributionContext] = None,
        select: Sequence[str] | None = None,
        **kwargs: Any,
    ) -> dict[Hashable, dict[str, Any]]:
        r"""
        Evaluate the registered statistics once per category.

        Parameters
        ----------
        groups : mapping
            Category to observations, e.g. the output of
            :func:`~chartstats.sample.group_values`.
        ctx, select, **kwargs :
            As for :meth:`compute`; one context is shared by every group.

        Returns
        -------
        dict
            Category to the :meth:`compute` result, in the mapping's order.
        """
        ctx = _ensure_ctx(ctx) if ctx is not None else DistributionContext(**kwargs)
        return {key: self.compute(values, ctx, select) for key, values in groups.items()}


def stat_quantiles(sample: Sample, ctx: DistributionContext) -> dict[float, float]:
    """Quantiles at :attr:`DistributionContext.probabilities`."""
    return quantiles(sample, ctx.probabilities)


def stat_quartiles(sample: Sample, ctx: DistributionContext) -> dict[str, float]:
    return quartiles(sample)._asdict()


def stat_iqr(sample: Sample, ctx: DistributionContext) -> float:
    return iqr(sample)


def stat_boxplot(sample: Sample, ctx: DistributionContext) -> BoxPlotStats:
    return summarize(sample, ctx.whisker_method)


def stat_notch(sample: Sample, ctx: DistributionContext) -> tuple[float, float]:
    """Median notch bounds (see :func:`~chartstats.boxplot.notch_interval`)."""
    return notch_interval(sample)


def stat_bin_count(sample: Sample, ctx: DistributionContext) -> int:
    """Number of bins :attr:`DistributionContext.bins` resolves to."""
    resolved = resolve_bins(sample, ctx.bins)
    if isinstance(resolved, np.ndarray):
        return max(0, int(np.unique(resolved).size) - 1)
    return int(resolved)


def stat_histogram(sample: Sample, ctx: DistributionContext) -> list[HistogramBin]:
    return histogram(sample, ctx.bins)


def stat_bandwidth(sample: Sample, ctx: DistributionContext) -> float:
    """Bandwidth the ``kde`` statistic uses."""
    return resolve_bandwidth(sample, ctx.bandwidth)


def stat_kde(sample: Sample, ctx: DistributionContext) -> list[DensityPoint]:
    return kde(sample, ctx.bandwidth, ctx.num_points, backend=ctx.backend)


def build_default_engine(include_density: bool = True) -> DistributionEngine:
    r"""
    Construct a :class:`DistributionEngine` with every chart statistic.

    Parameters
    ----------
    include_density : bool, default True
        Include ``bandwidth`` and ``kde``, the :math:`O(n \cdot m)` part.

    Returns
    -------
    DistributionEngine
    """
    statistics: list[Statistic] = [
        FnStatistic[dict[float, float]]("quantiles", stat_quantiles, "Quantiles at the context probabilities"),
        FnStatistic[dict[str, float]]("quartiles", stat_quartiles, "Q1, median, Q3"),
        FnStatistic[float]("iqr", stat_iqr, "Interquartile range"),
        FnStatistic[BoxPlotStats]("boxplot", stat_boxplot, "Box-plot summary with whiskers and outliers"),
        FnStatistic[tuple[float, float]]("notch", stat_notch, "Median notch bounds"),
        FnStatistic[int]("bin_count", stat_bin_count, "Resolved histogram bin count"),
        FnStatistic[list[HistogramBin]]("histogram", stat_histogram, "Histogram bins"),
    ]
    if include_density:
        statistics.extend(
            [
                FnStatistic[float]("bandwidth", stat_bandwidth, "KDE bandwidth"),
                FnStatistic[list[DensityPoint]]("kde", stat_kde, "Gaussian kernel density curve"),
            ]
        )
    return DistributionEngine(statistics)


# Build a default engine at import time
DEFAULT_ENGINE = build_default_engine()


def summarize_distribution(
    data: SampleLike,
    ctx: Optional[DistributionContext] = None,
    select: Sequence[str] | None = None,
    **kwargs: Any,
) -> dict[str, Any]:
    """Shortcut for ``DEFAULT_ENGINE.compute(data, ctx, select, **kwargs)``."""
    return DEFAULT_ENGINE.compute(data, ctx, select, **kwargs)


def summarize_groups(
    groups: Mapping[Hashable, SampleLike],
    ctx: Optional[DistributionContext] = None,
    select: Sequence[str] | None = None,
    **kwargs: Any,
) -> dict[Hashable, dict[str, Any]]:
    """Shortcut for ``DEFAULT_ENGINE.compute_groups(groups, ctx, select, **kwargs)``."""
    return DEFAULT_ENGINE.compute_groups(groups, ctx, select, **kwargs)


__all__ = [
    "DistributionContext",
    "Statistic",
    "FnStatistic",
    "DistributionEngine",
    "stat_quantiles",
    "stat_quartiles",
    "stat_iqr",
    "stat_boxplot",
    "stat_notch",
    "stat_bin_count",
    "stat_histogram",
    "stat_bandwidth",
    "stat_kde",
    "build_default_engine",
    "DEFAULT_ENGINE",
    "summarize_distribution",
    "summarize_groups",
]
