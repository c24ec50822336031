r"""
chartstats.boxplot
==================
Box-plot summary statistics.

Two whisker conventions are supported:

``tukey`` (default)
    Fences at :math:`Q_1 - 1.5\,\mathrm{IQR}` and :math:`Q_3 + 1.5\,\mathrm{IQR}`.
    Observations strictly outside the fences are outliers; whiskers reach the
    most extreme observations inside them.
``minmax``
    Whiskers span the full data range and there are no outliers.

:func:`notch_interval` gives the McGill, Tukey & Larsen (1978) notch around
the median, :math:`\tilde x \pm 1.58\,\mathrm{IQR}/\sqrt{n}`, a rough 95%
interval for comparing medians of several boxes.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Union

from .errors import InvalidArgumentError
from .quantiles import quartiles
from .sample import Sample, SampleLike

__all__ = [
    "TUKEY_K",
    "WhiskerMethod",
    "BoxPlotStats",
    "MCGILL_K",
    "tukey_fences",
    "notch_interval",
    "summarize",
]

TUKEY_K = 1.5
MCGILL_K = 1.58


class WhiskerMethod(str, Enum):
    r"""
    Whisker conventions for :func:`summarize`.

    Attributes
    ----------
    tukey : str
        1.5 IQR fences with outlier detection.
    minmax : str
        Whiskers at the sample extremes.
    """

    tukey = "tukey"
    minmax = "minmax"


@dataclass(frozen=True)
class BoxPlotStats:
    r"""
    Five-number summary plus whiskers and outliers.

    Attributes
    ----------
    min, max : float
        Sample extremes.
    q1, median, q3 : float
        Quartiles (type-7 interpolation).
    whisker_low, whisker_high : float
        Whisker ends; always within :math:`[\min, \max]`, with
        ``whisker_low <= q1`` and ``whisker_high >= q3``.
    outliers : tuple of float
        Observations beyond the Tukey fences, ascending. Empty for ``minmax``.
    """

    min: float
    q1: float
    median: float
    q3: float
    max: float
    whisker_low: float
    whisker_high: float
    outliers: tuple[float, ...] = ()

    @property
    def iqr(self) -> float:
        return self.q3 - self.q1

    def as_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["outliers"] = list(self.outliers)
        return d


def _resolve_method(method: Union[str, WhiskerMethod]) -> WhiskerMethod:
    try:
        return WhiskerMethod(method)
    except ValueError:
        raise InvalidArgumentError(
            f"method must be one of {[m.value for m in WhiskerMethod]}, got {method!r}"
        ) from None


def tukey_fences(sample: SampleLike) -> tuple[float, float]:
    r"""
    Lower and upper Tukey fences.

    Returns
    -------
    tuple of float
        :math:`(Q_1 - 1.5\,\mathrm{IQR},\; Q_3 + 1.5\,\mathrm{IQR})`;
        ``(0.0, 0.0)`` for an empty sample.
    """
    q1, _, q3 = quartiles(sample)
    spread = q3 - q1
    return q1 - TUKEY_K * spread, q3 + TUKEY_K * spread


def notch_interval(sample: SampleLike) -> tuple[float, float]:
    r"""
    Notch bounds around the median.

    Returns
    -------
    tuple of float
        :math:`(\tilde x - 1.58\,\mathrm{IQR}/\sqrt{n},\; \tilde x + 1.58\,\mathrm{IQR}/\sqrt{n})`.
        Collapses to ``(median, median)`` when :math:`n \le 1` or the IQR is
        zero, and is ``(0.0, 0.0)`` for an empty sample.

    Examples
    --------
    >>> tuple(round(v, 3) for v in notch_interval([1, 2, 3, 4]))
    (1.315, 3.685)
    """
    s = Sample.coerce(sample)
    q1, median, q3 = quartiles(s)
    if s.size <= 1:
        return median, median
    half = MCGILL_K * (q3 - q1) / math.sqrt(s.size)
    return median - half, median + half


def summarize(sample: SampleLike, method: Union[str, WhiskerMethod] = WhiskerMethod.tukey) -> BoxPlotStats:
    r"""
    Box-plot statistics for a sample.

    Parameters
    ----------
    sample : Sample or array_like
        Observations. Not mutated.
    method : {"tukey", "minmax"}, default "tukey"
        Whisker convention.

    Returns
    -------
    BoxPlotStats
        Satisfies ``whisker_low <= q1 <= median <= q3 <= whisker_high`` and
        ``min <= whisker_low``, ``whisker_high <= max``. An empty sample gives
        all-zero statistics with no outliers.

    Raises
    ------
    InvalidArgumentError
        If ``method`` is not a known whisker convention.

    Examples
    --------
    >>> stats = summarize([1, 2, 3, 4, 100])
    >>> stats.outliers, stats.whisker_high
    ((100.0,), 4.0)
    """
    method = _resolve_method(method)
    s = Sample.coerce(sample)

    if s.is_empty:
        return BoxPlotStats(0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, ())

    q1, median, q3 = quartiles(s)
    lo, hi = s.min, s.max

    if method is WhiskerMethod.minmax:
        return BoxPlotStats(lo, q1, median, q3, hi, lo, hi, ())

    spread = q3 - q1
    lower_fence = q1 - TUKEY_K * spread
    upper_fence = q3 + TUKEY_K * spread

    ordered = s.sorted
    outside = (ordered < lower_fence) | (ordered > upper_fence)
    inside = ordered[~outside]

    below = inside[inside < q1]
    above = inside[inside > q3]
    whisker_low = float(below[0]) if below.size else q1
    whisker_high = float(above[-1]) if above.size else q3

    whisker_low = max(whisker_low, lo)
    whisker_high = min(whisker_high, hi)

    outliers = tuple(float(v) for v in ordered[outside])
    return BoxPlotStats(lo, q1, median, q3, hi, whisker_low, whisker_high, outliers)
