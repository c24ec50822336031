r"""
chartstats.density
==================
Gaussian kernel density estimation on a uniform grid.

.. math::

   \hat f(x) = \frac{1}{n h} \sum_{i=1}^{n} K\!\left(\frac{x - x_i}{h}\right),
   \qquad K(z) = \frac{e^{-z^2/2}}{\sqrt{2\pi}}

The grid spans the sample range padded by 10% on each side. Cost is
:math:`O(\text{num\_points} \cdot n)` per call; the grid is evaluated in
blocks so memory stays bounded, and the blocks can be handed to a parallel
backend from :mod:`chartstats.backends` without changing the result.

Helpers for the chart series that consume a curve:

- :func:`scale_density` / :func:`density_to_counts` put a curve on a
  histogram's count axis.
- :func:`normalize_peak` and :func:`violin` build a violin half-width profile.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NamedTuple, Optional, Sequence

import numpy as np
from scipy.stats import norm

from .backends import BackendSpec, resolve_backend
from .bandwidth import BandwidthSpec, resolve_bandwidth
from .boxplot import BoxPlotStats, WhiskerMethod, summarize
from .errors import InvalidArgumentError
from .sample import Sample, SampleLike

__all__ = [
    "DEFAULT_NUM_POINTS",
    "VIOLIN_NUM_POINTS",
    "DOMAIN_PADDING",
    "DensityPoint",
    "ViolinSummary",
    "gaussian_kernel",
    "kernel_sum_block",
    "evaluation_grid",
    "kde",
    "scale_density",
    "density_to_counts",
    "normalize_peak",
    "violin",
]

DEFAULT_NUM_POINTS = 100
VIOLIN_NUM_POINTS = 50
DOMAIN_PADDING = 0.1  # fraction of the range added on each side
_MAX_BLOCK_CELLS = 1_000_000  # grid points x observations per block


class DensityPoint(NamedTuple):
    """One ``(x, y)`` sample of a density curve."""

    x: float
    y: float


@dataclass(frozen=True)
class ViolinSummary:
    r"""
    Data behind one violin.

    Attributes
    ----------
    profile : list of DensityPoint
        Density curve rescaled so its peak is 1 (half-width fraction).
    stats : BoxPlotStats
        ``minmax`` box statistics for the quartile overlay.
    bandwidth : float
        Bandwidth actually used.
    """

    profile: list[DensityPoint]
    stats: BoxPlotStats
    bandwidth: float


def gaussian_kernel(z):
    r"""
    Standard normal kernel :math:`e^{-z^2/2} / \sqrt{2\pi}`.

    Accepts a scalar or an array and returns the same shape.
    """
    return norm.pdf(z)


def kernel_sum_block(xs: np.ndarray, data: np.ndarray, bandwidth: float) -> np.ndarray:
    r"""
    Unnormalised kernel sums :math:`\sum_i K((x - x_i)/h)` for each ``x`` in ``xs``.

    Module-level so process backends can pickle it.
    """
    z = (xs[:, None] - data[None, :]) / bandwidth
    return gaussian_kernel(z).sum(axis=1)


def _check_num_points(num_points: int) -> int:
    if isinstance(num_points, (bool, np.bool_)) or not isinstance(num_points, (int, np.integer)):
        raise InvalidArgumentError(f"num_points must be an integer, got {num_points!r}")
    if num_points < 2:
        raise InvalidArgumentError(f"num_points must be >= 2, got {num_points}")
    return int(num_points)


def evaluation_grid(sample: SampleLike, num_points: int = DEFAULT_NUM_POINTS) -> np.ndarray:
    r"""
    Uniform grid over :math:`[\min - 0.1 r,\; \max + 0.1 r]`, :math:`r = \max - \min`.

    Returns
    -------
    ndarray
        ``num_points`` grid points. When :math:`r = 0` the domain collapses and
        every point equals the sample value. Empty for an empty sample.
    """
    num_points = _check_num_points(num_points)
    s = Sample.coerce(sample)
    if s.is_empty:
        return np.empty(0, dtype=float)
    if s.range == 0.0:
        return np.full(num_points, s.min)
    pad = DOMAIN_PADDING * s.range
    return np.linspace(s.min - pad, s.max + pad, num_points)


def kde(
    sample: SampleLike,
    bandwidth: BandwidthSpec = "auto",
    num_points: int = DEFAULT_NUM_POINTS,
    backend: BackendSpec = None,
) -> list[DensityPoint]:
    r"""
    Gaussian kernel density estimate.

    Parameters
    ----------
    sample : Sample or array_like
        Observations. Not mutated.
    bandwidth : float or {"auto"}, default "auto"
        Kernel bandwidth :math:`h > 0`. ``"auto"`` uses Silverman's rule via
        :func:`~chartstats.bandwidth.resolve_bandwidth`.
    num_points : int, default 100
        Number of evenly spaced evaluation points, at least 2.
    backend : {None, "sequential", "thread", "process"} or ExecutionBackend
        Where to evaluate grid blocks. Output does not depend on it.

    Returns
    -------
    list of DensityPoint
        ``num_points`` pairs with ``y >= 0``; empty for an empty sample. The
        curve approximates, but is not normalised to, a unit integral.

    Raises
    ------
    InvalidBandwidthError
        If ``bandwidth`` is non-finite or :math:`\le 0`.
    InvalidArgumentError
        If ``num_points`` is not an integer :math:`\ge 2`.

    Examples
    --------
    >>> curve = kde([0.0], bandwidth=1.0, num_points=3)
    >>> round(curve[0].y, 4)
    0.3989
    """
    num_points = _check_num_points(num_points)
    s = Sample.coerce(sample)
    # validate before the empty short-circuit so a bad bandwidth always fails
    h = resolve_bandwidth(s, bandwidth)
    if s.is_empty:
        return []

    xs = evaluation_grid(s, num_points)
    block_size = max(1, _MAX_BLOCK_CELLS // s.size)
    sums = resolve_backend(backend).run(kernel_sum_block, xs, (s.values, h), block_size)
    ys = np.maximum(sums / (s.size * h), 0.0)
    return [DensityPoint(float(x), float(y)) for x, y in zip(xs, ys)]


def scale_density(curve: Sequence[DensityPoint], factor: float) -> list[DensityPoint]:
    """Multiply every ``y`` of ``curve`` by a finite, non-negative ``factor``."""
    factor = float(factor)
    if not math.isfinite(factor) or factor < 0.0:
        raise InvalidArgumentError(f"scale factor must be finite and >= 0, got {factor}")
    return [DensityPoint(p.x, p.y * factor) for p in curve]


def density_to_counts(curve: Sequence[DensityPoint], n: int, bin_width: float) -> list[DensityPoint]:
    r"""
    Put a density curve on a histogram's count axis.

    A count histogram with bin width :math:`w` over :math:`n` observations
    has height :math:`n\,w\,\hat f`, so the curve is scaled by :math:`n w`.
    """
    bin_width = float(bin_width)
    if not math.isfinite(bin_width) or bin_width <= 0.0:
        raise InvalidArgumentError(f"bin_width must be finite and > 0, got {bin_width}")
    if n < 0:
        raise InvalidArgumentError(f"n must be >= 0, got {n}")
    return scale_density(curve, n * bin_width)


def normalize_peak(curve: Sequence[DensityPoint]) -> list[DensityPoint]:
    """Rescale ``curve`` so its largest ``y`` is 1; an all-zero curve is returned as is."""
    if not curve:
        return []
    peak = max(p.y for p in curve)
    if peak <= 0.0:
        return list(curve)
    return [DensityPoint(p.x, p.y / peak) for p in curve]


def violin(
    sample: SampleLike,
    bandwidth: BandwidthSpec = "auto",
    num_points: int = VIOLIN_NUM_POINTS,
    backend: BackendSpec = None,
) -> Optional[ViolinSummary]:
    r"""
    Peak-normalised density profile plus quartiles for a violin plot.

    Returns
    -------
    ViolinSummary or None
        ``None`` for an empty sample (nothing to draw).
    """
    s = Sample.coerce(sample)
    h = resolve_bandwidth(s, bandwidth)
    if s.is_empty:
        return None
    curve = kde(s, h, num_points, backend=backend)
    return ViolinSummary(
        profile=normalize_peak(curve),
        stats=summarize(s, WhiskerMethod.minmax),
        bandwidth=h,
    )
