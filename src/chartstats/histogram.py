r"""
chartstats.histogram
====================
Partition a sample into contiguous histogram bins.

Bin :math:`i` covers :math:`[e_i, e_{i+1})`, except the last bin, which is
closed on both ends so the sample maximum is always counted. Each bin
reports its raw count and the density

.. math::

   \hat f_i = \frac{c_i}{n\,(e_{i+1} - e_i)},

so that :math:`\sum_i \hat f_i (e_{i+1} - e_i) = 1` when the edges cover the
whole sample.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from .bins import BinSpec, resolve_bins
from .errors import DegenerateInputError, InvalidArgumentError
from .sample import Sample, SampleLike

logger = logging.getLogger(__name__)

__all__ = ["CONSTANT_BIN_WIDTH", "HistogramBin", "bin_edges", "histogram"]

CONSTANT_BIN_WIDTH = 1.0  # nominal width of the single bin for a constant sample


@dataclass(frozen=True)
class HistogramBin:
    r"""
    One histogram bin.

    Attributes
    ----------
    lower_edge, upper_edge : float
        Bin boundaries, ``lower_edge < upper_edge``.
    count : int
        Number of observations in the bin.
    density : float
        ``count / (n * width)``.
    """

    lower_edge: float
    upper_edge: float
    count: int
    density: float

    @property
    def width(self) -> float:
        return self.upper_edge - self.lower_edge

    @property
    def center(self) -> float:
        return 0.5 * (self.lower_edge + self.upper_edge)


def bin_edges(sample: SampleLike, bins: BinSpec = "auto") -> np.ndarray:
    r"""
    Edges that :func:`histogram` would use for ``sample`` and ``bins``.

    Parameters
    ----------
    sample : Sample or array_like
        Observations.
    bins : {"auto", "fd", "sturges"}, int or sequence of float
        Named rule, bin count, or explicit edges.

    Returns
    -------
    ndarray
        Strictly increasing edges, at least two. Empty for an empty sample
        with a count-based spec.

    Raises
    ------
    InvalidArgumentError
        If the spec is malformed or explicit edges have fewer than two
        distinct values.
    """
    s = Sample.coerce(sample)
    resolved = resolve_bins(s, bins)

    if isinstance(resolved, np.ndarray):
        edges = np.unique(resolved)
        if edges.size < 2:
            raise InvalidArgumentError(f"need at least two distinct bin edges, got {resolved.tolist()}")
        return edges

    if s.is_empty:
        return np.empty(0, dtype=float)

    if s.is_constant:
        # at large magnitudes 0.5 is below float resolution
        half = max(0.5 * CONSTANT_BIN_WIDTH, float(np.spacing(abs(s.min))))
        logger.debug(f"Constant sample at {s.min}; emitting one bin of width {CONSTANT_BIN_WIDTH}")
        return np.array([s.min - half, s.min + half])

    edges = np.linspace(s.min, s.max, resolved + 1)
    # pin the outer edges so the extremes land inside the closed range
    edges[0], edges[-1] = s.min, s.max
    # a range near float resolution can round neighbouring edges together
    return np.unique(edges)


def histogram(sample: SampleLike, bins: BinSpec = "auto") -> list[HistogramBin]:
    r"""
    Histogram of a sample.

    Parameters
    ----------
    sample : Sample or array_like
        Observations. Not mutated.
    bins : {"auto", "fd", "sturges"}, int or sequence of float, default "auto"
        ``"auto"``/``"fd"`` pick the count with Freedman-Diaconis and
        ``"sturges"`` with Sturges. An integer gives that many equal-width bins
        over :math:`[\min, \max]`. A sequence is used as explicit edges (sorted,
        duplicates dropped); observations outside them are not counted.

    Returns
    -------
    list of HistogramBin
        Contiguous bins in ascending order. Empty for an empty sample. A
        constant sample yields a single bin of width
        :data:`CONSTANT_BIN_WIDTH` centred on the value, widened to the
        float spacing of the value when that is larger.

    Raises
    ------
    InvalidArgumentError
        If ``bins`` is malformed.
    DegenerateInputError
        If explicit edges are so close that a bin density would overflow.

    Examples
    --------
    >>> [(b.lower_edge, b.upper_edge, b.count) for b in histogram([0, 1, 2, 3], 2)]
    [(0.0, 1.5, 2), (1.5, 3.0, 2)]
    """
    s = Sample.coerce(sample)
    edges = bin_edges(s, bins)
    if s.is_empty or edges.size < 2:
        return []

    widths = np.diff(edges)
    if not np.all(widths > 0):
        raise DegenerateInputError(f"bin edges must be strictly increasing, got {edges.tolist()}")
    counts, _ = np.histogram(s.values, bins=edges)
    with np.errstate(divide="ignore", over="ignore"):
        densities = counts / (s.size * widths)
    if not np.all(np.isfinite(densities)):
        raise DegenerateInputError(f"bin widths too narrow for a finite density: {widths.tolist()}")

    return [
        HistogramBin(
            lower_edge=float(edges[i]),
            upper_edge=float(edges[i + 1]),
            count=int(counts[i]),
            density=float(densities[i]),
        )
        for i in range(counts.size)
    ]
