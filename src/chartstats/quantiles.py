r"""
chartstats.quantiles
====================
Order-statistic interpolation.

Quantiles use linear interpolation between adjacent order statistics
(Hyndman & Fan type 7, the default of R and NumPy):

.. math::

   h = (n - 1)\,p, \qquad
   Q(p) = x_{(\lfloor h \rfloor)}\,(1 - \{h\}) + x_{(\lceil h \rceil)}\,\{h\}

where :math:`x_{(k)}` is the zero-based :math:`k`-th order statistic and
:math:`\{h\}` the fractional part of :math:`h`.
"""

from __future__ import annotations

import math
from typing import Iterable, NamedTuple

import numpy as np

from .errors import InvalidProbabilityError
from .sample import Sample, SampleLike

__all__ = ["Quartiles", "quantile", "quantiles", "quartiles", "iqr"]


class Quartiles(NamedTuple):
    """First quartile, median and third quartile."""

    q1: float
    q2: float
    q3: float


def _check_probability(p: float) -> float:
    try:
        p = float(p)
    except (TypeError, ValueError):
        raise InvalidProbabilityError(f"probability must be a real number, got {p!r}") from None
    if not math.isfinite(p) or p < 0.0 or p > 1.0:
        raise InvalidProbabilityError(f"probability must be in [0, 1], got {p}")
    return p


def _interpolate(ordered: np.ndarray, p: float) -> float:
    n = ordered.size
    if n == 0:
        return 0.0
    if n == 1 or p <= 0.0:
        return float(ordered[0])
    if p >= 1.0:
        return float(ordered[-1])

    index = (n - 1) * p
    lower = math.floor(index)
    upper = math.ceil(index)
    if lower == upper:
        return float(ordered[lower])
    weight = index - lower
    a, b = float(ordered[lower]), float(ordered[upper])
    # rounding must not push the value outside [a, b]
    return min(max(a * (1.0 - weight) + b * weight, a), b)


def quantile(sample: SampleLike, p: float) -> float:
    r"""
    Interpolated quantile of a sample.

    Parameters
    ----------
    sample : Sample or array_like
        Observations. Not mutated.
    p : float
        Probability in :math:`[0, 1]`.

    Returns
    -------
    float
        :math:`Q(p)`. ``p = 0`` gives the minimum, ``p = 1`` the maximum and a
        one-element sample gives that element for every ``p``. An empty sample
        returns ``0.0``.

    Raises
    ------
    InvalidProbabilityError
        If ``p`` is non-finite or outside :math:`[0, 1]`.

    Examples
    --------
    >>> quantile([1, 2, 3, 4, 5], 0.25)
    2.0
    >>> quantile([0, 10], 0.3)
    3.0
    """
    p = _check_probability(p)
    s = Sample.coerce(sample)
    return _interpolate(s.sorted, p)


def quantiles(sample: SampleLike, probabilities: Iterable[float]) -> dict[float, float]:
    r"""
    Several quantiles over one shared sort.

    Returns
    -------
    dict[float, float]
        Mapping :math:`p \mapsto Q(p)` in the order given.
    """
    ps = [_check_probability(p) for p in probabilities]
    s = Sample.coerce(sample)
    return {p: _interpolate(s.sorted, p) for p in ps}


def quartiles(sample: SampleLike) -> Quartiles:
    r"""
    :math:`(Q(0.25), Q(0.5), Q(0.75))` of the sample.

    Examples
    --------
    >>> quartiles([1, 2, 3, 4, 5])
    Quartiles(q1=2.0, q2=3.0, q3=4.0)
    """
    s = Sample.coerce(sample)
    return Quartiles(
        q1=_interpolate(s.sorted, 0.25),
        q2=_interpolate(s.sorted, 0.5),
        q3=_interpolate(s.sorted, 0.75),
    )


def iqr(sample: SampleLike) -> float:
    r"""Interquartile range :math:`Q_3 - Q_1` (``0.0`` for an empty sample)."""
    q = quartiles(sample)
    return q.q3 - q.q1
