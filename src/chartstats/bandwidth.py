r"""
chartstats.bandwidth
====================
Kernel bandwidth selection.

Silverman's rule of thumb for a Gaussian kernel,

.. math::

   h = 1.06\,\hat\sigma\,n^{-1/5},

with :math:`\hat\sigma` the *population* standard deviation (``ddof=0``).
"""

from __future__ import annotations

import logging
import math
from typing import Union

import numpy as np

from .errors import InvalidBandwidthError
from .sample import Sample, SampleLike

logger = logging.getLogger(__name__)

__all__ = [
    "EMPTY_SAMPLE_BANDWIDTH",
    "FALLBACK_BANDWIDTH",
    "BandwidthSpec",
    "silverman",
    "resolve_bandwidth",
    "validate_bandwidth",
]

EMPTY_SAMPLE_BANDWIDTH = 1.0  # silverman([]) by convention
FALLBACK_BANDWIDTH = 1.0  # used by "auto" when the rule degenerates to 0

BandwidthSpec = Union[str, float]


def silverman(sample: SampleLike) -> float:
    r"""
    Silverman's rule-of-thumb bandwidth.

    Parameters
    ----------
    sample : Sample or array_like
        Observations.

    Returns
    -------
    float
        :math:`1.06\,\sigma_{pop}\,n^{-1/5}`. An empty sample returns ``1.0``
        (a safe default, not a statistical estimate). A single-element or
        constant sample returns ``0.0``, which :func:`~chartstats.density.kde`
        rejects; use :func:`resolve_bandwidth` to get a usable value.

    Examples
    --------
    >>> silverman([])
    1.0
    >>> silverman([5])
    0.0
    """
    s = Sample.coerce(sample)
    n = s.size
    if n == 0:
        return EMPTY_SAMPLE_BANDWIDTH
    if s.is_constant:
        # np.std can leave rounding residue on repeated values
        return 0.0
    sigma = float(np.std(s.values, ddof=0))
    return 1.06 * sigma * n ** (-1 / 5)


def validate_bandwidth(bandwidth: float) -> float:
    """Return ``bandwidth`` as a float, raising if it is non-finite or not positive."""
    try:
        h = float(bandwidth)
    except (TypeError, ValueError):
        raise InvalidBandwidthError(f"bandwidth must be a positive number, got {bandwidth!r}") from None
    if not math.isfinite(h) or h <= 0.0:
        raise InvalidBandwidthError(f"bandwidth must be finite and > 0, got {h}")
    return h


def resolve_bandwidth(sample: SampleLike, bandwidth: BandwidthSpec = "auto") -> float:
    r"""
    Turn a bandwidth specification into a strictly positive number.

    Parameters
    ----------
    sample : Sample or array_like
        Observations used by ``"auto"``.
    bandwidth : {"auto"} or float, default "auto"
        ``"auto"`` applies :func:`silverman`; a number is validated and
        returned unchanged.

    Returns
    -------
    float
        Usable bandwidth. When Silverman's rule gives ``0`` (single value or
        constant sample) :data:`FALLBACK_BANDWIDTH` is returned instead.

    Raises
    ------
    InvalidBandwidthError
        If an explicit bandwidth is non-finite or :math:`\le 0`, or the string
        is not ``"auto"``.
    """
    if isinstance(bandwidth, str):
        if bandwidth.lower() != "auto":
            raise InvalidBandwidthError(f"bandwidth must be 'auto' or a number, got {bandwidth!r}")
        h = silverman(sample)
        if h <= 0.0 or not math.isfinite(h):
            logger.warning(
                f"Silverman bandwidth is {h} for a degenerate sample; using fallback {FALLBACK_BANDWIDTH}"
            )
            return FALLBACK_BANDWIDTH
        return h
    return validate_bandwidth(bandwidth)
