r"""
chartstats.bins
===============
Automatic histogram bin-count selection.

- :func:`sturges` -- :math:`\lceil \log_2 n + 1 \rceil`.
- :func:`freedman_diaconis` -- bin width :math:`2\,\mathrm{IQR}\,n^{-1/3}`,
  falling back to Sturges when the IQR (and therefore the width) is zero.
- :func:`resolve_bins` -- turns a user-facing bin spec (``"auto"``, ``"fd"``,
  ``"sturges"``, an integer or explicit edges) into a count or an edge array.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Sequence, Union

import numpy as np

from .errors import InvalidArgumentError
from .quantiles import iqr
from .sample import Sample, SampleLike

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_BIN_COUNT",
    "BinRule",
    "BinSpec",
    "sturges",
    "freedman_diaconis",
    "resolve_bins",
]

DEFAULT_BIN_COUNT = 10  # returned by both rules for an empty sample


class BinRule(str, Enum):
    r"""
    Named bin-count rules.

    Attributes
    ----------
    auto : str
        Alias for Freedman-Diaconis.
    fd : str
        Freedman-Diaconis.
    sturges : str
        Sturges.
    """

    auto = "auto"
    fd = "fd"
    sturges = "sturges"


BinSpec = Union[str, BinRule, int, Sequence[float], np.ndarray]


def sturges(sample: SampleLike) -> int:
    r"""
    Sturges' rule, :math:`\lceil \log_2 n + 1 \rceil`.

    Returns
    -------
    int
        Bin count; :data:`DEFAULT_BIN_COUNT` for an empty sample, where the
        logarithm is undefined.

    Examples
    --------
    >>> sturges([1, 1, 1, 1])
    3
    """
    n = Sample.coerce(sample).size
    if n == 0:
        return DEFAULT_BIN_COUNT
    return int(math.ceil(math.log2(n) + 1))


def freedman_diaconis(sample: SampleLike) -> int:
    r"""
    Freedman-Diaconis rule.

    .. math::

       w = 2\,\mathrm{IQR}\,n^{-1/3}, \qquad k = \lceil (\max - \min) / w \rceil

    Returns
    -------
    int
        Bin count, at least 1. Falls back to :func:`sturges` whenever the width
        is not strictly positive (zero IQR), and to :data:`DEFAULT_BIN_COUNT`
        for an empty sample.

    Examples
    --------
    >>> freedman_diaconis([1, 1, 1, 1])
    3
    """
    s = Sample.coerce(sample)
    n = s.size
    if n == 0:
        return DEFAULT_BIN_COUNT

    spread = iqr(s)
    if spread == 0.0:
        logger.debug("IQR is zero; Freedman-Diaconis falls back to Sturges")
        return sturges(s)

    width = 2.0 * spread * n ** (-1 / 3)
    if not (width > 0.0 and math.isfinite(width)):
        logger.debug(f"Freedman-Diaconis bin width {width} unusable; falling back to Sturges")
        return sturges(s)

    return max(1, int(math.ceil(s.range / width)))


def resolve_bins(sample: SampleLike, bins: BinSpec = "auto") -> Union[int, np.ndarray]:
    r"""
    Resolve a bin specification.

    Parameters
    ----------
    sample : Sample or array_like
        Observations, used by the named rules.
    bins : {"auto", "fd", "sturges"}, int or sequence of float
        Named rule, positive bin count, or explicit edges.

    Returns
    -------
    int or ndarray
        A positive bin count, or the edges sorted ascending as floats.

    Raises
    ------
    InvalidArgumentError
        Unknown rule name, non-positive count, or malformed edges.
    """
    if isinstance(bins, str):
        try:
            rule = BinRule(bins.lower())
        except ValueError:
            raise InvalidArgumentError(
                f"bins must be one of {[r.value for r in BinRule]}, an int, or a sequence of edges; got {bins!r}"
            ) from None
        if rule is BinRule.sturges:
            return sturges(sample)
        return freedman_diaconis(sample)

    if isinstance(bins, (bool, np.bool_)):
        raise InvalidArgumentError("bins must not be a boolean")

    if isinstance(bins, (int, np.integer)):
        if bins <= 0:
            raise InvalidArgumentError(f"bin count must be positive, got {bins}")
        return int(bins)

    if isinstance(bins, (float, np.floating)):
        if not float(bins).is_integer() or bins <= 0:
            raise InvalidArgumentError(f"bin count must be a positive integer, got {bins}")
        return int(bins)

    try:
        edges = np.array(bins, dtype=float).ravel()
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"bin edges must be real numbers: {e}") from e
    if not np.isfinite(edges).all():
        raise InvalidArgumentError("bin edges must be finite")
    return np.sort(edges)
