r"""
chartstats.errors
=================
Typed failures raised by the distribution engine.

Every public function either returns a well-defined value or raises one of
these. Consumers can catch :class:`ChartStatsError` and treat it as
"no data to render".
"""

from __future__ import annotations

__all__ = [
    "ChartStatsError",
    "InvalidArgumentError",
    "InvalidProbabilityError",
    "InvalidBandwidthError",
    "DegenerateInputError",
]


class ChartStatsError(Exception):
    """Base class for all chartstats failures."""


class InvalidArgumentError(ChartStatsError, ValueError):
    r"""
    A scalar parameter or sample value is non-finite or out of range.

    Subclasses :class:`ValueError` so callers that already guard numeric
    input with ``except ValueError`` keep working.
    """


class InvalidProbabilityError(InvalidArgumentError):
    """Quantile probability outside :math:`[0, 1]` or non-finite."""


class InvalidBandwidthError(InvalidArgumentError):
    """KDE bandwidth that is non-finite or not strictly positive."""


class DegenerateInputError(ChartStatsError, ValueError):
    r"""
    Sample carries no usable data and the caller asked for a hard failure.

    Raised only where no documented fallback applies, e.g. by
    :meth:`~chartstats.engine.DistributionEngine.compute` with
    ``require_data=True`` on an empty sample.
    """
