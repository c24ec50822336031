r"""
chartstats.sample
=================
The :class:`Sample` value type consumed by every statistic.

A sample is validated once, at construction: non-finite values are either
rejected or dropped according to :class:`NanPolicy`, and the ascending order
statistics are computed a single time and shared by every function that
needs them (quartiles, fences, bin counts, domains).

Empty samples are valid. Each statistic documents the fallback it returns
for them instead of failing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from numbers import Real
from typing import Any, Hashable, Iterable, Sequence, Union

import numpy as np

from .errors import InvalidArgumentError

__all__ = ["NanPolicy", "Sample", "SampleLike", "group_values"]


class NanPolicy(str, Enum):
    r"""
    Strategies for handling non-finite observations.

    Attributes
    ----------
    raise_ : str
        Reject the sample with :class:`~chartstats.errors.InvalidArgumentError`.
    omit : str
        Drop NaN and infinite values before any computation.
    """

    raise_ = "raise"
    omit = "omit"


@dataclass(frozen=True, eq=False)
class Sample:
    r"""
    Immutable, finite, one-dimensional sample of real numbers.

    Parameters
    ----------
    values : array_like
        Observations. Copied, flattened and converted to ``float``; the
        caller's sequence is never mutated.
    nan_policy : {"raise", "omit"}, default "raise"
        What to do with NaN or infinite observations.

    Attributes
    ----------
    values : ndarray
        Finite observations in their original order (read-only).
    sorted : ndarray
        Ascending copy of :attr:`values` (read-only), computed once.

    Raises
    ------
    InvalidArgumentError
        If the values are not numeric, or contain non-finite entries under
        ``nan_policy="raise"``, or the policy is unknown.

    Examples
    --------
    >>> s = Sample([3, 1, 2])
    >>> s.sorted.tolist()
    [1.0, 2.0, 3.0]
    >>> Sample([1.0, float("nan")], nan_policy="omit").size
    1
    """

    values: np.ndarray
    nan_policy: NanPolicy = NanPolicy.raise_
    sorted: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            policy = NanPolicy(self.nan_policy)
        except ValueError:
            raise InvalidArgumentError(f"Unknown nan_policy: {self.nan_policy!r}") from None

        try:
            arr = np.array(self.values, dtype=float).ravel()
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"Sample values must be real numbers: {e}") from e

        finite = np.isfinite(arr)
        if not finite.all():
            if policy is NanPolicy.raise_:
                bad = int(arr.size - np.count_nonzero(finite))
                raise InvalidArgumentError(
                    f"Sample contains {bad} non-finite value(s); pass nan_policy='omit' to drop them"
                )
            arr = arr[finite]

        arr.setflags(write=False)
        ordered = np.sort(arr)
        ordered.setflags(write=False)

        object.__setattr__(self, "values", arr)
        object.__setattr__(self, "nan_policy", policy)
        object.__setattr__(self, "sorted", ordered)

    @classmethod
    def coerce(cls, data: "SampleLike", nan_policy: Union[NanPolicy, str] = NanPolicy.raise_) -> "Sample":
        """Return ``data`` unchanged if it is already a :class:`Sample`, else wrap it."""
        if isinstance(data, Sample):
            return data
        return cls(data, nan_policy=nan_policy)

    @property
    def size(self) -> int:
        return int(self.values.size)

    def __len__(self) -> int:
        return self.size

    @property
    def is_empty(self) -> bool:
        return self.values.size == 0

    @property
    def min(self) -> float:
        r"""Smallest observation (``0.0`` for an empty sample)."""
        return float(self.sorted[0]) if self.sorted.size else 0.0

    @property
    def max(self) -> float:
        r"""Largest observation (``0.0`` for an empty sample)."""
        return float(self.sorted[-1]) if self.sorted.size else 0.0

    @property
    def range(self) -> float:
        return self.max - self.min

    @property
    def is_constant(self) -> bool:
        r"""``True`` when the sample is non-empty and every value is equal."""
        return bool(self.sorted.size > 0 and self.sorted[0] == self.sorted[-1])


SampleLike = Union[Sample, Sequence[float], np.ndarray, Any]


def group_values(records: Iterable[tuple[Hashable, Any]]) -> dict[Hashable, list[float]]:
    r"""
    Split ``(category, value)`` records into one list of values per category.

    Categories keep the order in which they are first seen. Values that are
    not real numbers (strings, ``None``, booleans) or are not finite are
    dropped, so a category whose records are all unusable maps to an empty
    list.

    Examples
    --------
    >>> group_values([("a", 1), ("b", "x"), ("a", float("nan")), ("b", 2.5)])
    {'a': [1.0], 'b': [2.5]}
    """
    groups: dict[Hashable, list[float]] = {}
    for category, value in records:
        bucket = groups.setdefault(category, [])
        if isinstance(value, (bool, np.bool_)) or not isinstance(value, Real):
            continue
        value = float(value)
        if np.isfinite(value):
            bucket.append(value)
    return groups
