r"""
Base classes and utilities for evaluation backends.

This module provides:

Protocol
    :class:`ExecutionBackend` — Interface for block-wise evaluation strategies

Functions
    :func:`make_blocks` — Chunking helper for splitting an evaluation grid
    :func:`worker_run_block` — Top-level worker for process-based parallelism
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, Sequence

import numpy as np

__all__ = [
    "BlockFn",
    "ExecutionBackend",
    "make_blocks",
    "worker_run_block",
]

BlockFn = Callable[..., np.ndarray]


def make_blocks(n: int, block_size: int = 10_000) -> list[tuple[int, int]]:
    r"""
    Partition an integer range :math:`[0, n)` into half-open blocks :math:`(i, j)`.

    Parameters
    ----------
    n : int
        Total number of items.
    block_size : int, default: 10_000
        Target block length.

    Returns
    -------
    list of tuple[int, int]
        List of ``(i, j)`` index pairs covering ``[0, n)``.

    Examples
    --------
    >>> make_blocks(5, block_size=2)
    [(0, 2), (2, 4), (4, 5)]
    """
    if block_size <= 0:
        raise ValueError("block_size must be positive")
    blocks = []
    i = 0
    while i < n:
        j = min(i + block_size, n)
        blocks.append((i, j))
        i = j
    return blocks


def worker_run_block(fn: BlockFn, xs: np.ndarray, args: Sequence[Any]) -> np.ndarray:
    r"""
    Evaluate ``fn`` on one block of grid points in a **separate worker**.

    Parameters
    ----------
    fn : callable
        Module-level function ``fn(xs, *args) -> ndarray`` returning one value
        per grid point. Must be pickleable when used with a process backend.
    xs : ndarray
        Grid points of this block.
    args : sequence
        Extra positional arguments forwarded to ``fn``.

    Returns
    -------
    ndarray
        Float array with the same length as ``xs``.
    """
    return np.asarray(fn(xs, *args), dtype=float)


class ExecutionBackend(Protocol):
    r"""
    Protocol defining the interface for evaluation backends.

    A backend splits a 1-D evaluation grid into blocks, evaluates a block
    function on each, and reassembles the results in grid order. Results must
    not depend on the backend.
    """

    def run(
        self,
        fn: BlockFn,
        xs: np.ndarray,
        args: Sequence[Any] = (),
        block_size: int = 10_000,
    ) -> np.ndarray:
        r"""
        Evaluate ``fn`` over ``xs`` block by block.

        Parameters
        ----------
        fn : callable
            Block function ``fn(xs_block, *args) -> ndarray``.
        xs : ndarray
            Evaluation grid.
        args : sequence, optional
            Extra positional arguments for ``fn``.
        block_size : int, default 10_000
            Maximum grid points per block.

        Returns
        -------
        np.ndarray
            Array with shape ``(len(xs),)``.
        """
        ...
