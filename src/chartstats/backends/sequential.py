r"""
Sequential evaluation backend.

This module provides a single-threaded strategy that evaluates grid blocks
one after another on the calling thread.
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np

from .base import BlockFn, make_blocks

__all__ = ["SequentialBackend"]


class SequentialBackend:
    r"""
    Sequential (single-threaded) evaluation backend.

    The default for interactive sample sizes.

    Examples
    --------
    >>> backend = SequentialBackend()
    >>> backend.run(np.square, np.arange(3.0)).tolist()
    [0.0, 1.0, 4.0]
    """

    name = "sequential"

    def run(
        self,
        fn: BlockFn,
        xs: np.ndarray,
        args: Sequence[Any] = (),
        block_size: int = 10_000,
    ) -> np.ndarray:
        r"""
        Evaluate blocks sequentially on the current thread.

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
        results = np.empty(xs.size, dtype=float)
        for i, j in make_blocks(xs.size, block_size):
            results[i:j] = fn(xs[i:j], *args)
        return results
