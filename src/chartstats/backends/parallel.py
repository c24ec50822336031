r"""
Parallel evaluation backends.

This module provides:

Classes
    :class:`ThreadBackend` — Thread-based parallelism using ThreadPoolExecutor
    :class:`ProcessBackend` — Process-based parallelism using ProcessPoolExecutor

Both reassemble blocks by index, so their output is identical to
:class:`~chartstats.backends.sequential.SequentialBackend`.
"""

from __future__ import annotations

import logging
import multiprocessing as mp
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from typing import Any, Sequence

import numpy as np

from .base import BlockFn, make_blocks, worker_run_block

logger = logging.getLogger(__name__)

__all__ = [
    "ThreadBackend",
    "ProcessBackend",
]

# Default configuration constants
_CHUNKS_PER_WORKER = 4  # Number of chunks per worker for load balancing


def _split(n: int, n_workers: int, chunks_per_worker: int, block_size: int) -> list[tuple[int, int]]:
    """Blocks no larger than ``block_size``, spread over the workers."""
    target = max(1, -(-n // (n_workers * chunks_per_worker)))
    return make_blocks(n, min(block_size, target))


class ThreadBackend:
    r"""
    Thread-based parallel evaluation backend.

    Uses :class:`concurrent.futures.ThreadPoolExecutor`. Effective because the
    NumPy kernels doing the work release the GIL.

    Parameters
    ----------
    n_workers : int
        Number of worker threads to use.
    chunks_per_worker : int, default 4
        Number of work chunks per worker for load balancing.

    Examples
    --------
    >>> backend = ThreadBackend(n_workers=4)
    >>> backend.run(np.square, np.arange(3.0)).tolist()
    [0.0, 1.0, 4.0]
    """

    name = "thread"

    def __init__(self, n_workers: int, chunks_per_worker: int = _CHUNKS_PER_WORKER):
        if n_workers <= 0:
            raise ValueError("n_workers must be positive")
        if chunks_per_worker <= 0:
            raise ValueError("chunks_per_worker must be positive")
        self.n_workers = n_workers
        self.chunks_per_worker = chunks_per_worker

    def run(
        self,
        fn: BlockFn,
        xs: np.ndarray,
        args: Sequence[Any] = (),
        block_size: int = 10_000,
    ) -> np.ndarray:
        r"""
        Evaluate blocks in parallel using threads.

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
        blocks = _split(xs.size, self.n_workers, self.chunks_per_worker, block_size)
        if not blocks:
            return results
        max_workers = min(self.n_workers, len(blocks))
        logger.debug(f"Evaluating {xs.size} grid points in {len(blocks)} blocks on {max_workers} threads")

        with ThreadPoolExecutor(max_workers=max_workers) as ex:
            futs = {ex.submit(worker_run_block, fn, xs[i:j], tuple(args)): (i, j) for i, j in blocks}
            for f in as_completed(futs):
                i, j = futs[f]
                results[i:j] = f.result()

        return results


class ProcessBackend:
    r"""
    Process-based parallel evaluation backend.

    Uses :class:`concurrent.futures.ProcessPoolExecutor` with the spawn
    context. Only worth the pickling cost for very large samples.

    Parameters
    ----------
    n_workers : int
        Number of worker processes to use.
    chunks_per_worker : int, default 4
        Number of work chunks per worker for load balancing.

    Notes
    -----
    ``fn`` and ``args`` must be pickleable, so ``fn`` has to be a module-level
    function.
    """

    name = "process"

    def __init__(self, n_workers: int, chunks_per_worker: int = _CHUNKS_PER_WORKER):
        if n_workers <= 0:
            raise ValueError("n_workers must be positive")
        if chunks_per_worker <= 0:
            raise ValueError("chunks_per_worker must be positive")
        self.n_workers = n_workers
        self.chunks_per_worker = chunks_per_worker

    def run(
        self,
        fn: BlockFn,
        xs: np.ndarray,
        args: Sequence[Any] = (),
        block_size: int = 10_000,
    ) -> np.ndarray:
        r"""
        Evaluate blocks in parallel using processes.

        Parameters
        ----------
        fn : callable
            Module-level block function ``fn(xs_block, *args) -> ndarray``.
        xs : ndarray
            Evaluation grid.
        args : sequence, optional
            Extra positional arguments for ``fn``; must be pickleable.
        block_size : int, default 10_000
            Maximum grid points per block.

        Returns
        -------
        np.ndarray
            Array with shape ``(len(xs),)``.
        """
        results = np.empty(xs.size, dtype=float)
        blocks = _split(xs.size, self.n_workers, self.chunks_per_worker, block_size)
        if not blocks:
            return results
        max_workers = min(self.n_workers, len(blocks))
        logger.debug(f"Evaluating {xs.size} grid points in {len(blocks)} blocks on {max_workers} processes")

        with ProcessPoolExecutor(
            max_workers=max_workers,
            mp_context=mp.get_context("spawn"),
        ) as ex:
            futs = {ex.submit(worker_run_block, fn, xs[i:j], tuple(args)): (i, j) for i, j in blocks}
            try:
                for f in as_completed(futs):
                    i, j = futs[f]
                    results[i:j] = f.result()
            except KeyboardInterrupt:  # pragma: no cover
                for f in futs:
                    f.cancel()
                raise

        return results
