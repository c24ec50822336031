"""
Evaluation backends for kernel density estimation.

This subpackage provides pluggable strategies for evaluating a density
estimate over its grid:

CPU Backends
    :class:`SequentialBackend` — Single-threaded evaluation
    :class:`ThreadBackend` — Thread-based parallelism
    :class:`ProcessBackend` — Process-based parallelism

Utilities
    :func:`make_blocks` — Chunking helper for splitting the grid
    :func:`worker_run_block` — Top-level worker for process pools
    :func:`check_backend` — Validate a backend setting
    :func:`resolve_backend` — Build a backend from a name

Protocol
    :class:`ExecutionBackend` — Interface for custom backends
"""

from __future__ import annotations

import os
from typing import Optional, Union

from ..errors import InvalidArgumentError
from .base import ExecutionBackend, make_blocks, worker_run_block
from .parallel import ProcessBackend, ThreadBackend
from .sequential import SequentialBackend

BackendSpec = Union[None, str, ExecutionBackend]

BACKEND_NAMES = ("sequential", "thread", "process")


def check_backend(backend: BackendSpec) -> None:
    r"""
    Validate a backend setting without building the backend.

    Raises
    ------
    InvalidArgumentError
        If ``backend`` is an unknown name or an object without a ``run`` method.
    """
    if backend is None:
        return
    if isinstance(backend, str):
        if backend.lower() not in BACKEND_NAMES:
            raise InvalidArgumentError(f"backend must be one of {BACKEND_NAMES}, got {backend!r}")
        return
    if not callable(getattr(backend, "run", None)):
        raise InvalidArgumentError("backend must be a name or an object with a run() method")


def resolve_backend(backend: BackendSpec = None, n_workers: Optional[int] = None) -> ExecutionBackend:
    r"""
    Return an evaluation backend.

    Parameters
    ----------
    backend : {None, "sequential", "thread", "process"} or ExecutionBackend
        ``None`` means sequential. Objects with a ``run`` method are returned
        unchanged.
    n_workers : int, optional
        Worker count for the parallel backends; defaults to ``os.cpu_count()``.

    Returns
    -------
    ExecutionBackend

    Raises
    ------
    InvalidArgumentError
        If ``backend`` is an unknown name or lacks a ``run`` method.
    """
    check_backend(backend)
    if backend is None:
        return SequentialBackend()
    if not isinstance(backend, str):
        return backend

    workers = n_workers or os.cpu_count() or 1
    name = backend.lower()
    if name == "sequential":
        return SequentialBackend()
    if name == "thread":
        return ThreadBackend(n_workers=workers)
    return ProcessBackend(n_workers=workers)


__all__ = [
    "BackendSpec",
    "BACKEND_NAMES",
    "ExecutionBackend",
    "SequentialBackend",
    "ThreadBackend",
    "ProcessBackend",
    "make_blocks",
    "worker_run_block",
    "check_backend",
    "resolve_backend",
]
