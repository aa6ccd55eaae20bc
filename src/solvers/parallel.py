"""Worker processes and the ``solve`` entry point.

Realizations are independent, so a solve fans them out over a process
pool. A module-level default pool plays the role of a runtime-wide
"add worker processes" call: request workers once, then every ``solve``
without an explicit pool uses them.
"""

import logging
import os
from concurrent.futures import ProcessPoolExecutor
from typing import Callable, Iterable, Optional

log = logging.getLogger(__name__)


def resolve_n_workers(n) -> int:
    """Worker count from config: an int or "auto" (all cores but one)."""
    if isinstance(n, str):
        if n.lower() != "auto":
            raise ValueError(f"workers must be an integer or 'auto', got '{n}'")
        return max(1, (os.cpu_count() or 1) - 1)
    n = int(n)
    if n < 0:
        raise ValueError(f"workers must be non-negative, got {n}")
    return n


class WorkerPool:
    """Resizable pool of worker processes.

    With zero workers everything runs serially in the calling process.
    The executor is created lazily and rebuilt after a resize.
    """

    def __init__(self, n_workers: int = 0):
        self._n_workers = resolve_n_workers(n_workers)
        self._executor: Optional[ProcessPoolExecutor] = None

    @property
    def n_workers(self) -> int:
        return self._n_workers

    @property
    def executor(self) -> Optional[ProcessPoolExecutor]:
        if self._n_workers == 0:
            return None
        if self._executor is None:
            log.info(f"Starting {self._n_workers} worker processes")
            self._executor = ProcessPoolExecutor(max_workers=self._n_workers)
        return self._executor

    def add_workers(self, n: int) -> int:
        """Request ``n`` more worker processes; returns the new pool size."""
        if isinstance(n, bool) or int(n) != n or n < 1:
            raise ValueError(f"Number of workers to add must be a positive integer, got {n}")
        self._shutdown_executor()
        self._n_workers += int(n)
        return self._n_workers

    def remove_workers(self):
        """Stop all workers; subsequent work runs serially."""
        self._shutdown_executor()
        self._n_workers = 0

    def map(self, fn: Callable, iterable: Iterable) -> list:
        """Ordered map of ``fn`` over ``iterable``, in parallel when possible."""
        executor = self.executor
        if executor is None:
            return [fn(item) for item in iterable]
        return list(executor.map(fn, iterable))

    def shutdown(self):
        self._shutdown_executor()

    def _shutdown_executor(self):
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
        return False

    def __repr__(self) -> str:
        return f"WorkerPool(n_workers={self._n_workers})"


# =============================================================================
# Default pool
# =============================================================================

_default_pool: Optional[WorkerPool] = None


def default_pool() -> Optional[WorkerPool]:
    return _default_pool


def addprocs(n: int) -> WorkerPool:
    """Add ``n`` worker processes to the default pool (creating it if needed)."""
    global _default_pool
    if _default_pool is None:
        _default_pool = WorkerPool()
    total = _default_pool.add_workers(n)
    log.info(f"Default pool now has {total} workers")
    return _default_pool


def nworkers() -> int:
    return 0 if _default_pool is None else _default_pool.n_workers


def rmprocs():
    """Shut down and discard the default pool."""
    global _default_pool
    if _default_pool is not None:
        _default_pool.shutdown()
    _default_pool = None


def solve(problem, solver, pool: Optional[WorkerPool] = None):
    """Solve a simulation problem, using the default pool if none is given.

    Parameters
    ----------
    problem : SimulationProblem
    solver : SimulationSolver
    pool : WorkerPool, optional

    Returns
    -------
    SimulationSolution
    """
    if pool is None:
        pool = _default_pool
    return solver.solve(problem, pool=pool)
