"""Tests for worker pools and the solve entry point."""

import numpy as np
import pytest

from solvers import GaussSim, WorkerPool, addprocs, default_pool, nworkers, rmprocs, solve
from solvers.parallel import resolve_n_workers


def _failing_realization(task, seed):
    raise RuntimeError(f"realization failed for seed {seed}")


class FailingSim(GaussSim):
    realize = _failing_realization


def _negate(x):
    if x == 3:
        raise ValueError("bad item 3")
    return -x


@pytest.fixture(autouse=True)
def clean_default_pool():
    rmprocs()
    yield
    rmprocs()


class TestResolveWorkers:

    def test_integer(self):
        assert resolve_n_workers(3) == 3
        assert resolve_n_workers(0) == 0

    def test_auto(self):
        assert resolve_n_workers("auto") >= 1

    @pytest.mark.parametrize("value", ["many", -1])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            resolve_n_workers(value)


class TestWorkerPool:

    def test_serial_without_workers(self):
        pool = WorkerPool()
        assert pool.n_workers == 0
        assert pool.executor is None
        assert pool.map(abs, [-1, -2, 3]) == [1, 2, 3]

    def test_parallel_map_keeps_order(self):
        with WorkerPool(2) as pool:
            assert pool.map(abs, range(-10, 0)) == list(range(10, 0, -1))

    def test_add_workers(self):
        with WorkerPool() as pool:
            assert pool.add_workers(2) == 2
            assert pool.add_workers(1) == 3
            assert pool.executor is not None

    @pytest.mark.parametrize("n", [0, -2, 1.5, True])
    def test_add_workers_invalid(self, n):
        with pytest.raises(ValueError):
            WorkerPool().add_workers(n)

    def test_remove_workers(self):
        pool = WorkerPool(2)
        pool.remove_workers()
        assert pool.n_workers == 0
        assert pool.executor is None


class TestDefaultPool:

    def test_addprocs(self):
        assert nworkers() == 0
        assert default_pool() is None

        pool = addprocs(2)
        assert nworkers() == 2
        assert default_pool() is pool

        addprocs(1)
        assert nworkers() == 3

    def test_rmprocs(self):
        addprocs(1)
        rmprocs()
        assert nworkers() == 0
        assert default_pool() is None


class TestSolve:

    def test_parallel_matches_serial(self, problem, exponential_variogram):
        """Seeds are drawn before dispatch, so results do not depend on workers."""
        serial = solve(problem, GaussSim("value", variogram=exponential_variogram, seed=2017))

        with WorkerPool(2) as pool:
            parallel = solve(
                problem, GaussSim("value", variogram=exponential_variogram, seed=2017), pool=pool
            )

        assert parallel.metrics["value"].n_workers == 2
        assert serial.seeds == parallel.seeds
        assert np.allclose(serial["value"], parallel["value"])

    def test_uses_default_pool(self, problem, exponential_variogram):
        addprocs(2)
        solution = solve(problem, GaussSim("value", variogram=exponential_variogram, seed=1))
        assert solution.metrics["value"].n_workers == 2
        assert solution["value"].shape == (problem.nreals, *problem.domain.dims)


class TestWorkerErrors:

    def test_map_reraises_worker_exception(self):
        with WorkerPool(2) as pool:
            with pytest.raises(ValueError, match="bad item 3"):
                pool.map(_negate, range(6))

    def test_solve_reraises_realization_error(self, problem, exponential_variogram):
        solver = FailingSim("value", variogram=exponential_variogram, seed=1)
        with WorkerPool(2) as pool:
            with pytest.raises(RuntimeError, match="realization failed"):
                solve(problem, solver, pool=pool)

    def test_serial_solve_reraises_realization_error(self, problem, exponential_variogram):
        solver = FailingSim("value", variogram=exponential_variogram, seed=1)
        with pytest.raises(RuntimeError, match="realization failed"):
            solve(problem, solver)

    def test_pool_usable_after_error(self):
        with WorkerPool(2) as pool:
            with pytest.raises(ValueError):
                pool.map(_negate, [3])
            assert pool.map(_negate, [1, 2]) == [-1, -2]
