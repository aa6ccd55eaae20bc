"""Simulation solver framework.

Solver Hierarchy:
-----------------
SimulationSolver (abstract base - parameters, seeds, fan-out, metrics)
└── GaussSim (kriging-conditioned Gaussian random fields via gstools)

Realizations are distributed over a WorkerPool; ``addprocs`` grows the
default pool used by ``solve``.
"""

from .base import SimulationSolver
from .datastructures import (
    Parameters,
    GaussSimParameters,
    Metrics,
    RealizationTask,
    SimulationSolution,
)
from .gaussian import GaussSim, simulate_realization
from .parallel import WorkerPool, addprocs, default_pool, nworkers, rmprocs, solve


__all__ = [
    # Base solver
    "SimulationSolver",
    # Data structures
    "Parameters",
    "GaussSimParameters",
    "Metrics",
    "RealizationTask",
    "SimulationSolution",
    # Gaussian simulation
    "GaussSim",
    "simulate_realization",
    # Parallel
    "WorkerPool",
    "addprocs",
    "default_pool",
    "nworkers",
    "rmprocs",
    "solve",
]
