"""Geostatistical problem description.

Point data, regular grid domains, simulation problems and variogram
models. Solvers live in the ``solvers`` package.
"""

from .data import PointData, read_geotable
from .domain import RegularGrid
from .problem import SimulationProblem
from .variography import (
    Ellipsoidal,
    EmpiricalVariogram,
    Euclidean,
    Variogram,
    fit_variogram,
    variogram_from_config,
)

__all__ = [
    # Data
    "PointData",
    "read_geotable",
    # Domain
    "RegularGrid",
    # Problem
    "SimulationProblem",
    # Variography
    "Variogram",
    "EmpiricalVariogram",
    "Euclidean",
    "Ellipsoidal",
    "fit_variogram",
    "variogram_from_config",
]
