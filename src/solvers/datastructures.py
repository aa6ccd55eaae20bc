"""Data structures for solver configuration and results.

Structure:
- Parameters: Input configuration per variable (logged to MLflow at start)
- RealizationTask: Picklable unit of work shipped to worker processes
- Metrics: Output results per variable (logged to MLflow at end)
- SimulationSolution: Realizations on the grid
"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from geostats.domain import RegularGrid
from geostats.variography import Variogram, variogram_from_config

KRIGING_TYPES = ("ordinary", "simple")


# ========================================================
# Parameters (Input Configuration)
# ========================================================


@dataclass
class Parameters:
    """Base simulation parameters shared by all solvers."""

    seed: Optional[int] = None
    method: str = ""

    def to_mlflow(self) -> dict:
        """Flat dict of loggable values (None logged as "none")."""
        return _flatten(asdict(self))

    def to_dataframe(self):
        return pd.DataFrame([self.to_mlflow()])


@dataclass
class GaussSimParameters(Parameters):
    """Gaussian simulation parameters for one variable."""

    variogram: Variogram = field(default_factory=Variogram)
    kriging: str = "ordinary"
    mean: Optional[float] = None  # simple kriging mean, defaults to data mean
    method: str = "GaussSim"

    def __post_init__(self):
        if isinstance(self.variogram, Mapping):
            self.variogram = variogram_from_config(self.variogram)
        self.kriging = self.kriging.lower()
        if self.kriging not in KRIGING_TYPES:
            raise ValueError(f"kriging must be one of {KRIGING_TYPES}, got '{self.kriging}'")


def _flatten(d: dict, prefix: str = "") -> dict:
    flat = {}
    for key, value in d.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, prefix=f"{name}."))
        elif isinstance(value, (list, tuple)):
            flat[name] = ",".join(str(v) for v in value)
        elif value is None:
            flat[name] = "none"
        else:
            flat[name] = value
    return flat


# ========================================================
# Work unit
# ========================================================


@dataclass
class RealizationTask:
    """Everything a worker needs to draw one realization of a variable."""

    variable: str
    axes: tuple  # 1D node coordinates per axis
    cond_pos: np.ndarray  # (n, ndim)
    cond_val: np.ndarray  # (n,)
    variogram: Variogram
    kriging: str = "ordinary"
    mean: Optional[float] = None

    @property
    def dims(self) -> tuple:
        return tuple(len(a) for a in self.axes)

    @property
    def ndim(self) -> int:
        return len(self.axes)


# ========================================================
# Metrics (Output Results)
# ========================================================


@dataclass
class Metrics:
    """Solve metrics for one variable."""

    nreals: int = 0
    n_workers: int = 0
    n_conditioning: int = 0
    wall_time_seconds: float = 0.0
    realization_mean: float = 0.0
    realization_std: float = 0.0

    def to_mlflow(self, prefix: str = "") -> dict:
        return {f"{prefix}{k}": float(v) for k, v in asdict(self).items()}

    def to_dataframe(self):
        return pd.DataFrame([asdict(self)])


# ========================================================
# Solution
# ========================================================


@dataclass
class SimulationSolution:
    """Realizations of each variable, shape (nreals, *domain.dims)."""

    domain: RegularGrid
    realizations: Dict[str, np.ndarray]
    seeds: Dict[str, List[int]] = field(default_factory=dict)
    metrics: Dict[str, Metrics] = field(default_factory=dict)

    def __getitem__(self, variable: str) -> np.ndarray:
        if variable not in self.realizations:
            raise KeyError(f"No realizations for '{variable}'; available: {self.variables}")
        return self.realizations[variable]

    @property
    def variables(self) -> list:
        return list(self.realizations)

    @property
    def nreals(self) -> int:
        first = next(iter(self.realizations.values()), None)
        return 0 if first is None else first.shape[0]

    def mean(self, variable: str) -> np.ndarray:
        """E-type mean across realizations."""
        return self[variable].mean(axis=0)

    def variance(self, variable: str) -> np.ndarray:
        """Variance across realizations."""
        return self[variable].var(axis=0)

    def to_dataframe(self, variable: str) -> pd.DataFrame:
        """One row per grid node: coordinates, then one column per realization."""
        reals = self[variable]
        coords = self.domain.coordinates()
        names = ["x", "y", "z"][: self.domain.ndim]
        df = pd.DataFrame(coords, columns=names)
        for i, real in enumerate(reals):
            df[f"{variable}_{i + 1}"] = real.ravel()
        return df

    def __str__(self) -> str:
        lines = [f"SimulationSolution on {self.domain}"]
        for var in self.variables:
            reals = self[var]
            lines.append(
                f"  {var}: {reals.shape[0]} realizations, "
                f"mean={reals.mean():.4g}, std={reals.std():.4g}"
            )
        return "\n".join(lines)
