"""Pytest configuration and fixtures for the simulation workflow tests."""

import sys
from pathlib import Path

import matplotlib
import numpy as np
import pandas as pd
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

matplotlib.use("Agg")


@pytest.fixture
def sample_table():
    """25 scattered samples of a smooth 2D field on [0, 50]^2."""
    rng = np.random.default_rng(42)
    n = 25
    x = rng.uniform(0.0, 50.0, n)
    y = rng.uniform(0.0, 50.0, n)
    value = np.sin(x / 10.0) + np.cos(y / 15.0) + 0.1 * rng.standard_normal(n)
    return pd.DataFrame({"x": x, "y": y, "value": value, "other": 2.0 * value})


@pytest.fixture
def point_data(sample_table):
    from geostats import PointData

    return PointData(table=sample_table, coordnames=("x", "y"))


@pytest.fixture
def grid():
    """26 x 21 grid covering the sample box."""
    from geostats import RegularGrid

    return RegularGrid.from_extent(origin=(0.0, 0.0), extent=(50.0, 50.0), dims=(26, 21))


@pytest.fixture
def problem(point_data, grid):
    from geostats import SimulationProblem

    return SimulationProblem(point_data, grid, "value", nreals=4)


@pytest.fixture
def exponential_variogram():
    from geostats import Variogram

    return Variogram(kind="exponential", range=20.0, sill=1.0)
