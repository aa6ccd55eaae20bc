"""Save and load simulation solutions as zarr groups.

Layout: one array per variable with shape (nreals, *dims); grid geometry,
seeds and metrics are stored in the group attributes.
"""

import logging
from dataclasses import asdict
from pathlib import Path

import numpy as np
import zarr

from geostats.domain import RegularGrid
from solvers.datastructures import Metrics, SimulationSolution

log = logging.getLogger(__name__)


def ensure_output_dir(path) -> Path:
    """Create (if needed) and return an output directory."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_solution(solution: SimulationSolution, path) -> Path:
    """Write a solution to a zarr group at ``path`` (overwritten)."""
    path = Path(path)
    ensure_output_dir(path.parent)

    zarr.save_group(str(path), **{var: solution[var] for var in solution.variables})

    root = zarr.open_group(str(path), mode="a")
    root.attrs.update(
        {
            "variables": solution.variables,
            "dims": list(solution.domain.dims),
            "origin": list(solution.domain.origin),
            "spacing": list(solution.domain.spacing),
            "seeds": {var: [int(s) for s in seeds] for var, seeds in solution.seeds.items()},
            "metrics": {var: asdict(m) for var, m in solution.metrics.items()},
        }
    )
    log.info(f"Saved {solution.nreals} realizations of {solution.variables} to {path}")
    return path


def load_solution(path) -> SimulationSolution:
    """Read a solution written by ``save_solution``."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Solution not found: {path}")

    root = zarr.open_group(str(path), mode="r")
    attrs = dict(root.attrs)
    domain = RegularGrid(
        dims=tuple(attrs["dims"]),
        origin=tuple(attrs["origin"]),
        spacing=tuple(attrs["spacing"]),
    )
    realizations = {var: np.asarray(root[var][:]) for var in attrs["variables"]}
    seeds = {var: list(s) for var, s in attrs.get("seeds", {}).items()}
    metrics = {var: Metrics(**m) for var, m in attrs.get("metrics", {}).items()}
    return SimulationSolution(
        domain=domain, realizations=realizations, seeds=seeds, metrics=metrics
    )
