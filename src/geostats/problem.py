"""Simulation problem: data + domain + variables + number of realizations."""

import logging

import numpy as np
import pandas as pd

from .data import PointData
from .domain import RegularGrid

log = logging.getLogger(__name__)


class SimulationProblem:
    """Conditional simulation problem on a regular grid.

    Parameters
    ----------
    data : PointData
        Conditioning samples.
    domain : RegularGrid
        Grid on which realizations are generated.
    variables : str or sequence of str
        Variable(s) of ``data`` to simulate.
    nreals : int
        Number of realizations per variable.
    """

    def __init__(self, data: PointData, domain: RegularGrid, variables, nreals: int):
        if isinstance(variables, str):
            variables = (variables,)
        variables = tuple(variables)
        if not variables:
            raise ValueError("At least one variable is required")

        for name in variables:
            if name not in data.variables:
                raise KeyError(
                    f"Variable '{name}' not found in data; available: {data.variables}"
                )
        if data.ndim != domain.ndim:
            raise ValueError(
                f"Data is {data.ndim}D but domain is {domain.ndim}D"
            )
        if int(nreals) != nreals or nreals < 1:
            raise ValueError(f"nreals must be a positive integer, got {nreals}")

        self.data = data
        self.domain = domain
        self.variables = variables
        self.nreals = int(nreals)

    def conditioning(self, variable: str) -> tuple:
        """Conditioning data for one variable, mapped onto grid nodes.

        Points with missing values or outside the domain are dropped.
        Several points on the same node are averaged.

        Returns
        -------
        coords : np.ndarray
            Node coordinates, shape (n, ndim).
        values : np.ndarray
            Conditioning values, shape (n,).
        """
        if variable not in self.variables:
            raise KeyError(f"'{variable}' is not a problem variable {self.variables}")

        data = self.data.dropna(variable)
        coords = data.coordinates
        values = data.values(variable)

        inside = self.domain.contains(coords)
        n_outside = int((~inside).sum())
        if n_outside:
            log.warning(f"Dropping {n_outside} '{variable}' samples outside the domain")
        coords, values = coords[inside], values[inside]

        nodes = self.domain.nearest_node(coords)
        mapped = pd.Series(values).groupby(nodes).mean()
        node_coords = self.domain.coordinates()[mapped.index.to_numpy()]
        return node_coords, mapped.to_numpy(dtype=float)

    def __str__(self) -> str:
        return (
            f"SimulationProblem\n"
            f"  domain:       {self.domain}\n"
            f"  data:         {self.data.npoints} points\n"
            f"  variables:    {', '.join(self.variables)}\n"
            f"  realizations: {self.nreals}"
        )

    __repr__ = __str__

