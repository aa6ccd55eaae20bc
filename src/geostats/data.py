"""Point data with named coordinate columns.

Samples are kept in a pandas DataFrame; a subset of its columns are the
spatial coordinates and every other column is a variable that can be
simulated.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

import numpy as np
import pandas as pd

log = logging.getLogger(__name__)

TAB_SUFFIXES = (".tsv", ".tab")


@dataclass
class PointData:
    """Point samples (rows) with coordinate and variable columns."""

    table: pd.DataFrame
    coordnames: tuple

    def __post_init__(self):
        if isinstance(self.coordnames, str):
            self.coordnames = (self.coordnames,)
        self.coordnames = tuple(self.coordnames)

        if not self.coordnames:
            raise ValueError("At least one coordinate column is required")
        if len(self.coordnames) > 3:
            raise ValueError(f"Expected 1 to 3 coordinates, got {len(self.coordnames)}")
        if len(set(self.coordnames)) != len(self.coordnames):
            raise ValueError(f"Duplicate coordinate names: {self.coordnames}")

        missing = [c for c in self.coordnames if c not in self.table.columns]
        if missing:
            raise KeyError(
                f"Coordinate columns {missing} not found in {list(self.table.columns)}"
            )
        for name in self.coordnames:
            if not pd.api.types.is_numeric_dtype(self.table[name]):
                raise ValueError(f"Coordinate column '{name}' is not numeric")

    def __len__(self) -> int:
        return len(self.table)

    @property
    def npoints(self) -> int:
        return len(self.table)

    @property
    def ndim(self) -> int:
        return len(self.coordnames)

    @property
    def variables(self) -> list:
        """Names of all non-coordinate columns."""
        return [c for c in self.table.columns if c not in self.coordnames]

    @property
    def coordinates(self) -> np.ndarray:
        """Point coordinates, shape (npoints, ndim)."""
        return self.table[list(self.coordnames)].to_numpy(dtype=float)

    def values(self, name: str) -> np.ndarray:
        """Values of one variable as a float array."""
        if name not in self.variables:
            raise KeyError(f"Variable '{name}' not found; available: {self.variables}")
        return self.table[name].to_numpy(dtype=float)

    def bounds(self) -> tuple:
        """Lower and upper corners of the data bounding box."""
        coords = self.coordinates
        return coords.min(axis=0), coords.max(axis=0)

    def dropna(self, variable: str) -> "PointData":
        """Copy without rows where the variable or a coordinate is missing."""
        self.values(variable)
        subset = list(self.coordnames) + [variable]
        table = self.table.dropna(subset=subset).reset_index(drop=True)
        return PointData(table=table, coordnames=self.coordnames)

    def __str__(self) -> str:
        return (
            f"PointData({self.npoints} points, coordinates={list(self.coordnames)}, "
            f"variables={self.variables})"
        )


def read_geotable(
    path,
    coordnames: Sequence[str],
    delimiter: Optional[str] = None,
    **read_kwargs,
) -> PointData:
    """Read point samples from a delimited text file.

    Parameters
    ----------
    path : str or Path
        CSV/TSV file with a header row.
    coordnames : sequence of str
        Columns holding the spatial coordinates (x, y, z order).
    delimiter : str, optional
        Column separator. Inferred from the file suffix when omitted
        (tab for .tsv/.tab, comma otherwise).
    **read_kwargs
        Passed through to ``pandas.read_csv``.

    Returns
    -------
    PointData
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    if delimiter is None:
        delimiter = "\t" if path.suffix.lower() in TAB_SUFFIXES else ","

    table = pd.read_csv(path, sep=delimiter, **read_kwargs)
    data = PointData(table=table, coordnames=tuple(coordnames))
    log.info(f"Loaded {data.npoints} points from {path.name} ({data.ndim}D)")
    return data
