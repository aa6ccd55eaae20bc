"""Regular grid domain.

Nodes are evenly spaced along each axis. Flattened node arrays use C
order over ``dims`` (x varies slowest), which matches the "structured"
layout of gstools fields with shape ``(nx, ny, nz)``.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np


@dataclass(frozen=True)
class RegularGrid:
    """Regular grid of ``prod(dims)`` nodes starting at ``origin``."""

    dims: tuple
    origin: Optional[tuple] = None
    spacing: Optional[tuple] = None

    def __post_init__(self):
        dims = tuple(int(n) for n in np.atleast_1d(self.dims))
        if not 1 <= len(dims) <= 3:
            raise ValueError(f"Grid must have 1 to 3 dimensions, got {len(dims)}")
        if any(n < 1 for n in dims):
            raise ValueError(f"Grid dims must be positive, got {dims}")

        origin = (0.0,) * len(dims) if self.origin is None else self.origin
        spacing = (1.0,) * len(dims) if self.spacing is None else self.spacing
        origin = tuple(float(v) for v in np.atleast_1d(origin))
        spacing = tuple(float(v) for v in np.atleast_1d(spacing))

        if len(origin) != len(dims) or len(spacing) != len(dims):
            raise ValueError(
                f"dims, origin and spacing must have equal length "
                f"(got {len(dims)}, {len(origin)}, {len(spacing)})"
            )
        if any(s <= 0 for s in spacing):
            raise ValueError(f"Grid spacing must be positive, got {spacing}")

        # frozen dataclass: normalise fields in place
        object.__setattr__(self, "dims", dims)
        object.__setattr__(self, "origin", origin)
        object.__setattr__(self, "spacing", spacing)

    @classmethod
    def from_extent(
        cls, origin: Sequence[float], extent: Sequence[float], dims: Sequence[int]
    ) -> "RegularGrid":
        """Grid spanning ``origin`` to ``extent`` (both corners are nodes)."""
        origin = np.atleast_1d(np.asarray(origin, dtype=float))
        extent = np.atleast_1d(np.asarray(extent, dtype=float))
        dims = np.atleast_1d(np.asarray(dims, dtype=int))
        if not (len(origin) == len(extent) == len(dims)):
            raise ValueError("origin, extent and dims must have equal length")

        spacing = np.ones(len(dims))
        for i, n in enumerate(dims):
            if n > 1:
                if extent[i] <= origin[i]:
                    raise ValueError(
                        f"extent must exceed origin along axis {i} "
                        f"({extent[i]} <= {origin[i]})"
                    )
                spacing[i] = (extent[i] - origin[i]) / (n - 1)

        return cls(dims=tuple(dims), origin=tuple(origin), spacing=tuple(spacing))

    def __len__(self) -> int:
        return self.nnodes

    @property
    def ndim(self) -> int:
        return len(self.dims)

    @property
    def nnodes(self) -> int:
        return int(np.prod(self.dims))

    @property
    def extent(self) -> tuple:
        """Coordinates of the last node (upper corner)."""
        return tuple(o + (n - 1) * s for o, n, s in zip(self.origin, self.dims, self.spacing))

    def axes(self) -> tuple:
        """1D node coordinates along each axis."""
        return tuple(
            o + s * np.arange(n) for o, n, s in zip(self.origin, self.dims, self.spacing)
        )

    def coordinates(self) -> np.ndarray:
        """All node coordinates, shape (nnodes, ndim)."""
        mesh = np.meshgrid(*self.axes(), indexing="ij")
        return np.column_stack([m.ravel() for m in mesh])

    def contains(self, points: np.ndarray) -> np.ndarray:
        """Mask of points inside the grid bounding box."""
        points = self._as_points(points)
        lower = np.asarray(self.origin)
        upper = np.asarray(self.extent)
        return np.all((points >= lower) & (points <= upper), axis=1)

    def nearest_node(self, points: np.ndarray) -> np.ndarray:
        """Flat index of the node nearest to each point (clipped to the grid)."""
        points = self._as_points(points)
        idx = np.rint((points - np.asarray(self.origin)) / np.asarray(self.spacing))
        idx = np.clip(idx.astype(int), 0, np.asarray(self.dims) - 1)
        return np.ravel_multi_index(tuple(idx.T), self.dims)

    def _as_points(self, points) -> np.ndarray:
        points = np.asarray(points, dtype=float)
        if points.ndim == 1:
            points = points.reshape(-1, self.ndim)
        if points.shape[1] != self.ndim:
            raise ValueError(f"Expected points with {self.ndim} columns, got {points.shape[1]}")
        return points

    def __str__(self) -> str:
        dims = "×".join(str(n) for n in self.dims)
        return f"RegularGrid({dims}, origin={self.origin}, spacing={self.spacing})"
