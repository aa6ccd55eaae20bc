"""Tests for the regular grid domain."""

import numpy as np
import pytest

from geostats import RegularGrid


class TestConstruction:

    def test_defaults(self):
        grid = RegularGrid(dims=(4, 3))
        assert grid.origin == (0.0, 0.0)
        assert grid.spacing == (1.0, 1.0)
        assert grid.nnodes == 12
        assert grid.extent == (3.0, 2.0)

    def test_from_extent(self):
        grid = RegularGrid.from_extent(origin=(0.0, 10.0), extent=(100.0, 60.0), dims=(101, 51))
        assert np.allclose(grid.spacing, (1.0, 1.0))
        assert np.allclose(grid.extent, (100.0, 60.0))

    def test_from_extent_single_node_axis(self):
        grid = RegularGrid.from_extent(origin=(0.0, 0.0, 5.0), extent=(10.0, 10.0, 5.0), dims=(11, 11, 1))
        assert grid.spacing[2] == 1.0
        assert grid.ndim == 3

    def test_from_extent_inverted(self):
        with pytest.raises(ValueError, match="extent must exceed origin"):
            RegularGrid.from_extent(origin=(10.0,), extent=(0.0,), dims=(5,))

    @pytest.mark.parametrize(
        "kwargs",
        [
            dict(dims=(0, 3)),
            dict(dims=(2, 2, 2, 2)),
            dict(dims=(3, 3), spacing=(1.0, 0.0)),
            dict(dims=(3, 3), origin=(0.0,)),
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            RegularGrid(**kwargs)


class TestNodes:

    def test_axes(self):
        grid = RegularGrid(dims=(3, 2), origin=(1.0, -1.0), spacing=(0.5, 2.0))
        x, y = grid.axes()
        assert np.allclose(x, [1.0, 1.5, 2.0])
        assert np.allclose(y, [-1.0, 1.0])

    def test_coordinates_c_order(self):
        grid = RegularGrid(dims=(3, 2))
        coords = grid.coordinates()
        assert coords.shape == (6, 2)
        # y varies fastest
        assert np.allclose(coords[:3], [[0, 0], [0, 1], [1, 0]])

    def test_nearest_node(self):
        grid = RegularGrid(dims=(5, 4), spacing=(2.0, 2.0))
        idx = grid.nearest_node([[2.1, 3.9], [0.0, 0.0]])
        assert list(idx) == [1 * 4 + 2, 0]
        assert np.allclose(grid.coordinates()[idx[0]], [2.0, 4.0])

    def test_nearest_node_clipped(self):
        grid = RegularGrid(dims=(5, 4))
        idx = grid.nearest_node([[100.0, -7.0]])
        assert np.allclose(grid.coordinates()[idx[0]], [4.0, 0.0])

    def test_contains(self):
        grid = RegularGrid(dims=(5, 5))
        mask = grid.contains([[0.0, 0.0], [4.0, 4.0], [4.1, 2.0], [-0.1, 1.0]])
        assert list(mask) == [True, True, False, False]

    def test_points_wrong_dimension(self):
        grid = RegularGrid(dims=(5, 5))
        with pytest.raises(ValueError):
            grid.contains(np.zeros((3, 3)))
