"""Tests for variogram models, distance metrics and variogram estimation."""

import gstools as gs
import numpy as np
import pandas as pd
import pytest

from geostats import (
    Ellipsoidal,
    EmpiricalVariogram,
    Euclidean,
    PointData,
    RegularGrid,
    Variogram,
    fit_variogram,
)


class TestVariogram:
    """Practical-range variogram models on top of gstools."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            dict(kind="matern"),
            dict(range=0.0),
            dict(sill=-1.0),
            dict(sill=1.0, nugget=1.5),
            dict(nugget=-0.1),
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            Variogram(**kwargs)

    @pytest.mark.parametrize("kind", ["gaussian", "exponential"])
    def test_practical_range(self, kind):
        """Asymptotic models reach 95% of the sill at the range."""
        v = Variogram(kind=kind, range=50.0, sill=2.0, nugget=0.5)
        expected = 0.5 + 0.95 * 1.5
        assert np.isclose(v(50.0), expected, atol=1e-2)

    @pytest.mark.parametrize("kind", ["spherical", "cubic"])
    def test_bounded_models_reach_sill(self, kind):
        v = Variogram(kind=kind, range=10.0, sill=3.0)
        assert np.isclose(v(10.0), 3.0)
        assert np.isclose(v(25.0), 3.0)

    def test_monotonic(self):
        v = Variogram(kind="gaussian", range=30.0)
        gamma = v(np.linspace(0.1, 90.0, 50))
        assert np.all(np.diff(gamma) >= -1e-12)

    def test_to_model(self):
        model = Variogram(kind="gaussian", range=50.0, sill=2.0, nugget=0.5).to_model(dim=2)
        assert isinstance(model, gs.Gaussian)
        assert model.dim == 2
        assert np.isclose(model.var, 1.5)
        assert np.isclose(model.nugget, 0.5)
        assert np.isclose(model.len_scale, 50.0)
        assert np.isclose(model.rescale, np.sqrt(3.0))

    def test_to_model_ellipsoidal(self):
        distance = Ellipsoidal(semiaxes=(2.0, 1.0), angles=(np.pi / 4,))
        model = Variogram(kind="spherical", range=10.0, distance=distance).to_model(dim=2)
        assert np.isclose(model.len_scale, 20.0)
        assert np.allclose(model.anis, [0.5])
        assert np.isclose(model.angles[0], np.pi / 4)

    def test_ellipsoidal_dimension_mismatch(self):
        v = Variogram(distance=Ellipsoidal(semiaxes=(1.0, 1.0)))
        with pytest.raises(ValueError, match="semi-axes"):
            v.to_model(dim=3)

    def test_ellipsoidal_one_dimensional(self):
        distance = Ellipsoidal(semiaxes=(2.0,))
        assert distance.angles == ()
        model = Variogram(kind="exponential", range=5.0, distance=distance).to_model(dim=1)
        assert np.isclose(model.len_scale, 10.0)

    def test_ellipsoidal_angles_padded(self):
        model = Variogram(distance=Ellipsoidal(semiaxes=(1.0, 1.0, 0.5))).to_model(dim=3)
        assert np.allclose(model.angles, [0.0, 0.0, 0.0])

    def test_ellipsoidal_invalid_axes(self):
        with pytest.raises(ValueError):
            Ellipsoidal(semiaxes=(1.0, 0.0))

    def test_dict_round_trip(self):
        v = Variogram(
            kind="exponential",
            range=12.0,
            sill=1.5,
            nugget=0.1,
            distance=Ellipsoidal(semiaxes=(1.0, 0.5), angles=(0.3,)),
        )
        assert Variogram.from_dict(v.to_dict()) == v

    def test_distance_from_mapping(self):
        v = Variogram(distance={"name": "ellipsoidal", "semiaxes": [1.0, 2.0]})
        assert isinstance(v.distance, Ellipsoidal)
        assert Variogram().distance == Euclidean()

    def test_unknown_distance(self):
        with pytest.raises(ValueError, match="Unknown distance"):
            Variogram(distance={"name": "manhattan"})


class TestEmpiricalVariogram:

    def test_estimate(self, point_data):
        emp = EmpiricalVariogram.estimate(point_data, "value", nlags=8)
        assert len(emp.bin_center) == 8
        assert emp.gamma.shape == emp.bin_center.shape
        assert np.all(emp.counts >= 0)
        assert np.all(emp.gamma[emp.counts > 0] >= 0)

    def test_default_maxlag_is_half_diagonal(self, point_data):
        lower, upper = point_data.bounds()
        emp = EmpiricalVariogram.estimate(point_data, "value", nlags=5)
        assert emp.bin_center[-1] < 0.5 * np.linalg.norm(upper - lower)

    def test_too_few_samples(self):
        table = pd.DataFrame({"x": [0.0], "y": [0.0], "value": [1.0]})
        with pytest.raises(ValueError, match="at least 2"):
            EmpiricalVariogram.estimate(PointData(table, ("x", "y")), "value")

    def test_fit_recovers_model(self):
        """Fitting samples of a known field gives parameters of the right order."""
        truth = Variogram(kind="exponential", range=20.0, sill=1.0)
        grid = RegularGrid(dims=(100, 100))
        srf = gs.SRF(truth.to_model(dim=2), seed=19)
        field = srf(grid.axes(), mesh_type="structured")

        rng = np.random.default_rng(7)
        idx = rng.choice(grid.nnodes, size=600, replace=False)
        coords = grid.coordinates()[idx]
        table = pd.DataFrame({"x": coords[:, 0], "y": coords[:, 1], "value": field.ravel()[idx]})
        data = PointData(table, ("x", "y"))

        emp = EmpiricalVariogram.estimate(data, "value", nlags=20, maxlag=40.0)
        fitted = fit_variogram(emp, kind="exponential", nugget=False)

        assert fitted.kind == "exponential"
        assert 10.0 < fitted.range < 40.0
        assert 0.4 < fitted.sill < 2.5

    def test_fit_attaches_distance(self, point_data):
        emp = EmpiricalVariogram.estimate(point_data, "value")
        distance = Ellipsoidal(semiaxes=(1.0, 0.5), angles=(0.4,))
        assert fit_variogram(emp, kind="spherical", distance=distance).distance == distance
        assert fit_variogram(emp, kind="spherical").distance == Euclidean()

    @pytest.mark.parametrize("kind", ["gaussian", "exponential", "spherical"])
    def test_fit_range_bounded_for_rising_variogram(self, kind):
        """A linear trend never levels off; the fit stops at the range bound."""
        x = np.linspace(0.0, 100.0, 40)
        table = pd.DataFrame({"x": x, "value": 0.05 * x})
        emp = EmpiricalVariogram.estimate(PointData(table, ("x",)), "value", nlags=10)
        lag_max = emp.bin_center[emp.counts > 0].max()

        fitted = fit_variogram(emp, kind=kind, max_range_factor=1.5)
        assert fitted.range <= 1.5 * lag_max * (1 + 1e-6)
        assert fitted.sill <= 4.0 * emp.gamma.max() * (1 + 1e-6)

    def test_fit_unknown_kind(self, point_data):
        emp = EmpiricalVariogram.estimate(point_data, "value")
        with pytest.raises(ValueError):
            fit_variogram(emp, kind="wave")
