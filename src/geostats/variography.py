"""Variogram models, distance metrics and empirical variograms.

The covariance math is delegated to gstools. ``Variogram`` uses practical
range semantics: the model reaches about 95% of the sill at ``range``
(exactly the sill for bounded models). This is done by passing a
per-model ``rescale`` factor to the gstools model with
``len_scale = range``.
"""

import logging
from dataclasses import asdict, dataclass, field
from collections.abc import Mapping
from typing import Optional

import gstools as gs
import numpy as np

from .data import PointData

log = logging.getLogger(__name__)

# kind -> (gstools model class, rescale for practical range)
MODELS = {
    "gaussian": (gs.Gaussian, np.sqrt(3.0)),
    "exponential": (gs.Exponential, 3.0),
    "spherical": (gs.Spherical, 1.0),
    "cubic": (gs.Cubic, 1.0),
}


# ========================================================
# Distance metrics
# ========================================================


@dataclass(frozen=True)
class Euclidean:
    """Isotropic Euclidean distance."""

    name: str = "euclidean"

    def anisotropy(self, dim: int) -> tuple:
        """Return (len_scale factor, anis ratios, angles) for gstools."""
        return 1.0, [1.0] * (dim - 1), [0.0] * _n_angles(dim)


@dataclass(frozen=True)
class Ellipsoidal:
    """Distance normalised by the semi-axes of a rotated ellipsoid.

    The variogram range applies to the normalised distance, so the
    effective range along principal axis ``i`` is ``range * semiaxes[i]``.
    ``angles`` are rotation angles in radians (gstools convention: one
    angle in 2D, three in 3D).
    """

    semiaxes: tuple = (1.0, 1.0)
    angles: tuple = ()
    name: str = "ellipsoidal"

    def __post_init__(self):
        object.__setattr__(self, "semiaxes", tuple(float(a) for a in self.semiaxes))
        object.__setattr__(self, "angles", tuple(float(a) for a in self.angles))
        if any(a <= 0 for a in self.semiaxes):
            raise ValueError(f"Ellipsoid semi-axes must be positive, got {self.semiaxes}")

    def anisotropy(self, dim: int) -> tuple:
        if len(self.semiaxes) != dim:
            raise ValueError(f"Expected {dim} semi-axes, got {len(self.semiaxes)}")
        if len(self.angles) > _n_angles(dim):
            raise ValueError(f"At most {_n_angles(dim)} angles in {dim}D, got {len(self.angles)}")
        major = self.semiaxes[0]
        anis = [a / major for a in self.semiaxes[1:]]
        angles = list(self.angles) + [0.0] * (_n_angles(dim) - len(self.angles))
        return major, anis, angles


def _n_angles(dim: int) -> int:
    return dim * (dim - 1) // 2


def distance_from_dict(config: Optional[dict]):
    """Build a distance metric from a config mapping (``None`` → Euclidean)."""
    if not config:
        return Euclidean()
    config = dict(config)
    name = str(config.pop("name", "euclidean")).lower()
    if name == "euclidean":
        return Euclidean()
    if name == "ellipsoidal":
        return Ellipsoidal(**config)
    raise ValueError(f"Unknown distance '{name}' (expected euclidean or ellipsoidal)")


# ========================================================
# Variogram model
# ========================================================


@dataclass
class Variogram:
    """Theoretical variogram with range, sill and nugget."""

    kind: str = "gaussian"
    range: float = 1.0
    sill: float = 1.0
    nugget: float = 0.0
    distance: object = field(default_factory=Euclidean)

    def __post_init__(self):
        self.kind = self.kind.lower()
        if self.kind not in MODELS:
            raise ValueError(f"Unknown variogram '{self.kind}'; choose from {sorted(MODELS)}")
        if self.range <= 0:
            raise ValueError(f"Variogram range must be positive, got {self.range}")
        if self.sill <= 0:
            raise ValueError(f"Variogram sill must be positive, got {self.sill}")
        if not 0 <= self.nugget <= self.sill:
            raise ValueError(
                f"Variogram nugget must lie in [0, sill={self.sill}], got {self.nugget}"
            )
        if isinstance(self.distance, Mapping):
            self.distance = distance_from_dict(self.distance)

    def to_model(self, dim: int) -> gs.CovModel:
        """Equivalent gstools covariance model in ``dim`` dimensions."""
        model_cls, rescale = MODELS[self.kind]
        scale, anis, angles = self.distance.anisotropy(dim)
        kwargs = dict(
            dim=dim,
            var=self.sill - self.nugget,
            len_scale=self.range * scale,
            nugget=self.nugget,
            rescale=rescale,
        )
        if dim > 1:
            kwargs.update(anis=anis, angles=angles)
        return model_cls(**kwargs)

    def __call__(self, h) -> np.ndarray:
        """Variogram values at lag distance(s) ``h`` along the major axis."""
        h = np.asarray(h, dtype=float)
        model_cls, rescale = MODELS[self.kind]
        major = getattr(self.distance, "semiaxes", (1.0,))[0]
        model = model_cls(
            dim=1,
            var=self.sill - self.nugget,
            len_scale=self.range * major,
            nugget=self.nugget,
            rescale=rescale,
        )
        return model.variogram(h)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, config: dict) -> "Variogram":
        config = dict(config)
        config["distance"] = distance_from_dict(config.get("distance"))
        return cls(**config)

    def __str__(self) -> str:
        return (
            f"{self.kind.capitalize()}Variogram(range={self.range:g}, "
            f"sill={self.sill:g}, nugget={self.nugget:g}, distance={self.distance.name})"
        )


# ========================================================
# Empirical variogram
# ========================================================


@dataclass
class EmpiricalVariogram:
    """Binned experimental semivariogram."""

    bin_center: np.ndarray
    gamma: np.ndarray
    counts: np.ndarray

    @classmethod
    def estimate(
        cls,
        data: PointData,
        variable: str,
        nlags: int = 15,
        maxlag: Optional[float] = None,
    ) -> "EmpiricalVariogram":
        """Estimate the isotropic variogram of ``variable`` from point data.

        ``maxlag`` defaults to half the diagonal of the data bounding box.
        """
        data = data.dropna(variable)
        coords = data.coordinates
        values = data.values(variable)
        if len(values) < 2:
            raise ValueError(f"Need at least 2 samples of '{variable}', got {len(values)}")

        if maxlag is None:
            lower, upper = data.bounds()
            maxlag = 0.5 * float(np.linalg.norm(upper - lower))
        if maxlag <= 0:
            raise ValueError(f"maxlag must be positive, got {maxlag}")

        bin_edges = np.linspace(0.0, maxlag, int(nlags) + 1)
        bin_center, gamma, counts = gs.vario_estimate(
            coords.T, values, bin_edges, return_counts=True
        )
        return cls(
            bin_center=np.asarray(bin_center),
            gamma=np.asarray(gamma),
            counts=np.asarray(counts),
        )


def fit_variogram(
    empirical: EmpiricalVariogram,
    kind: str = "gaussian",
    nugget: bool = True,
    distance=None,
    max_range_factor: float = 2.0,
    max_sill_factor: float = 2.0,
) -> Variogram:
    """Fit a variogram model of the given kind to an empirical variogram.

    The fitted range is bounded by ``max_range_factor`` times the largest
    lag with pairs. The partial sill and the nugget are each bounded by
    ``max_sill_factor`` times the largest empirical value.
    ``distance`` is attached to the result unchanged (Euclidean when
    omitted); the fit itself is isotropic.
    """
    if kind not in MODELS:
        raise ValueError(f"Unknown variogram '{kind}'; choose from {sorted(MODELS)}")
    model_cls, rescale = MODELS[kind]
    model = model_cls(dim=1, rescale=rescale)

    mask = empirical.counts > 0
    lags, gamma = empirical.bin_center[mask], empirical.gamma[mask]
    max_range = max_range_factor * float(lags.max())
    max_sill = max_sill_factor * max(float(gamma.max()), np.finfo(float).eps)
    model.set_arg_bounds(
        var=[0.0, max_sill, "cc"],
        len_scale=[0.0, max_range, "oc"],
        nugget=[0.0, max_sill, "cc"],
    )

    model.fit_variogram(lags, gamma, nugget=nugget)
    log.info(
        f"Fitted {kind} variogram: range={model.len_scale:.4g}, "
        f"sill={model.var + model.nugget:.4g}, nugget={model.nugget:.4g}"
    )
    return Variogram(
        kind=kind,
        range=float(model.len_scale),
        sill=float(model.var + model.nugget),
        nugget=float(model.nugget),
        distance=Euclidean() if distance is None else distance,
    )


def variogram_from_config(config) -> Variogram:
    """Build a ``Variogram`` from a mapping or pass one through."""
    if isinstance(config, Variogram):
        return config
    return Variogram.from_dict(config)

