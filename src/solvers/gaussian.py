"""Gaussian simulation solver.

Each realization is a conditioned Gaussian random field: a gstools
kriging estimator (ordinary or simple) wrapped in ``gstools.CondSRF`` and
evaluated on the structured grid axes. Variables without conditioning
data fall back to an unconditional ``gstools.SRF``.
"""

import logging

import gstools as gs
import numpy as np

from .base import SimulationSolver
from .datastructures import RealizationTask, GaussSimParameters

log = logging.getLogger(__name__)


def simulate_realization(task: RealizationTask, seed: int) -> np.ndarray:
    """Draw one realization of ``task`` with the given seed.

    Module-level so it can be pickled and run in a worker process.

    Returns
    -------
    np.ndarray
        Field with shape ``task.dims``.
    """
    model = task.variogram.to_model(task.ndim)
    if task.ndim == 1:
        pos = task.axes[0]
        cond_pos = task.cond_pos[:, 0]
    else:
        pos = list(task.axes)
        cond_pos = task.cond_pos.T

    if len(task.cond_val) == 0:
        srf = gs.SRF(model, mean=0.0 if task.mean is None else task.mean)
    elif task.kriging == "simple":
        krige = gs.krige.Simple(model, cond_pos, task.cond_val, mean=task.mean)
        srf = gs.CondSRF(krige)
    else:
        krige = gs.krige.Ordinary(model, cond_pos, task.cond_val)
        srf = gs.CondSRF(krige)

    srf.set_pos(pos, "structured")
    field = srf(seed=seed)
    return np.asarray(field, dtype=float).reshape(task.dims)


class GaussSim(SimulationSolver):
    """Gaussian simulation conditioned on point data.

    Examples
    --------
    >>> solver = GaussSim({"value": {"variogram": Variogram(range=50.0)}})
    >>> solver = GaussSim("value", variogram=Variogram("spherical", range=30.0))
    """

    Parameters = GaussSimParameters
    realize = simulate_realization

    def prepare(self, problem, variable: str) -> RealizationTask:
        params = self.parameters(variable)
        cond_pos, cond_val = problem.conditioning(variable)

        mean = params.mean
        if mean is None and params.kriging == "simple" and len(cond_val):
            mean = float(cond_val.mean())
        if len(cond_val) == 0:
            log.warning(f"No conditioning data for '{variable}'; simulating unconditionally")

        return RealizationTask(
            variable=variable,
            axes=problem.domain.axes(),
            cond_pos=cond_pos,
            cond_val=cond_val,
            variogram=params.variogram,
            kriging=params.kriging,
            mean=mean,
        )
