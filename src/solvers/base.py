"""Abstract base solver for conditional simulation problems."""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from functools import partial
import logging
import time

import gstools as gs
import numpy as np

from .datastructures import Metrics, SimulationSolution

log = logging.getLogger(__name__)


class SimulationSolver(ABC):
    """Abstract base solver for simulation problems.

    Handles:
    - Parameter management (one parameter set per variable)
    - Reproducible per-realization seeds
    - Fan-out of realizations over a worker pool
    - Metrics tracking

    Subclasses must:
    - Set Parameters class attribute (e.g., GaussSimParameters)
    - Implement prepare() - build a picklable task for one variable
    - Set realize to a module-level function ``realize(task, seed)``
    """

    Parameters = None  # Subclasses set this to their parameters dataclass
    realize = None  # Module-level callable, picklable for worker processes

    def __init__(self, variables=None, **kwargs):
        """Bind parameters to variables.

        Parameters
        ----------
        variables : str, sequence or mapping, optional
            A variable name or a sequence of names (``kwargs`` become the
            parameters of each), or a mapping
            ``variable -> parameters`` (a Parameters instance or a dict).
            Without variables, ``kwargs`` are the defaults for any variable.
        **kwargs
            Parameters passed to the Parameters class.
        """
        if self.Parameters is None:
            raise ValueError("Subclass must define Parameters class attribute")

        self._bindings = {}
        if isinstance(variables, str):
            self._bindings[variables] = self.Parameters(**kwargs)
            self.defaults = self.Parameters()
        elif isinstance(variables, Sequence):
            for name in variables:
                if not isinstance(name, str):
                    raise TypeError(f"Variable names must be strings, got {name!r}")
                self._bindings[name] = self.Parameters(**kwargs)
            self.defaults = self.Parameters()
        elif isinstance(variables, Mapping):
            for name, params in variables.items():
                self._bindings[name] = self._as_parameters(params)
            self.defaults = self.Parameters(**kwargs)
        elif variables is None:
            self.defaults = self.Parameters(**kwargs)
        else:
            raise TypeError(
                "variables must be a name, a sequence of names or a mapping, "
                f"got {type(variables).__name__}"
            )

    def _as_parameters(self, params):
        if isinstance(params, self.Parameters):
            return params
        if isinstance(params, Mapping):
            return self.Parameters(**params)
        raise TypeError(f"Cannot build {self.Parameters.__name__} from {params!r}")

    @property
    def variables(self) -> list:
        """Explicitly bound variables."""
        return list(self._bindings)

    def parameters(self, variable: str):
        """Parameters for ``variable`` (defaults when it is not bound)."""
        return self._bindings.get(variable, self.defaults)

    @abstractmethod
    def prepare(self, problem, variable: str):
        """Build the picklable task template for one variable of ``problem``."""
        pass

    def seeds(self, variable: str, nreals: int) -> list:
        """Per-realization seeds drawn from the variable's master seed."""
        master = gs.random.MasterRNG(self.parameters(variable).seed)
        return [int(master()) for _ in range(nreals)]

    def solve(self, problem, pool=None) -> SimulationSolution:
        """Draw ``problem.nreals`` realizations of every problem variable.

        Parameters
        ----------
        problem : SimulationProblem
            Data, domain, variables and number of realizations.
        pool : WorkerPool, optional
            Worker processes. Without a pool realizations run serially.

        Returns
        -------
        SimulationSolution
        """
        n_workers = pool.n_workers if pool is not None else 0
        realizations, seeds, metrics = {}, {}, {}

        for variable in problem.variables:
            time_start = time.time()
            task = self.prepare(problem, variable)
            var_seeds = self.seeds(variable, problem.nreals)
            log.info(
                f"Simulating {problem.nreals} realizations of '{variable}' "
                f"({len(task.cond_val)} conditioning nodes, {n_workers} workers)"
            )

            fn = partial(type(self).realize, task)
            if pool is None:
                fields = [fn(seed) for seed in var_seeds]
            else:
                fields = pool.map(fn, var_seeds)
            reals = np.stack(fields, axis=0)

            wall_time = time.time() - time_start
            log.info(f"'{variable}' finished in {wall_time:.2f} seconds")

            realizations[variable] = reals
            seeds[variable] = var_seeds
            metrics[variable] = Metrics(
                nreals=problem.nreals,
                n_workers=n_workers,
                n_conditioning=len(task.cond_val),
                wall_time_seconds=wall_time,
                realization_mean=float(reals.mean()),
                realization_std=float(reals.std()),
            )

        return SimulationSolution(
            domain=problem.domain,
            realizations=realizations,
            seeds=seeds,
            metrics=metrics,
        )
