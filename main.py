"""
Parallel Gaussian simulation - unified entry point for solving and plotting.

Usage:
    uv run python main.py
    uv run python main.py nreals=8 workers=4 solver.variogram.range=40
    uv run python main.py solver=gauss_simple fit_variogram=true
    uv run python main.py mlflow.enabled=true
    uv run python main.py mlflow.enabled=true plot_only=true
"""

import logging
import sys
from pathlib import Path

import hydra
from dotenv import load_dotenv
from hydra.utils import instantiate, to_absolute_path
from omegaconf import DictConfig, OmegaConf

load_dotenv()
sys.path.insert(0, str(Path(__file__).parent / "src"))

log = logging.getLogger(__name__)


def load_problem(cfg: DictConfig):
    """Read the point data and build the grid and simulation problem."""
    from geostats import RegularGrid, SimulationProblem, read_geotable

    data = read_geotable(
        to_absolute_path(cfg.data.path),
        coordnames=list(cfg.data.coordnames),
        delimiter=cfg.data.get("delimiter"),
    )
    domain = RegularGrid.from_extent(
        origin=list(cfg.domain.origin),
        extent=list(cfg.domain.extent),
        dims=list(cfg.domain.dims),
    )
    return SimulationProblem(data, domain, cfg.variable, cfg.nreals)


def create_solver(cfg: DictConfig, empirical=None):
    """Instantiate the solver from the solver config subtree.

    With ``fit_variogram=true`` each variable gets a model of the configured
    kind fitted to its empirical variogram (``empirical`` maps variable
    names to ``EmpiricalVariogram``). The configured distance metric is kept.
    """
    from geostats import fit_variogram

    solver_cfg = OmegaConf.to_container(cfg.solver, resolve=True)
    solver_cfg.pop("name", None)

    if cfg.get("fit_variogram", False) and empirical:
        variogram = solver_cfg.pop("variogram")
        variables = solver_cfg.pop("variables")
        if isinstance(variables, str):
            variables = [variables]
        target = solver_cfg.pop("_target_")

        bindings = {}
        for var in variables:
            fitted = fit_variogram(
                empirical[var], kind=variogram["kind"], distance=variogram.get("distance")
            )
            bindings[var] = {**solver_cfg, "variogram": fitted.to_dict()}
        solver_cfg = {"_target_": target, "variables": bindings}

    return instantiate(solver_cfg, _convert_="all")


def generate_plots(cfg: DictConfig, solution, problem, solver, empirical, output_dir: Path):
    """Realization maps and variogram plot; returns saved file paths."""
    from shared.plotting import apply_style, plot_solution, plot_variogram, save_figure

    apply_style(use_latex=cfg.plot.get("use_latex", False))
    paths = []
    for var in solution.variables:
        fig = plot_solution(solution, var, nreals=cfg.plot.nreals, data=problem.data)
        paths.append(save_figure(fig, output_dir / f"realizations_{var}.png"))

        fig = plot_variogram(solver.parameters(var).variogram, empirical.get(var))
        paths.append(save_figure(fig, output_dir / f"variogram_{var}.png"))
    return paths


def run(cfg: DictConfig, output_dir: Path):
    """Start workers, solve, print and plot."""
    from cli import dim, header, ok, print_solution
    from geostats import EmpiricalVariogram
    from solvers import addprocs, rmprocs, solve
    from solvers.parallel import resolve_n_workers
    from utilities import save_solution

    n_workers = resolve_n_workers(cfg.workers)
    if n_workers:
        addprocs(n_workers)

    try:
        header("Problem")
        problem = load_problem(cfg)
        print(problem)

        nlags = cfg.get("nlags", 15)
        empirical = {
            var: EmpiricalVariogram.estimate(problem.data, var, nlags=nlags)
            for var in problem.variables
        }
        solver = create_solver(cfg, empirical)
        for var in problem.variables:
            ok(f"Solver: {cfg.solver.name} for '{var}' with {solver.parameters(var).variogram}")

        header("Solving")
        solution = solve(problem, solver)
        print_solution(solution)

        save_solution(solution, output_dir / "solution.zarr")
        figures = generate_plots(cfg, solution, problem, solver, empirical, output_dir)
        ok(f"Plots written to {output_dir}")
        for path in figures:
            dim(path.name)
    finally:
        rmprocs()

    if cfg.mlflow.get("enabled", False):
        from utilities.mlflow import log_solution, setup_mlflow

        log.info(f"MLflow experiment: {setup_mlflow(cfg)}")
        log_solution(solver, solution, cfg, figures=figures)


def plot_existing(cfg: DictConfig, output_dir: Path):
    """Regenerate realization plots for the latest matching MLflow run."""
    from shared.plotting import apply_style, plot_solution, save_figure
    from utilities.mlflow import download_solution, find_existing_run, setup_mlflow

    setup_mlflow(cfg)
    solution = download_solution(find_existing_run(cfg))
    apply_style(use_latex=cfg.plot.get("use_latex", False))
    for var in solution.variables:
        fig = plot_solution(solution, var, nreals=cfg.plot.nreals)
        save_figure(fig, output_dir / f"realizations_{var}.png")


@hydra.main(config_path="conf", config_name="config", version_base=None)
def main(cfg: DictConfig) -> None:
    """Main entry point."""
    log.info(f"Solver: {cfg.solver.name}, variable={cfg.variable}, nreals={cfg.nreals}")
    output_dir = Path(hydra.core.hydra_config.HydraConfig.get().runtime.output_dir)

    if cfg.get("plot_only"):
        plot_existing(cfg, output_dir)
    else:
        run(cfg, output_dir)


if __name__ == "__main__":
    main()
