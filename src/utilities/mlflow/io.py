"""MLflow I/O utilities for experiment tracking."""

import logging
import os
import tempfile
from pathlib import Path

import mlflow
from omegaconf import DictConfig, OmegaConf

from utilities.io import load_solution, save_solution

log = logging.getLogger(__name__)


def get_experiment_name(cfg: DictConfig) -> str:
    """Build full experiment name with optional prefix."""
    name = cfg.experiment_name
    prefix = cfg.mlflow.get("project_prefix", "")
    if prefix and not name.startswith("/"):
        return f"{prefix}/{name}"
    return name


def setup_mlflow(cfg: DictConfig) -> str:
    """Setup MLflow tracking and return experiment name."""
    tracking_uri = cfg.mlflow.get("tracking_uri", "./mlruns")
    # If using local file backend, clear env overrides
    if str(cfg.mlflow.get("mode", "")).lower() in ("files", "local"):
        os.environ.pop("MLFLOW_TRACKING_URI", None)
    os.environ["MLFLOW_TRACKING_URI"] = str(tracking_uri)
    mlflow.set_tracking_uri(tracking_uri)

    experiment_name = get_experiment_name(cfg)
    try:
        mlflow.set_experiment(experiment_name)
    except Exception as exc:
        # If experiment was previously deleted, fall back to a new name
        fallback = f"{experiment_name}-restored"
        log.warning(
            "MLflow set_experiment failed for '%s' (%s); falling back to '%s'",
            experiment_name,
            exc,
            fallback,
        )
        experiment_name = fallback
        mlflow.set_experiment(experiment_name)
    return experiment_name


def log_solution(solver, solution, cfg: DictConfig, figures=()) -> str:
    """Log params, metrics, config, solution and figures in a new run.

    Returns the run id.
    """
    run_name = f"{cfg.solver.name}_{'-'.join(solution.variables)}_n{cfg.nreals}"
    with mlflow.start_run(run_name=run_name, tags={"solver": cfg.solver.name}) as run:
        params = {}
        for var in solution.variables:
            params.update(
                {f"{var}.{k}": v for k, v in solver.parameters(var).to_mlflow().items()}
            )
        params.update({"nreals": solution.nreals, "dims": "x".join(map(str, solution.domain.dims))})
        mlflow.log_params(params)
        mlflow.log_dict(OmegaConf.to_container(cfg), "config.yaml")

        for var, metrics in solution.metrics.items():
            mlflow.log_metrics(metrics.to_mlflow(prefix=f"{var}."))

        with tempfile.TemporaryDirectory() as tmpdir:
            zarr_path = save_solution(solution, Path(tmpdir) / "solution.zarr")
            mlflow.log_artifacts(str(zarr_path), artifact_path="solution.zarr")

        for fig_path in figures:
            mlflow.log_artifact(str(fig_path), artifact_path="plots")

        log.info(f"Logged run {run.info.run_id[:8]} ({run_name})")
        return run.info.run_id


def find_existing_run(cfg: DictConfig) -> str:
    """Find the latest finished run matching the configured variable and nreals."""
    experiment = mlflow.get_experiment_by_name(get_experiment_name(cfg))
    if not experiment:
        raise ValueError(f"Experiment not found: {cfg.experiment_name}")

    runs = mlflow.search_runs(
        experiment_ids=[experiment.experiment_id],
        filter_string=(
            f"params.nreals = '{cfg.nreals}' AND tags.solver = '{cfg.solver.name}' "
            f"AND attributes.status = 'FINISHED'"
        ),
        order_by=["start_time DESC"],
        max_results=1,
    )
    if runs.empty:
        raise ValueError(f"No matching run found for nreals={cfg.nreals}")

    run_id = runs.iloc[0]["run_id"]
    log.info(f"Found existing run: {run_id[:8]}")
    return run_id


def download_solution(run_id: str):
    """Download and load the solution logged with ``log_solution``."""
    tmpdir = tempfile.mkdtemp(prefix="geosim_")
    local = mlflow.artifacts.download_artifacts(
        run_id=run_id, artifact_path="solution.zarr", dst_path=tmpdir
    )
    return load_solution(local)
