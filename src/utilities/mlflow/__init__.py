"""MLflow utilities for experiment tracking and artifact management."""

from .io import download_solution, find_existing_run, log_solution, setup_mlflow

__all__ = [
    "setup_mlflow",
    "log_solution",
    "find_existing_run",
    "download_solution",
]
