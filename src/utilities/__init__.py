"""Cross-project utilities (solution IO, MLflow tracking)."""

# Keep __init__ lightweight to avoid circular imports during Hydra callback loading.
from utilities.io import ensure_output_dir, load_solution, save_solution  # noqa: F401

__all__ = [
    "load_solution",
    "save_solution",
    "ensure_output_dir",
]
