"""Console output for the simulation workflow."""

from .console import console, dim, header, ok, print_solution, solution_table

__all__ = [
    "console",
    "ok",
    "dim",
    "header",
    "print_solution",
    "solution_table",
]
