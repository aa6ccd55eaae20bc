"""Plotting utilities for simulation results.

Realization maps, variogram curves and sample scatter plots.
"""

from .realizations import plot_solution
from .style import apply_style, save_figure
from .variography import plot_data, plot_variogram

__all__ = [
    "plot_solution",
    "plot_variogram",
    "plot_data",
    "apply_style",
    "save_figure",
]
