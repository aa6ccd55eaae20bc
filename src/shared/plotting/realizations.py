"""
Realization Plots.

Maps of individual realizations plus E-type mean and variance across
realizations. 2D grids are drawn as images, 1D grids as line plots and
3D grids through their middle z-slice.
"""

import logging
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np

log = logging.getLogger(__name__)


def _slice(field: np.ndarray) -> np.ndarray:
    """Reduce a 3D field to its middle z-slice."""
    if field.ndim == 3:
        return field[:, :, field.shape[2] // 2]
    return field


def _draw(ax, field, axes, title, cmap="viridis", vmin=None, vmax=None):
    """Draw one field on ``ax``; returns the mappable (None for 1D)."""
    if field.ndim == 1:
        ax.plot(axes[0], field, lw=1.2)
        ax.set_xlabel(r"$x$")
        ax.set_title(title, fontsize=11)
        return None

    x, y = axes[0], axes[1]
    dx = x[1] - x[0] if len(x) > 1 else 1.0
    dy = y[1] - y[0] if len(y) > 1 else 1.0
    im = ax.imshow(
        field.T,
        origin="lower",
        extent=(x[0] - dx / 2, x[-1] + dx / 2, y[0] - dy / 2, y[-1] + dy / 2),
        cmap=cmap,
        vmin=vmin,
        vmax=vmax,
        aspect="equal",
    )
    ax.set_xlabel(r"$x$")
    ax.set_ylabel(r"$y$")
    ax.set_title(title, fontsize=11)
    ax.grid(False)
    return im


def plot_solution(
    solution,
    variable: Optional[str] = None,
    nreals: Optional[int] = None,
    data=None,
    ncols: int = 3,
):
    """Plot realizations of one variable with mean and variance panels.

    Parameters
    ----------
    solution : SimulationSolution
    variable : str, optional
        Variable to plot (default: the first one).
    nreals : int, optional
        Number of realizations to show (default: all, at most 6).
    data : PointData, optional
        Conditioning data drawn on top of 2D/3D maps.
    ncols : int
        Panels per row.

    Returns
    -------
    matplotlib.figure.Figure
    """
    variable = variable or solution.variables[0]
    reals = solution[variable]
    nshow = min(reals.shape[0], nreals or 6)
    axes_coords = solution.domain.axes()

    fields = [_slice(reals[i]) for i in range(nshow)]
    mean = _slice(solution.mean(variable))
    var = _slice(solution.variance(variable))

    vmin = min(f.min() for f in fields)
    vmax = max(f.max() for f in fields)

    npanels = nshow + 2
    ncols = min(ncols, npanels)
    nrows = int(np.ceil(npanels / ncols))
    fig, axes = plt.subplots(nrows, ncols, figsize=(4.2 * ncols, 3.6 * nrows), squeeze=False)
    flat = axes.ravel()

    shared = None
    for i, field in enumerate(fields):
        im = _draw(flat[i], field, axes_coords, f"Realization {i + 1}", vmin=vmin, vmax=vmax)
        if shared is None:
            shared = im

    _draw(flat[nshow], mean, axes_coords, "E-type mean", vmin=vmin, vmax=vmax)
    im_var = _draw(flat[nshow + 1], var, axes_coords, "Variance", cmap="magma")

    if data is not None and solution.domain.ndim > 1:
        coords = data.dropna(variable).coordinates
        for ax in flat[: nshow + 1]:
            ax.scatter(coords[:, 0], coords[:, 1], s=8, c="white", edgecolors="black", lw=0.4)

    for ax in flat[npanels:]:
        ax.set_visible(False)

    if shared is not None:
        fig.colorbar(shared, ax=list(flat[: nshow + 1]), shrink=0.8, label=variable)
    if im_var is not None:
        fig.colorbar(im_var, ax=flat[nshow + 1], shrink=0.8, label="variance")

    title = f"{variable}: {reals.shape[0]} realizations on {'×'.join(map(str, solution.domain.dims))} grid"
    if solution.domain.ndim == 3:
        title += " (middle z-slice)"
    fig.suptitle(title, fontsize=13)
    return fig
