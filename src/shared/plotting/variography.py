"""
Variogram and Data Plots.

Theoretical variogram curves against empirical estimates, and scatter
maps of the conditioning samples.
"""

import logging
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np

log = logging.getLogger(__name__)


def plot_variogram(variogram, empirical=None, maxlag: Optional[float] = None, ax=None):
    """Plot a variogram model, optionally with empirical estimates.

    Parameters
    ----------
    variogram : Variogram
    empirical : EmpiricalVariogram, optional
    maxlag : float, optional
        Largest lag on the x axis (default: 1.5 × range, or the last
        empirical bin).
    ax : matplotlib Axes, optional

    Returns
    -------
    matplotlib.figure.Figure
    """
    if maxlag is None:
        maxlag = 1.5 * variogram.range
        if empirical is not None and len(empirical.bin_center):
            maxlag = max(maxlag, float(empirical.bin_center[-1]))

    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 4))
    else:
        fig = ax.figure

    h = np.linspace(0.0, maxlag, 200)
    ax.plot(h, variogram(h), lw=2, label=str(variogram))

    if empirical is not None:
        mask = empirical.counts > 0
        ax.scatter(
            empirical.bin_center[mask],
            empirical.gamma[mask],
            s=18 + 60 * empirical.counts[mask] / empirical.counts.max(),
            color="black",
            alpha=0.8,
            label="empirical",
            zorder=3,
        )

    ax.axhline(variogram.sill, color="gray", ls="--", lw=1)
    ax.axvline(variogram.range, color="gray", ls=":", lw=1)
    ax.set_xlim(0.0, maxlag)
    ax.set_ylim(bottom=0.0)
    ax.set_xlabel(r"Lag distance $h$")
    ax.set_ylabel(r"$\gamma(h)$")
    ax.set_title("Variogram", fontsize=12)
    ax.legend(frameon=True, fontsize=9)
    return fig


def plot_data(data, variable: str, ax=None):
    """Scatter map (2D/3D: first two coordinates) or profile (1D) of samples."""
    clean = data.dropna(variable)
    coords = clean.coordinates
    values = clean.values(variable)

    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 5))
    else:
        fig = ax.figure

    if clean.ndim == 1:
        ax.plot(coords[:, 0], values, "o", ms=4)
        ax.set_xlabel(clean.coordnames[0])
        ax.set_ylabel(variable)
    else:
        sc = ax.scatter(coords[:, 0], coords[:, 1], c=values, cmap="viridis", s=25)
        fig.colorbar(sc, ax=ax, label=variable)
        ax.set_xlabel(clean.coordnames[0])
        ax.set_ylabel(clean.coordnames[1])
        ax.set_aspect("equal")

    ax.set_title(f"{variable} ({clean.npoints} samples)", fontsize=12)
    return fig
