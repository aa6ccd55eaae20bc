"""
Plotting Style Configuration.

Uses seaborn darkgrid theme; LaTeX rendering is opt-in because it needs a
TeX installation.
"""

import logging
from pathlib import Path

import matplotlib.pyplot as plt
import seaborn as sns

log = logging.getLogger(__name__)


def apply_style(use_latex: bool = False):
    """Apply the project plotting style globally."""
    rc = {
        "axes.labelsize": 12,
        "font.size": 11,
        "legend.fontsize": 10,
        "xtick.labelsize": 10,
        "ytick.labelsize": 10,
        "text.usetex": use_latex,
    }
    if use_latex:
        rc.update({"font.family": "serif", "font.serif": ["Computer Modern Roman"]})
    plt.rcParams.update(rc)

    # after rcParams to preserve LaTeX settings
    sns.set_theme(style="darkgrid", rc={"text.usetex": use_latex})


def save_figure(fig, output_path) -> Path:
    """Save a figure and close it."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=300, bbox_inches="tight")
    plt.close(fig)
    log.info(f"Saved {output_path.name}")
    return output_path
