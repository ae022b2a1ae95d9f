"""
Visualisation of simulated correlated Brownian paths.

All plotting functions return matplotlib figures and optionally save them.
"""

from __future__ import annotations

import matplotlib.pyplot as plt
import numpy as np
from numpy.typing import NDArray


# --- Style configuration ---
plt.rcParams.update({
    "figure.figsize": (10, 6),
    "figure.dpi": 150,
    "font.family": "serif",
    "font.size": 11,
    "axes.titlesize": 13,
    "axes.labelsize": 12,
    "legend.fontsize": 10,
    "xtick.labelsize": 10,
    "ytick.labelsize": 10,
    "lines.linewidth": 1.5,
    "axes.grid": True,
    "grid.alpha": 0.3,
})


def plot_paths(
    paths: NDArray[np.float64],
    times: NDArray[np.float64],
    n_show: int = 20,
    title: str = "Simulated Paths",
    save_path: str | None = None,
) -> plt.Figure:
    """One panel per coordinate with a sample of paths and the mean path.

    Parameters
    ----------
    paths : (n_paths, d+1, c) array
    times : (d+1,) array
    n_show : int
        Number of individual paths drawn per panel.
    """
    c = paths.shape[-1]
    fig, axes = plt.subplots(c, 1, figsize=(10, 3 * c), sharex=True, squeeze=False)

    for i in range(c):
        ax = axes[i, 0]
        ax.plot(times, paths[:n_show, :, i].T, color="steelblue", alpha=0.3, linewidth=0.8)
        ax.plot(times, paths[:, :, i].mean(axis=0), color="black", label="mean")
        ax.set_ylabel(f"X{i + 1}(t)")
        ax.legend(loc="upper left")

    axes[-1, 0].set_xlabel("Time t")
    axes[0, 0].set_title(title)
    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, bbox_inches="tight")
    return fig


def plot_increment_scatter(
    paths: NDArray[np.float64],
    times: NDArray[np.float64],
    i: int = 0,
    j: int = 1,
    max_points: int = 5000,
    save_path: str | None = None,
) -> plt.Figure:
    """Scatter of normalised increments of coordinates ``i`` and ``j``.

    Parameters
    ----------
    paths : (n_paths, d+1, c) array
    times : (d+1,) array
    """
    inc = np.diff(paths, axis=1) / np.sqrt(np.diff(times))[None, :, None]
    xi = inc[..., i].ravel()[:max_points]
    xj = inc[..., j].ravel()[:max_points]
    rho = np.corrcoef(xi, xj)[0, 1]

    fig, ax = plt.subplots(figsize=(7, 7))
    ax.scatter(xi, xj, s=4, alpha=0.3, color="steelblue")
    ax.set_xlabel(f"dX{i + 1} / sqrt(dt)")
    ax.set_ylabel(f"dX{j + 1} / sqrt(dt)")
    ax.set_title(f"Increment Scatter (empirical rho = {rho:.3f})")

    if save_path:
        fig.savefig(save_path, bbox_inches="tight")
    return fig
