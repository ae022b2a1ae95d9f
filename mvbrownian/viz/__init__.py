"""Visualization sub-package."""

from mvbrownian.viz.static import plot_increment_scatter, plot_paths

__all__ = [
    "plot_paths",
    "plot_increment_scatter",
]
