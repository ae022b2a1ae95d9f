"""
Multivariate Brownian: correlated Brownian path generation.

Sequential and full-path sampling of a vector Brownian motion whose
increments are jointly normal with a given correlation structure.
"""

__version__ = "1.0.0"
