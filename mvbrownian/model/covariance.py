"""
Covariance of the driving Brownian shocks.

Scales a correlation matrix by per-coordinate volatilities.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from numpy.typing import NDArray


def leading_block(correlation: Sequence[Sequence[float]] | NDArray[np.float64], c: int) -> NDArray[np.float64]:
    """Return the leading ``c x c`` block of a (possibly ragged) correlation matrix."""
    return np.array([list(row)[:c] for row in list(correlation)[:c]], dtype=np.float64)


def build_covariance(
    correlation: Sequence[Sequence[float]] | NDArray[np.float64],
    sigma: Sequence[float] | NDArray[np.float64],
    c: int,
) -> NDArray[np.float64]:
    """Build the covariance matrix Sigma[i, j] = R[i, j] * sigma[i] * sigma[j].

    Only the leading ``c`` entries of ``sigma`` and the leading ``c x c``
    block of ``correlation`` are used.

    Parameters
    ----------
    correlation : (>=c, >=c) array-like
        Correlation matrix of the driving shocks.
    sigma : (>=c,) array-like
        Per-coordinate volatilities.
    c : int
        Process dimension.

    Returns
    -------
    cov : (c, c) array
        Symmetric whenever the correlation block is symmetric.
    """
    R = leading_block(correlation, c)
    s = np.asarray(sigma, dtype=np.float64)[:c]
    # Evaluated as (R * s_i) * s_j, the same order as the scalar formula
    return R * s[:, None] * s[None, :]
