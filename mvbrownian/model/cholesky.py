"""
Cholesky factorisation of the shock covariance matrix.

Provides the factorisation primitive (positive definite fast path with a
semi-definite fallback) and a memoised factor keyed on a parameter version.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from mvbrownian.exceptions import DecompositionError

logger = logging.getLogger(__name__)


def cholesky_factor(cov: NDArray[np.float64], tol: float = 1e-12) -> NDArray[np.float64]:
    """Compute the lower-triangular Cholesky factor of a covariance matrix.

    Parameters
    ----------
    cov : (c, c) array
        Symmetric positive semi-definite matrix. Only the lower triangle is read.
    tol : float
        Relative tolerance under which a pivot is treated as zero.

    Returns
    -------
    L : (c, c) array
        Lower-triangular factor such that L @ L^T = cov.

    Raises
    ------
    DecompositionError
        If ``cov`` is not positive semi-definite.
    """
    cov = np.asarray(cov, dtype=np.float64)
    if cov.ndim != 2 or cov.shape[0] != cov.shape[1]:
        raise DecompositionError(f"covariance must be square, got shape {cov.shape}")
    if not np.all(np.isfinite(cov)):
        raise DecompositionError("covariance contains non-finite entries")
    try:
        return np.linalg.cholesky(cov)
    except np.linalg.LinAlgError:
        logger.debug("Covariance not positive definite, trying semi-definite factorisation")
    return _semidefinite_cholesky(cov, tol)


def _semidefinite_cholesky(cov: NDArray[np.float64], tol: float) -> NDArray[np.float64]:
    """Column-wise Cholesky that zeroes the columns of vanishing pivots."""
    n = cov.shape[0]
    scale = float(np.max(np.abs(np.diag(cov)))) if n else 0.0
    eps = tol * scale if scale > 0 else tol
    L = np.zeros_like(cov)

    for j in range(n):
        pivot = cov[j, j] - L[j, :j] @ L[j, :j]
        below = cov[j + 1:, j] - L[j + 1:, :j] @ L[j, :j]
        if abs(pivot) <= eps and not np.any(np.abs(below) > eps):
            # Zero pivot with a vanishing column
            continue
        if pivot <= 0:
            raise DecompositionError(
                "covariance matrix is not positive semi-definite",
                pivot_index=j, pivot=pivot,
            )
        L[j, j] = np.sqrt(pivot)
        L[j + 1:, j] = below / L[j, j]

    if not np.allclose(L @ L.T, np.tril(cov) + np.tril(cov, -1).T, rtol=1e-8, atol=eps):
        raise DecompositionError("covariance matrix is not positive semi-definite")
    return L


class CholeskyFactorCache:
    """Lazily computed Cholesky factor invalidated by a version token.

    Every parameter change calls :meth:`invalidate`, which bumps the version.
    :meth:`get` refactors only when the cached factor was computed for an
    older version.
    """

    def __init__(self) -> None:
        self._factor: NDArray[np.float64] | None = None
        self._version = 0
        self._factored_version = -1

    @property
    def version(self) -> int:
        return self._version

    @property
    def is_valid(self) -> bool:
        return self._factor is not None and self._factored_version == self._version

    def invalidate(self) -> None:
        """Mark the cached factor stale."""
        self._version += 1

    def get(self, cov: NDArray[np.float64]) -> NDArray[np.float64]:
        """Return the factor of ``cov``, computing it if the cache is stale.

        Raises
        ------
        DecompositionError
            Propagated from :func:`cholesky_factor`; the cache stays stale.
        """
        if not self.is_valid:
            factor = cholesky_factor(cov)
            self._factor = factor
            self._factored_version = self._version
            logger.debug(f"Cholesky factor computed for version {self._version} (c={cov.shape[0]})")
        return self._factor
