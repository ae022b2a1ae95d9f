"""Observation times and the per-step quantities derived from them."""

from __future__ import annotations

from typing import Sequence

import numpy as np
from numpy.typing import NDArray


class TimeStepCache:
    """Observation grid t[0..d] with precomputed step sizes.

    ``dt[j] = t[j+1] - t[j]`` and ``sqrdt[j] = sqrt(dt[j])`` for ``j < d``.

    Parameters
    ----------
    times : (d+1,) array-like
        Strictly increasing observation times, at least two of them.
    """

    def __init__(self, times: Sequence[float] | NDArray[np.float64]):
        t = np.array(times, dtype=np.float64)
        if t.ndim != 1 or t.size < 2:
            raise ValueError(f"need at least two observation times, got shape {t.shape}")
        if np.any(np.diff(t) <= 0):
            raise ValueError("observation times must be strictly increasing")
        self.t = t
        self.dt: NDArray[np.float64] = np.empty(t.size - 1)
        self.sqrdt: NDArray[np.float64] = np.empty(t.size - 1)
        self.refresh()

    @classmethod
    def equally_spaced(cls, delta: float, d: int, t0: float = 0.0) -> "TimeStepCache":
        """Grid t[j] = t0 + j * delta for j = 0..d."""
        if delta <= 0:
            raise ValueError(f"delta must be positive, got {delta}")
        if d < 1:
            raise ValueError(f"d must be >= 1, got {d}")
        return cls(t0 + delta * np.arange(d + 1, dtype=np.float64))

    @property
    def d(self) -> int:
        """Number of steps (observation times minus one)."""
        return self.t.size - 1

    def refresh(self) -> None:
        """Recompute dt and sqrdt from the current observation times."""
        self.dt = np.diff(self.t)
        self.sqrdt = np.sqrt(self.dt)

    def __repr__(self) -> str:
        return f"TimeStepCache(d={self.d}, t0={self.t[0]}, T={self.t[-1]})"
