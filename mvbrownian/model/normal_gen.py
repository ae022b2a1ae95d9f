"""
Standard normal variate source.

Wraps a ``numpy.random.Generator`` stream. Inversion consumes exactly one
uniform per normal, which keeps consumption order reproducible and lets the
same code path serve quasi-random uniforms.
"""

from __future__ import annotations

from typing import Literal

import numpy as np
from numpy.typing import NDArray
from scipy.stats import norm

StreamLike = np.random.Generator | int | None

# Smallest uniform fed to the inverse CDF; random() may return exactly 0.0
_U_MIN = np.finfo(np.float64).tiny


def as_stream(stream: StreamLike) -> np.random.Generator:
    """Coerce a seed or ``None`` to a ``numpy.random.Generator``."""
    if isinstance(stream, np.random.Generator):
        return stream
    return np.random.default_rng(stream)


def uniforms_to_normals(u: NDArray[np.float64]) -> NDArray[np.float64]:
    """Map uniforms in [0, 1) to standard normals by inversion."""
    u = np.asarray(u, dtype=np.float64)
    return norm.ppf(np.maximum(u, _U_MIN))


class NormalGen:
    """Generator of standard normal variates.

    Parameters
    ----------
    stream : numpy.random.Generator, int or None
        Underlying uniform stream, or a seed used to build one.
    method : {"inversion", "direct"}
        ``"inversion"`` applies the normal inverse CDF to uniforms,
        ``"direct"`` calls ``Generator.standard_normal``.
    """

    def __init__(
        self,
        stream: StreamLike = None,
        method: Literal["inversion", "direct"] = "inversion",
    ):
        if method not in ("inversion", "direct"):
            raise ValueError(f"Unknown method: {method}. Use 'inversion' or 'direct'.")
        self.method = method
        self._stream = as_stream(stream)

    def next_double(self) -> float:
        """Draw one standard normal variate."""
        return float(self.next_array(1)[0])

    def next_array(self, n: int) -> NDArray[np.float64]:
        """Draw ``n`` standard normal variates in stream order."""
        if self.method == "inversion":
            return uniforms_to_normals(self._stream.random(n))
        return self._stream.standard_normal(n)

    def set_stream(self, stream: StreamLike) -> None:
        self._stream = as_stream(stream)

    def get_stream(self) -> np.random.Generator:
        return self._stream

    def __repr__(self) -> str:
        return f"NormalGen(method={self.method!r})"
