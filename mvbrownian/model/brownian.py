"""
Correlated multivariate Brownian motion.

Coordinate i follows dX_i = mu_i dt + sigma_i dW_i with dW_i dW_j = R_ij dt.
Increments are generated as  mu * dt + sqrt(dt) * L @ Z  where L is the
lower Cholesky factor of Sigma = R * sigma sigma^T and Z is a vector of
independent standard normals.
"""

from __future__ import annotations

import logging
from typing import Literal, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from mvbrownian.exceptions import DimensionMismatchError, ProcessStateError
from mvbrownian.model.cholesky import CholeskyFactorCache
from mvbrownian.model.covariance import build_covariance, leading_block
from mvbrownian.model.normal_gen import NormalGen, StreamLike, uniforms_to_normals
from mvbrownian.model.process import MultivariateStochasticProcess

logger = logging.getLogger(__name__)

ShockMode = Literal["shared", "per_coordinate"]


class MultivariateBrownianMotion(MultivariateStochasticProcess):
    """Vector Brownian motion with drift, volatility and correlated shocks.

    Parameters
    ----------
    c : int
        Dimension of the process.
    x0 : (>=c,) array-like
        Value at the first observation time.
    mu : (>=c,) array-like
        Drift per coordinate.
    sigma : (>=c,) array-like
        Volatility per coordinate.
    correlation : (>=c, >=c) array-like
        Correlation matrix of the driving shocks. Symmetry and unit diagonal
        are not checked.
    source : NormalGen, numpy.random.Generator, int or None
        Source of standard normal variates.
    shock_mode : {"shared", "per_coordinate"}
        How sequential steps draw normals. ``"shared"`` draws one c-vector per
        step and applies L to it, which yields the target correlation.
        ``"per_coordinate"`` draws a fresh c-vector for every coordinate
        (c^2 normals per step); coordinates then come out uncorrelated. Full
        path generation always shares one vector per step.
    copy_on_return : bool
        Return copies instead of read-only views of the path buffer.
    times : array-like, optional
        Observation times t[0] < ... < t[d]. May also be set later with
        :meth:`set_observation_times`.

    Raises
    ------
    DimensionMismatchError
        If an argument is smaller than ``c``.

    Examples
    --------
    >>> bm = MultivariateBrownianMotion(
    ...     2, [0.0, 0.0], [0.0, 0.1], [1.0, 0.5], [[1.0, 0.3], [0.3, 1.0]],
    ...     source=42, times=[0.0, 0.5, 1.0],
    ... )
    >>> bm.generate_path().shape
    (3, 2)
    """

    def __init__(
        self,
        c: int,
        x0: ArrayLike,
        mu: ArrayLike,
        sigma: ArrayLike,
        correlation: ArrayLike,
        source: NormalGen | StreamLike = None,
        *,
        shock_mode: ShockMode = "shared",
        copy_on_return: bool = False,
        times: Sequence[float] | None = None,
    ):
        super().__init__(copy_on_return=copy_on_return)
        if shock_mode not in ("shared", "per_coordinate"):
            raise ValueError(
                f"Unknown shock_mode: {shock_mode}. Use 'shared' or 'per_coordinate'."
            )
        self.shock_mode = shock_mode
        self.gen = source if isinstance(source, NormalGen) else NormalGen(source)
        self._factor_cache = CholeskyFactorCache()
        # Steps taken by next_observation_from, which never touch the buffer
        self.free_step_count = 0
        self.set_params(c, x0, mu, sigma, correlation)
        if times is not None:
            self.set_observation_times(times)

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------
    def set_params(
        self,
        c: int,
        x0: ArrayLike,
        mu: ArrayLike,
        sigma: ArrayLike,
        correlation: ArrayLike,
    ) -> None:
        """Set every parameter, including the dimension.

        Rebuilds the covariance, invalidates the Cholesky factor and, when a
        time grid is set, reallocates the path buffer and resets the cursor.
        The process is left unchanged if validation fails.
        """
        if c < 1:
            raise ValueError(f"process dimension must be >= 1, got {c}")
        for name, vec in (("x0", x0), ("mu", mu), ("sigma", sigma)):
            if len(vec) < c:
                raise DimensionMismatchError(name, c, len(vec))
        n_rows = len(correlation)
        n_cols = len(correlation[0]) if n_rows else 0
        if n_rows < c or n_cols < c:
            raise DimensionMismatchError("correlation", f"{c}x{c}", f"{n_rows}x{n_cols}")

        self.c = c
        self.x0 = np.asarray(x0, dtype=np.float64)
        self.mu = np.asarray(mu, dtype=np.float64)
        self.sigma = np.asarray(sigma, dtype=np.float64)
        self.correlation = leading_block(correlation, c)
        self._rebuild()

    def update_params(self, x0: ArrayLike, mu: ArrayLike, sigma: ArrayLike) -> None:
        """Replace x0, mu and sigma, keeping the dimension and correlation.

        No size validation is done; the vectors must hold at least ``c``
        entries.
        """
        self.x0 = np.asarray(x0, dtype=np.float64)
        self.mu = np.asarray(mu, dtype=np.float64)
        self.sigma = np.asarray(sigma, dtype=np.float64)
        self._rebuild()

    def _rebuild(self) -> None:
        self.covariance = build_covariance(self.correlation, self.sigma, self.c)
        self._factor_cache.invalidate()
        logger.debug(
            f"Parameters set (c={self.c}, version={self._factor_cache.version})"
        )
        if self.observation_times_set:
            self.init()

    def init(self) -> None:
        super().init()
        self.time_steps.refresh()

    def get_mu(self) -> NDArray[np.float64]:
        """Return the drift vector.

        This is the internal array, not a copy: in-place changes affect the
        following steps.
        """
        return self.mu

    @property
    def cholesky_factor(self) -> NDArray[np.float64]:
        """Lower Cholesky factor of the covariance, computed on first access."""
        return self._factor_cache.get(self.covariance)

    # ------------------------------------------------------------------
    # Variate source
    # ------------------------------------------------------------------
    def set_stream(self, stream: StreamLike) -> None:
        self.gen.set_stream(stream)

    def get_stream(self) -> np.random.Generator:
        return self.gen.get_stream()

    def get_generator(self) -> NormalGen:
        return self.gen

    def _correlated_shock(self, L: NDArray[np.float64]) -> NDArray[np.float64]:
        c = self.c
        if self.shock_mode == "shared":
            return L @ self.gen.next_array(c)
        z = np.empty(c)
        for i in range(c):
            z[i] = L[i] @ self.gen.next_array(c)
        return z

    # ------------------------------------------------------------------
    # Sequential generation
    # ------------------------------------------------------------------
    def _require_next(self) -> int:
        self._require_grid()
        j = self.observation_index
        if j >= self.time_steps.d:
            raise ProcessStateError(
                f"no observation left: cursor is at the last time index {j}"
            )
        return j

    @staticmethod
    def _fill(out: NDArray[np.float64] | None, obs: NDArray[np.float64]) -> NDArray[np.float64]:
        if out is None:
            return obs
        out[: obs.size] = obs
        return out

    def next_observation(self, out: NDArray[np.float64] | None = None) -> NDArray[np.float64]:
        """Advance the stored path by one step on the precomputed grid.

        Parameters
        ----------
        out : (>=c,) array, optional
            Receives the new observation. A fresh array is returned if omitted.

        Returns
        -------
        obs : array
            ``out`` or a new (c,) array holding X(t[j+1]).
        """
        j = self._require_next()
        L = self._factor_cache.get(self.covariance)
        c = self.c
        ts = self.time_steps

        obs = self._path[j] + self.mu[:c] * ts.dt[j] + ts.sqrdt[j] * self._correlated_shock(L)
        self._path[j + 1] = obs
        self.observation_index += 1
        return self._fill(out, obs)

    def next_observation_at(
        self, next_time: float, out: NDArray[np.float64] | None = None
    ) -> NDArray[np.float64]:
        """Advance the stored path to an explicit time ``next_time``.

        Overwrites t[j+1] with ``next_time`` and uses dt = next_time - t[j].
        The cached dt/sqrdt arrays are left as they were.
        """
        j = self._require_next()
        ts = self.time_steps
        delta = next_time - ts.t[j]
        if delta < 0:
            raise ValueError(
                f"next_time {next_time} precedes the current time {ts.t[j]}"
            )
        L = self._factor_cache.get(self.covariance)
        c = self.c

        ts.t[j + 1] = next_time
        obs = self._path[j] + self.mu[:c] * delta + np.sqrt(delta) * self._correlated_shock(L)
        self._path[j + 1] = obs
        self.observation_index += 1
        return self._fill(out, obs)

    def next_observation_from(self, x: ArrayLike, delta_t: float) -> NDArray[np.float64]:
        """One step of length ``delta_t`` from an arbitrary state ``x``.

        Neither the path buffer nor the observation cursor is touched; the
        call is counted in ``free_step_count``.
        """
        c = self.c
        x = np.asarray(x, dtype=np.float64)
        if x.size < c:
            raise DimensionMismatchError("x", c, x.size)
        if delta_t < 0:
            raise ValueError(f"delta_t must be non-negative, got {delta_t}")
        L = self._factor_cache.get(self.covariance)

        obs = x[:c] + self.mu[:c] * delta_t + np.sqrt(delta_t) * self._correlated_shock(L)
        self.free_step_count += 1
        return obs

    # ------------------------------------------------------------------
    # Full path generation
    # ------------------------------------------------------------------
    def generate_path(
        self, source: ArrayLike | np.random.Generator | None = None
    ) -> NDArray[np.float64]:
        """Generate the whole path on the current grid.

        Parameters
        ----------
        source : None, numpy.random.Generator or array-like
            - ``None``: draw d*c normals from the generator (step-major, then
              coordinate).
            - a ``Generator``: rebind the generator's stream to it, then draw.
            - an array of at least d*c standard normal shocks (flat or (d, c));
              entries j*c .. j*c+c-1 form the shock vector of step j.

        Returns
        -------
        path : (d+1, c) array
            The path buffer (read-only view unless ``copy_on_return``).
        """
        self._require_grid()
        if isinstance(source, np.random.Generator):
            self.gen.set_stream(source)
            source = None
        if source is None:
            source = self.gen.next_array(self.time_steps.d * self.c)
        return self._generate_from_shocks(source)

    def generate_path_from_uniforms(self, uniform01: ArrayLike) -> NDArray[np.float64]:
        """Generate the path from d*c uniforms in (0, 1), e.g. one QMC point.

        Uniforms are mapped to normals with the inverse normal CDF.
        """
        return self.generate_path(uniforms_to_normals(np.asarray(uniform01, dtype=np.float64)))

    def _generate_from_shocks(self, shocks: ArrayLike) -> NDArray[np.float64]:
        self._require_grid()
        c = self.c
        ts = self.time_steps
        d = ts.d
        Q = np.asarray(shocks, dtype=np.float64).reshape(-1)
        if Q.size < d * c:
            raise DimensionMismatchError("shocks", d * c, Q.size)
        L = self._factor_cache.get(self.covariance)

        Q = Q[: d * c].reshape(d, c)
        mu = self.mu[:c]
        self._path[0] = self.x0[:c]
        for j in range(d):
            self._path[j + 1] = self._path[j] + mu * ts.dt[j] + ts.sqrdt[j] * (L @ Q[j])
        self.observation_index = d
        return self.get_path()

    def __repr__(self) -> str:
        return (
            f"MultivariateBrownianMotion(c={self.c}, d={self.n_observation_times}, "
            f"shock_mode={self.shock_mode!r})"
        )
