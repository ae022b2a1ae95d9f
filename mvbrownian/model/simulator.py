"""
Monte Carlo driver for correlated multivariate Brownian paths.

Produces stacks of paths with pseudo-random, antithetic, quasi-random
(scrambled Sobol) or sequential sampling.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

import numpy as np
from numpy.typing import NDArray
from scipy.stats import qmc

from mvbrownian.common.config import ProcessConfig, TimeGridConfig
from mvbrownian.model.brownian import MultivariateBrownianMotion
from mvbrownian.model.normal_gen import NormalGen

logger = logging.getLogger(__name__)

Method = Literal["pseudo", "sobol", "sequential"]


@dataclass
class SimulationResult:
    """Container for Monte Carlo simulation output."""

    paths: NDArray[np.float64]  # (n_paths, n_steps+1, c)
    times: NDArray[np.float64]  # (n_steps+1,)
    method: str
    n_paths: int
    n_steps: int


class MonteCarloSimulator:
    """Generates many independent paths of one correlated Brownian motion.

    Parameters
    ----------
    process_cfg : ProcessConfig
    grid_cfg : TimeGridConfig
    seed : int, optional
        Seed of the normal-variate stream and of the Sobol scrambling.
    normal_method : {"inversion", "direct"}
        Sampling method of the normal generator.
    """

    def __init__(
        self,
        process_cfg: ProcessConfig,
        grid_cfg: TimeGridConfig,
        seed: int | None = None,
        normal_method: Literal["inversion", "direct"] = "inversion",
    ):
        self.process_cfg = process_cfg
        self.grid_cfg = grid_cfg
        self.rng = np.random.default_rng(seed)
        self.gen = NormalGen(self.rng, method=normal_method)
        self.process = MultivariateBrownianMotion(
            process_cfg.dimension,
            process_cfg.x0,
            process_cfg.mu,
            process_cfg.sigma,
            process_cfg.correlation,
            source=self.gen,
            shock_mode=process_cfg.shock_mode,
            copy_on_return=True,
            times=grid_cfg.observation_times(),
        )

    def simulate(
        self,
        n_paths: int,
        method: Method = "pseudo",
        antithetic: bool = False,
        scramble: bool = True,
    ) -> SimulationResult:
        """Run a Monte Carlo simulation.

        Parameters
        ----------
        n_paths : int
            Number of paths.
        method : {"pseudo", "sobol", "sequential"}
            ``"pseudo"`` feeds blocks of normals to ``generate_path``,
            ``"sobol"`` feeds one scrambled Sobol point per path,
            ``"sequential"`` steps each path with ``next_observation``.
        antithetic : bool
            Pair every pseudo-random shock block Q with -Q. Requires an even
            ``n_paths`` and ``method="pseudo"``.
        scramble : bool
            Scramble the Sobol sequence (only for ``"sobol"``).

        Returns
        -------
        SimulationResult
        """
        if n_paths < 1:
            raise ValueError(f"n_paths must be >= 1, got {n_paths}")
        if antithetic and method != "pseudo":
            raise ValueError("antithetic variates are only available with method='pseudo'")
        if antithetic and n_paths % 2 != 0:
            raise ValueError("n_paths must be even when using antithetic variates")

        bm = self.process
        c, d = bm.dimension, bm.n_observation_times
        paths = np.empty((n_paths, d + 1, c), dtype=np.float64)

        if method == "pseudo":
            if antithetic:
                for p in range(0, n_paths, 2):
                    Q = self.gen.next_array(d * c)
                    paths[p] = bm.generate_path(Q)
                    paths[p + 1] = bm.generate_path(-Q)
            else:
                for p in range(n_paths):
                    paths[p] = bm.generate_path()
        elif method == "sobol":
            sampler = qmc.Sobol(d=d * c, scramble=scramble, seed=self.rng)
            points = sampler.random(n_paths)
            for p in range(n_paths):
                paths[p] = bm.generate_path_from_uniforms(points[p])
        elif method == "sequential":
            for p in range(n_paths):
                bm.reset_start_process()
                while bm.has_next_observation():
                    bm.next_observation()
                paths[p] = bm.get_path()
        else:
            raise ValueError(
                f"Unknown method: {method}. Use 'pseudo', 'sobol' or 'sequential'."
            )

        logger.info(f"Simulated {n_paths} paths ({method}), {d} steps, dimension {c}")
        return SimulationResult(
            paths=paths,
            times=bm.get_observation_times().copy(),
            method=method,
            n_paths=n_paths,
            n_steps=d,
        )

    # ------------------------------------------------------------------
    # Path statistics
    # ------------------------------------------------------------------
    @staticmethod
    def increments(paths: NDArray[np.float64]) -> NDArray[np.float64]:
        """Increments X(t[j+1]) - X(t[j]).

        Parameters
        ----------
        paths : (..., d+1, c) array

        Returns
        -------
        inc : (..., d, c) array
        """
        return np.diff(paths, axis=-2)

    @staticmethod
    def empirical_correlation(
        paths: NDArray[np.float64], times: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        """Correlation matrix of increments pooled over paths and steps.

        Increments are divided by sqrt(dt) so unequal steps share one scale.

        Parameters
        ----------
        paths : (n_paths, d+1, c) array
        times : (d+1,) array

        Returns
        -------
        corr : (c, c) array
        """
        inc = MonteCarloSimulator.increments(paths)
        inc = inc / np.sqrt(np.diff(times))[None, :, None]
        c = paths.shape[-1]
        return np.atleast_2d(np.corrcoef(inc.reshape(-1, c), rowvar=False))
