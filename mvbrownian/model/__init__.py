"""Model sub-package: covariance, Cholesky cache, time grid, variates, Brownian motion, simulator."""

from mvbrownian.model.brownian import MultivariateBrownianMotion
from mvbrownian.model.cholesky import CholeskyFactorCache, cholesky_factor
from mvbrownian.model.covariance import build_covariance
from mvbrownian.model.normal_gen import NormalGen
from mvbrownian.model.process import MultivariateStochasticProcess
from mvbrownian.model.simulator import MonteCarloSimulator, SimulationResult
from mvbrownian.model.time_grid import TimeStepCache

__all__ = [
    "MultivariateBrownianMotion",
    "MultivariateStochasticProcess",
    "CholeskyFactorCache",
    "cholesky_factor",
    "build_covariance",
    "NormalGen",
    "TimeStepCache",
    "MonteCarloSimulator",
    "SimulationResult",
]
