"""
Configuration system for correlated Brownian path simulation.

All parameters are grouped into dataclasses and can be loaded from YAML.
The seed feeds the simulator stream; no global random state is touched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np
import yaml

from mvbrownian.exceptions import ConfigValidationError


# ---------------------------------------------------------------------------
# Dataclass definitions
# ---------------------------------------------------------------------------

@dataclass
class ProcessConfig:
    """Parameters of the multivariate Brownian motion."""
    dimension: int = 2
    x0: list[float] = field(default_factory=lambda: [0.0, 0.0])
    mu: list[float] = field(default_factory=lambda: [0.05, 0.02])
    sigma: list[float] = field(default_factory=lambda: [0.20, 0.30])
    # Correlation of the driving shocks: shape (dimension, dimension)
    correlation: list[list[float]] = field(default_factory=lambda: [
        [1.0, 0.6],
        [0.6, 1.0],
    ])
    # "shared" or "per_coordinate" (legacy sequential draw pattern)
    shock_mode: str = "shared"

    def validate(self) -> None:
        c = self.dimension
        if c < 1:
            raise ConfigValidationError("dimension must be >= 1")
        for name in ("x0", "mu", "sigma"):
            if len(getattr(self, name)) != c:
                raise ConfigValidationError(
                    f"{name} must have length {c}, got {len(getattr(self, name))}"
                )
        if np.any(np.array(self.sigma) < 0):
            raise ConfigValidationError("sigma must be non-negative")
        corr = np.array(self.correlation, dtype=float)
        if corr.shape != (c, c):
            raise ConfigValidationError(f"correlation must be ({c}, {c}), got {corr.shape}")
        if not np.allclose(corr, corr.T):
            raise ConfigValidationError("correlation matrix must be symmetric")
        if not np.allclose(np.diag(corr), 1.0):
            raise ConfigValidationError("correlation diagonal must be all 1s")
        eigvals = np.linalg.eigvalsh(corr)
        if np.any(eigvals < -1e-10):
            raise ConfigValidationError("correlation matrix must be positive semi-definite")
        if self.shock_mode not in ("shared", "per_coordinate"):
            raise ConfigValidationError(
                f"shock_mode must be 'shared' or 'per_coordinate', got {self.shock_mode!r}"
            )


@dataclass
class TimeGridConfig:
    """Observation grid: T / n_steps spacing unless explicit times are given."""
    T: float = 1.0
    n_steps: int = 252
    t0: float = 0.0
    # Explicit observation times; overrides T, n_steps and t0 when set
    times: list[float] | None = None

    def validate(self) -> None:
        if self.times is not None:
            t = np.array(self.times, dtype=float)
            if t.ndim != 1 or t.size < 2:
                raise ConfigValidationError("times must list at least two observation times")
            if np.any(np.diff(t) <= 0):
                raise ConfigValidationError("times must be strictly increasing")
            return
        if self.T <= 0:
            raise ConfigValidationError("T must be positive")
        if self.n_steps < 1:
            raise ConfigValidationError("n_steps must be >= 1")

    def observation_times(self) -> np.ndarray:
        if self.times is not None:
            return np.array(self.times, dtype=float)
        return self.t0 + np.linspace(0.0, self.T, self.n_steps + 1)


@dataclass
class SimulationConfig:
    """Parameters of the Monte Carlo driver."""
    n_paths: int = 1000
    # "pseudo", "sobol" or "sequential"
    method: str = "pseudo"
    antithetic: bool = False
    scramble: bool = True
    # "inversion" or "direct"
    normal_method: str = "inversion"

    def validate(self) -> None:
        if self.n_paths < 1:
            raise ConfigValidationError("n_paths must be >= 1")
        if self.method not in ("pseudo", "sobol", "sequential"):
            raise ConfigValidationError(f"unknown method {self.method!r}")
        if self.normal_method not in ("inversion", "direct"):
            raise ConfigValidationError(f"unknown normal_method {self.normal_method!r}")
        if self.antithetic:
            if self.method != "pseudo":
                raise ConfigValidationError("antithetic requires method 'pseudo'")
            if self.n_paths % 2 != 0:
                raise ConfigValidationError("n_paths must be even with antithetic variates")


@dataclass
class PipelineConfig:
    """Top-level configuration aggregating all sub-configs."""
    process: ProcessConfig = field(default_factory=ProcessConfig)
    time_grid: TimeGridConfig = field(default_factory=TimeGridConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    seed: int = 42
    output_dir: str = "outputs/"

    def validate(self) -> None:
        """Validate all sub-configs."""
        self.process.validate()
        self.time_grid.validate()
        self.simulation.validate()


# ---------------------------------------------------------------------------
# YAML I/O
# ---------------------------------------------------------------------------

def _nested_dataclass_from_dict(cls: type, data: dict[str, Any]) -> Any:
    """Recursively instantiate nested dataclasses from dict."""
    from dataclasses import fields as dc_fields
    fieldtypes = {f.name: f.type for f in dc_fields(cls)}
    kwargs = {}
    for k, v in data.items():
        if k not in fieldtypes:
            raise ConfigValidationError(f"unknown config key {k!r} for {cls.__name__}")
        if isinstance(v, dict):
            ft = fieldtypes[k]
            if isinstance(ft, str):
                ft = globals().get(ft, None)
            if ft is not None and hasattr(ft, "__dataclass_fields__"):
                kwargs[k] = _nested_dataclass_from_dict(ft, v)
            else:
                kwargs[k] = v
        else:
            kwargs[k] = v
    return cls(**kwargs)


def load_config(path: str | Path) -> PipelineConfig:
    """Load configuration from a YAML file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raw = {}
    cfg = _nested_dataclass_from_dict(PipelineConfig, raw)
    cfg.validate()
    return cfg


def save_config(cfg: PipelineConfig, path: str | Path) -> None:
    """Save configuration to a YAML file."""
    from dataclasses import asdict
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = asdict(cfg)
    with open(path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)

