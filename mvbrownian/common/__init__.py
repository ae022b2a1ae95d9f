"""Common utilities and configuration."""

from mvbrownian.common.config import (
    PipelineConfig,
    ProcessConfig,
    SimulationConfig,
    TimeGridConfig,
    load_config,
    save_config,
)

__all__ = [
    "ProcessConfig",
    "TimeGridConfig",
    "SimulationConfig",
    "PipelineConfig",
    "load_config",
    "save_config",
]
