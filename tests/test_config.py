"""Unit tests for configuration loading and validation."""

import numpy as np
import pytest

from mvbrownian.common.config import (
    PipelineConfig,
    ProcessConfig,
    SimulationConfig,
    TimeGridConfig,
    load_config,
    save_config,
)
from mvbrownian.exceptions import ConfigValidationError


class TestValidation:
    def test_defaults_are_valid(self):
        PipelineConfig().validate()

    def test_wrong_vector_length(self):
        cfg = ProcessConfig(dimension=3)
        with pytest.raises(ConfigValidationError, match="x0"):
            cfg.validate()

    def test_correlation_not_psd(self):
        cfg = ProcessConfig(correlation=[[1.0, 1.5], [1.5, 1.0]])
        with pytest.raises(ConfigValidationError, match="semi-definite"):
            cfg.validate()

    def test_correlation_not_symmetric(self):
        cfg = ProcessConfig(correlation=[[1.0, 0.2], [0.3, 1.0]])
        with pytest.raises(ConfigValidationError, match="symmetric"):
            cfg.validate()

    def test_unknown_shock_mode(self):
        with pytest.raises(ConfigValidationError, match="shock_mode"):
            ProcessConfig(shock_mode="legacy").validate()

    def test_antithetic_needs_even_paths(self):
        with pytest.raises(ConfigValidationError, match="even"):
            SimulationConfig(n_paths=3, antithetic=True).validate()

    def test_time_grid(self):
        grid = TimeGridConfig(T=2.0, n_steps=4, t0=1.0)
        np.testing.assert_allclose(grid.observation_times(), [1.0, 1.5, 2.0, 2.5, 3.0])
        explicit = TimeGridConfig(times=[0.0, 0.1, 0.5])
        explicit.validate()
        np.testing.assert_allclose(explicit.observation_times(), [0.0, 0.1, 0.5])
        with pytest.raises(ConfigValidationError, match="increasing"):
            TimeGridConfig(times=[0.0, 0.5, 0.5]).validate()


class TestYamlIO:
    def test_round_trip(self, tmp_path):
        cfg = PipelineConfig(
            process=ProcessConfig(mu=[0.1, -0.1]),
            time_grid=TimeGridConfig(n_steps=12),
            simulation=SimulationConfig(method="sobol", n_paths=64),
            seed=7,
        )
        path = tmp_path / "cfg" / "config.yaml"
        save_config(cfg, path)
        loaded = load_config(path)
        assert loaded == cfg

    def test_partial_file_uses_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("simulation:\n  n_paths: 10\nseed: 3\n")
        cfg = load_config(path)
        assert cfg.simulation.n_paths == 10
        assert cfg.seed == 3
        assert cfg.process == ProcessConfig()

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("process:\n  dimenson: 2\n")
        with pytest.raises(ConfigValidationError, match="dimenson"):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml")

    def test_invalid_file_rejected(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("time_grid:\n  T: -1.0\n")
        with pytest.raises(ConfigValidationError, match="T must be positive"):
            load_config(path)
