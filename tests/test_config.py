"""Тесты загрузки и валидации конфигурации."""

import logging

import pytest

from singlab.config import (
    DEFAULT_CONFIG,
    DetectionConfig,
    DiagnosticsConfig,
    SingfunConfig,
    SmoothConfig,
    load_config,
    resolve_config,
)


@pytest.fixture
def restore_log_level():
    logger = logging.getLogger("singlab")
    level = logger.level
    yield
    logger.setLevel(level)


class TestDefaults:
    def test_default_values(self, cfg):
        assert cfg.exponent_tol == 1e-10
        assert cfg.detection.ratio == 0.5
        assert cfg.detection.max_power == 52
        assert cfg.smooth.max_length == 1025
        assert cfg.diagnostics.log_level == "WARNING"

    def test_resolve(self, cfg):
        assert resolve_config(None) is DEFAULT_CONFIG
        assert resolve_config(cfg) is cfg

    def test_override_is_shallow_copy(self, cfg):
        new = cfg.override(exponent_tol=1e-6)
        assert new.exponent_tol == 1e-6
        assert cfg.exponent_tol == 1e-10
        assert new.smooth is cfg.smooth


class TestValidation:
    @pytest.mark.parametrize("tol", [0.0, -1e-3, 0.5])
    def test_exponent_tol(self, tol):
        with pytest.raises(ValueError):
            SingfunConfig(exponent_tol=tol).validate()

    @pytest.mark.parametrize("kwargs", [
        {"ratio": 1.0},
        {"ratio": 0.0},
        {"max_power": 5},
        {"stable_steps": 0},
        {"max_pole_order": 0},
        {"regression_window": 2},
        {"max_refinements": 0},
    ])
    def test_detection(self, kwargs):
        with pytest.raises(ValueError):
            DetectionConfig(**kwargs).validate()

    @pytest.mark.parametrize("kwargs", [
        {"min_length": 1},
        {"max_length": 9},
        {"tol": 0.0},
        {"zero_tol": -1.0},
        {"root_tol": 0.0},
    ])
    def test_smooth(self, kwargs):
        with pytest.raises(ValueError):
            SmoothConfig(**kwargs).validate()

    def test_log_level(self):
        with pytest.raises(ValueError):
            DiagnosticsConfig(log_level="TRACE").validate()

    def test_nested_validation(self):
        with pytest.raises(ValueError):
            SingfunConfig(smooth=SmoothConfig(tol=-1.0)).validate()


class TestEnvironment:
    def test_from_env(self, monkeypatch, restore_log_level):
        monkeypatch.setenv("SINGLAB_EXPONENT_TOL", "1e-8")
        monkeypatch.setenv("SINGLAB_SMOOTH_MAX_LENGTH", "513")
        monkeypatch.setenv("SINGLAB_DETECT_MAX_POLE_ORDER", "6")
        monkeypatch.setenv("SINGLAB_LOG_LEVEL", "DEBUG")
        cfg = SingfunConfig.from_env()
        assert cfg.exponent_tol == 1e-8
        assert cfg.smooth.max_length == 513
        assert cfg.detection.max_pole_order == 6
        assert logging.getLogger("singlab").level == logging.DEBUG

    def test_bad_value_falls_back(self, monkeypatch, caplog, restore_log_level):
        monkeypatch.setenv("SINGLAB_SMOOTH_TOL", "tiny")
        with caplog.at_level(logging.WARNING, logger="singlab.config"):
            cfg = SingfunConfig.from_env()
        assert cfg.smooth.tol == SmoothConfig().tol
        assert any("SINGLAB_SMOOTH_TOL" in r.getMessage() for r in caplog.records)

    def test_invalid_env_value_rejected(self, monkeypatch, restore_log_level):
        monkeypatch.setenv("SINGLAB_EXPONENT_TOL", "0.7")
        with pytest.raises(ValueError):
            SingfunConfig.from_env()


class TestLoadConfig:
    def test_overrides(self):
        cfg = load_config({"exponent_tol": 1e-8, "smooth": SmoothConfig(max_length=513)})
        assert cfg.exponent_tol == 1e-8
        assert cfg.smooth.max_length == 513

    def test_overrides_validated(self):
        with pytest.raises(ValueError):
            load_config({"exponent_tol": -1.0})

    def test_environment_ignored_by_default(self, monkeypatch):
        monkeypatch.setenv("SINGLAB_EXPONENT_TOL", "1e-8")
        assert load_config().exponent_tol == 1e-10

    def test_environment_on_request(self, monkeypatch, restore_log_level):
        monkeypatch.setenv("SINGLAB_EXPONENT_TOL", "1e-8")
        assert load_config(from_environment=True).exponent_tol == 1e-8
