#!/usr/bin/env python3
"""Tests for environment-driven configuration."""

import pytest

from token_gate.config import GateSettings, SettingsDetector, load_settings
from token_gate.config.base import ConfigDetector
from token_gate.constants import DEFAULT_PRUNE_IDLE_SECONDS
from token_gate.errors import ConfigurationError

ENV_VARS = ("TOKEN_GATE_RATE", "TOKEN_GATE_LOG_LEVEL", "TOKEN_GATE_DEBUG", "TOKEN_GATE_PRUNE_IDLE")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestConfigDetector:
    def test_detect_is_abstract(self):
        with pytest.raises(NotImplementedError):
            ConfigDetector().detect()

    def test_blank_env_var_is_unset(self, monkeypatch):
        monkeypatch.setenv("TOKEN_GATE_RATE", "   ")
        assert ConfigDetector().get_env_var("TOKEN_GATE_RATE", "default") == "default"

    @pytest.mark.parametrize("value", ["1", "true", "YES", "on"])
    def test_truthy_flags(self, monkeypatch, value):
        monkeypatch.setenv("TOKEN_GATE_DEBUG", value)
        assert ConfigDetector().get_env_flag("TOKEN_GATE_DEBUG") is True

    @pytest.mark.parametrize("value", ["0", "false", "No", "off"])
    def test_falsy_flags(self, monkeypatch, value):
        monkeypatch.setenv("TOKEN_GATE_DEBUG", value)
        assert ConfigDetector().get_env_flag("TOKEN_GATE_DEBUG", default=True) is False

    def test_unrecognised_flag_uses_default(self, monkeypatch, caplog):
        monkeypatch.setenv("TOKEN_GATE_DEBUG", "maybe")
        assert ConfigDetector().get_env_flag("TOKEN_GATE_DEBUG") is False
        assert "maybe" in caplog.text


class TestSettingsDetector:
    def test_defaults(self):
        assert load_settings() == GateSettings()

    def test_default_values(self):
        settings = GateSettings()
        assert settings.rate == 1
        assert settings.log_level == "WARNING"
        assert settings.debug is False
        assert settings.prune_idle_seconds == DEFAULT_PRUNE_IDLE_SECONDS

    def test_rate_from_env(self, monkeypatch):
        monkeypatch.setenv("TOKEN_GATE_RATE", "25")
        assert load_settings().rate == 25

    def test_non_positive_rate_is_passed_through(self, monkeypatch):
        monkeypatch.setenv("TOKEN_GATE_RATE", "-3")
        assert load_settings().rate == -3

    def test_invalid_rate_raises_with_suggestion(self, monkeypatch):
        monkeypatch.setenv("TOKEN_GATE_RATE", "fast")
        with pytest.raises(ConfigurationError) as exc_info:
            SettingsDetector().detect()
        assert "TOKEN_GATE_RATE='fast'" in str(exc_info.value)
        assert "TOKEN_GATE_RATE=10" in exc_info.value.suggestion

    def test_log_level_is_normalised(self, monkeypatch):
        monkeypatch.setenv("TOKEN_GATE_LOG_LEVEL", "info")
        assert load_settings().log_level == "INFO"

    def test_unknown_log_level_falls_back(self, monkeypatch):
        monkeypatch.setenv("TOKEN_GATE_LOG_LEVEL", "verbose")
        assert load_settings().log_level == "WARNING"

    def test_debug_forces_debug_log_level(self, monkeypatch):
        monkeypatch.setenv("TOKEN_GATE_DEBUG", "1")
        monkeypatch.setenv("TOKEN_GATE_LOG_LEVEL", "error")
        settings = load_settings()
        assert settings.debug is True
        assert settings.log_level == "DEBUG"

    def test_prune_idle_from_env(self, monkeypatch):
        monkeypatch.setenv("TOKEN_GATE_PRUNE_IDLE", "90.5")
        assert load_settings().prune_idle_seconds == 90.5

    @pytest.mark.parametrize("value", ["soon", "0", "-10"])
    def test_invalid_prune_idle_raises(self, monkeypatch, value):
        monkeypatch.setenv("TOKEN_GATE_PRUNE_IDLE", value)
        with pytest.raises(ConfigurationError) as exc_info:
            load_settings()
        assert exc_info.value.suggestion

    def test_settings_are_frozen(self):
        settings = GateSettings()
        with pytest.raises(AttributeError):
            settings.rate = 5
