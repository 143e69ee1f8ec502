#!/usr/bin/env python3
# src/token_gate/config/settings.py
"""
Limiter settings resolved from the environment.
"""

from dataclasses import dataclass

from ..constants import DEFAULT_PRUNE_IDLE_SECONDS
from ..errors import ConfigurationError, format_invalid_env_error
from .base import ConfigDetector
from .constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_RATE,
    ENV_DEBUG,
    ENV_LOG_LEVEL,
    ENV_PRUNE_IDLE,
    ENV_RATE,
    VALID_LOG_LEVELS,
)


@dataclass(frozen=True)
class GateSettings:
    """Resolved limiter configuration.

    ``rate`` is stored as given; the Limiter clamps values below 1.
    """

    rate: int = DEFAULT_RATE
    log_level: str = DEFAULT_LOG_LEVEL
    debug: bool = False
    prune_idle_seconds: float = DEFAULT_PRUNE_IDLE_SECONDS


class SettingsDetector(ConfigDetector):
    """Detects GateSettings from TOKEN_GATE_* environment variables."""

    def detect(self) -> GateSettings:
        debug = self.get_env_flag(ENV_DEBUG)
        return GateSettings(
            rate=self.detect_rate(),
            log_level="DEBUG" if debug else self.detect_log_level(),
            debug=debug,
            prune_idle_seconds=self.detect_prune_idle(),
        )

    def detect_rate(self) -> int:
        value = self.get_env_var(ENV_RATE)
        if value is None:
            return DEFAULT_RATE
        try:
            return int(value)
        except ValueError:
            raise ConfigurationError(
                format_invalid_env_error(ENV_RATE, value, "integer"),
                suggestion=f"Set {ENV_RATE} to a whole number of requests per second, e.g. {ENV_RATE}=10",
            ) from None

    def detect_log_level(self) -> str:
        value = self.get_env_var(ENV_LOG_LEVEL)
        if value is None:
            return DEFAULT_LOG_LEVEL
        level = value.upper()
        if level not in VALID_LOG_LEVELS:
            self.logger.warning(f"Unknown log level {value!r}, using {DEFAULT_LOG_LEVEL}")
            return DEFAULT_LOG_LEVEL
        return level

    def detect_prune_idle(self) -> float:
        value = self.get_env_var(ENV_PRUNE_IDLE)
        if value is None:
            return DEFAULT_PRUNE_IDLE_SECONDS
        try:
            seconds = float(value)
        except ValueError:
            raise ConfigurationError(
                format_invalid_env_error(ENV_PRUNE_IDLE, value, "number of seconds"),
                suggestion=f"Set {ENV_PRUNE_IDLE} to a positive number, e.g. {ENV_PRUNE_IDLE}=600",
            ) from None
        if seconds <= 0:
            raise ConfigurationError(
                f"{ENV_PRUNE_IDLE} must be positive, got {value!r}.",
                suggestion=f"Unset {ENV_PRUNE_IDLE} to use the default of {DEFAULT_PRUNE_IDLE_SECONDS:g} seconds",
            )
        return seconds


def load_settings() -> GateSettings:
    """Resolve settings from the current environment."""
    return SettingsDetector().detect()
