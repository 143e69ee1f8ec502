#!/usr/bin/env python3
# src/token_gate/config/base.py
"""
Base class for configuration detectors.
"""

import logging
import os
from typing import Any

from .constants import FALSY_VALUES, TRUTHY_VALUES


class ConfigDetector:
    """Base detector: environment access plus a per-class logger."""

    def __init__(self) -> None:
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def detect(self) -> Any:
        raise NotImplementedError

    def get_env_var(self, key: str, default: str | None = None) -> str | None:
        """Read an environment variable, treating blank values as unset."""
        value = os.environ.get(key)
        if value is None or not value.strip():
            return default
        return value.strip()

    def get_env_flag(self, key: str, default: bool = False) -> bool:
        """Read a boolean environment variable."""
        value = self.get_env_var(key)
        if value is None:
            return default
        lowered = value.lower()
        if lowered in TRUTHY_VALUES:
            return True
        if lowered in FALSY_VALUES:
            return False
        self.logger.warning(f"Ignoring unrecognised boolean {key}={value!r}")
        return default
