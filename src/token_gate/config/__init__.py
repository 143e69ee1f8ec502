#!/usr/bin/env python3
# src/token_gate/config/__init__.py
"""
Environment-driven configuration for token_gate.
"""

from .settings import GateSettings, SettingsDetector, load_settings

__all__ = [
    "GateSettings",
    "SettingsDetector",
    "load_settings",
]
