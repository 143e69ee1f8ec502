#!/usr/bin/env python3
"""
Configuration detection constants: environment variable names and defaults.
"""

# ---------------------------------------------------------------------------
# Environment variables
# ---------------------------------------------------------------------------
ENV_RATE = "TOKEN_GATE_RATE"
ENV_LOG_LEVEL = "TOKEN_GATE_LOG_LEVEL"
ENV_DEBUG = "TOKEN_GATE_DEBUG"
ENV_PRUNE_IDLE = "TOKEN_GATE_PRUNE_IDLE"


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------
DEFAULT_RATE = 1
DEFAULT_LOG_LEVEL = "WARNING"

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

TRUTHY_VALUES = ("1", "true", "yes", "on")
FALSY_VALUES = ("0", "false", "no", "off", "")
