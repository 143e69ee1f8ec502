#!/usr/bin/env python3
"""
Top-level constants shared across the token_gate package.
"""

# ---------------------------------------------------------------------------
# Bucket arithmetic
# ---------------------------------------------------------------------------
MIN_RATE = 1
TOKEN_COST = 1.0


# ---------------------------------------------------------------------------
# Pruning
# ---------------------------------------------------------------------------
DEFAULT_PRUNE_IDLE_SECONDS = 3600.0


# ---------------------------------------------------------------------------
# Verdict labels (match the demonstration driver output)
# ---------------------------------------------------------------------------
LABEL_ALLOWED = "Allowed"
LABEL_DENIED = "Denied"

VERDICT_ATTRIBUTE = "verdict"
VERDICT_ALLOWED = "allowed"
VERDICT_DENIED = "denied"


# ---------------------------------------------------------------------------
# Telemetry instrument names
# ---------------------------------------------------------------------------
INSTRUMENTATION_NAME = "token_gate"
METRIC_DECISIONS = "token_gate.decisions"
SPAN_PRUNE = "token_gate.prune"
