#!/usr/bin/env python3
"""
token_gate - in-process, per-client token-bucket admission control.

    from token_gate import Limiter

    limiter = Limiter(10)  # 10 requests/second per client, bursts up to 10

    if limiter.decide(client_id):
        serve(request)
    else:
        reject(request)
"""

from .bucket import Bucket, BucketSnapshot
from .config import GateSettings, load_settings
from .errors import ConfigurationError, TokenGateError, UnknownScenarioError
from .limiter import Limiter, create_limiter
from .testing import ManualClock

__version__ = "0.1.0"
__all__ = [
    "Bucket",
    "BucketSnapshot",
    "ConfigurationError",
    "GateSettings",
    "Limiter",
    "ManualClock",
    "TokenGateError",
    "UnknownScenarioError",
    "create_limiter",
    "load_settings",
]
