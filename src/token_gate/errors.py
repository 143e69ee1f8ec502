#!/usr/bin/env python3
"""
Structured error types for token_gate.

Admission decisions never raise; these errors cover configuration and the
tooling around the limiter.
"""

from difflib import get_close_matches


class TokenGateError(Exception):
    """Structured error with an optional fix suggestion."""

    def __init__(self, message: str, suggestion: str | None = None):
        self.suggestion = suggestion
        super().__init__(message)

    def to_message(self) -> str:
        """Format the error with suggestion."""
        parts = [str(self)]
        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")
        return " | ".join(parts)


class ConfigurationError(TokenGateError):
    """An environment or settings value could not be interpreted."""


class UnknownScenarioError(TokenGateError):
    """A scenario name did not match any registered scenario."""

    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = available
        super().__init__(format_unknown_scenario_error(name, available))


class BucketClosedError(TokenGateError):
    """Raised by a bucket that was pruned while a caller still held it."""


def suggest_name(name: str, available: list[str]) -> str | None:
    """Find the closest matching name using fuzzy matching.

    Args:
        name: The unknown name.
        available: Known names.

    Returns:
        The closest match, or None if no good match found.
    """
    matches = get_close_matches(name, available, n=1, cutoff=0.6)
    return matches[0] if matches else None


def format_unknown_scenario_error(name: str, available: list[str]) -> str:
    """Create an error message for an unknown scenario with suggestions."""
    suggestion = suggest_name(name, available)
    if suggestion:
        return f"Unknown scenario: '{name}'. Did you mean '{suggestion}'?"
    if available:
        return f"Unknown scenario: '{name}'. Available scenarios: {', '.join(sorted(available))}"
    return f"Unknown scenario: '{name}'. No scenarios are registered."


def format_invalid_env_error(var_name: str, value: str, expected: str) -> str:
    """Create an error message for an environment value of the wrong type."""
    return f"Environment variable {var_name}={value!r} is not a valid {expected}."
