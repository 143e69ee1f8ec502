#!/usr/bin/env python3
# src/token_gate/cli/__init__.py
"""
CLI entry point for token_gate.

Runs the demonstration walkthrough and the named admission scenarios so the
limiter's behaviour can be watched from a terminal.
"""

import argparse
import logging
import sys
import time
from collections.abc import Sequence

import orjson

from ..bucket import Clock
from ..config import GateSettings, load_settings
from ..config.base import ConfigDetector
from ..config.constants import ENV_RATE
from ..errors import TokenGateError
from ..scenarios import SCENARIOS, Decision, Sleep, get_scenario, run_demo
from ..testing import ManualClock

DEMO_DEFAULT_RATE = 3

LOG_LEVEL_CHOICES = ["debug", "info", "warning", "error", "critical"]


def setup_logging(debug: bool = False, stderr: bool = True, level: str | None = None) -> None:
    """Set up logging configuration."""
    if debug:
        log_level = logging.DEBUG
    elif level:
        log_level = getattr(logging, level.upper(), logging.WARNING)
    else:
        log_level = logging.INFO
    stream = sys.stderr if stderr else sys.stdout

    logging.basicConfig(level=log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", stream=stream)


def print_decisions(decisions: list[Decision], as_json: bool = False) -> None:
    """Write one line per decision to stdout."""
    for decision in decisions:
        if as_json:
            sys.stdout.write(orjson.dumps(decision.to_dict()).decode() + "\n")
        else:
            print(decision.describe())


def _time_source(instant: bool) -> tuple[Clock, Sleep]:
    if instant:
        clock = ManualClock()
        return clock, clock.sleep
    return time.monotonic, time.sleep


def _add_common_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--json", action="store_true", help="Print one JSON object per decision")
    parser.add_argument("--instant", action="store_true", help="Simulate waits with a manual clock instead of sleeping")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=LOG_LEVEL_CHOICES,
        help="Logging level (default: TOKEN_GATE_LOG_LEVEL or warning)",
    )


def resolve_demo_rate(cli_rate: int | None, settings: GateSettings) -> int:
    """Pick the demo rate: --rate, then TOKEN_GATE_RATE, then the walkthrough default."""
    if cli_rate is not None:
        return cli_rate
    if ConfigDetector().get_env_var(ENV_RATE) is not None:
        return settings.rate
    return DEMO_DEFAULT_RATE


def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="token-gate",
        description="Per-client token-bucket admission control",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Walk through allowed/denied decisions for two clients (N=3)
  token-gate demo

  # Same walkthrough at 5 requests per second, without real sleeps
  token-gate demo --rate 5 --instant

  # Run one named scenario and emit JSON lines
  token-gate scenario partial-refill --json

  # List the scenario names
  token-gate scenarios

Environment Variables:
  TOKEN_GATE_RATE        Default --rate for demo (default: 3)
  TOKEN_GATE_LOG_LEVEL   Logging level (debug|info|warning|error|critical)
  TOKEN_GATE_DEBUG       Set to 1 for debug logging
        """,
    )

    subparsers = parser.add_subparsers(dest="mode", help="Command", required=True)

    demo_parser = subparsers.add_parser("demo", help="Run the demonstration walkthrough")
    demo_parser.add_argument(
        "--rate",
        type=int,
        default=None,
        help=f"Requests per second per client (default: TOKEN_GATE_RATE or {DEMO_DEFAULT_RATE})",
    )
    _add_common_flags(demo_parser)

    scenario_parser = subparsers.add_parser("scenario", help="Run a named scenario")
    scenario_parser.add_argument("name", help="Scenario name (see 'token-gate scenarios')")
    _add_common_flags(scenario_parser)

    subparsers.add_parser("scenarios", help="List available scenarios")

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if args.mode == "scenarios":
        for name, scenario in SCENARIOS.items():
            print(f"{name:<16} {scenario.description}")
        return

    try:
        settings = load_settings()
    except TokenGateError as e:
        print(f"Error: {e.to_message()}", file=sys.stderr)
        sys.exit(1)

    setup_logging(debug=args.debug or settings.debug, stderr=True, level=args.log_level or settings.log_level)
    clock, sleep = _time_source(args.instant)

    if args.mode == "demo":
        rate = resolve_demo_rate(args.rate, settings)
        logging.info(f"Running demo walkthrough at {rate} request(s) per second")
        decisions = run_demo(clock, sleep, rate=rate)
    else:
        try:
            scenario = get_scenario(args.name)
        except TokenGateError as e:
            print(f"Error: {e.to_message()}", file=sys.stderr)
            sys.exit(1)
        logging.info(f"Running scenario '{scenario.name}': {scenario.description}")
        decisions = scenario.run(clock, sleep)

    print_decisions(decisions, as_json=args.json)


if __name__ == "__main__":
    main()
