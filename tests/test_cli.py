#!/usr/bin/env python3
"""
Tests for CLI module.
"""

import sys
from unittest.mock import patch

import orjson
import pytest

from token_gate.cli import create_argument_parser, main, resolve_demo_rate, setup_logging
from token_gate.config import GateSettings

DEMO_OUTPUT = [
    "Request 1 for clientA: Allowed",
    "Request 2 for clientA: Allowed",
    "Request 3 for clientA: Allowed",
    "Request 4 for clientA: Denied",
    "Request 5 for clientA: Allowed",
    "Request after 1s wait for clientA: Allowed",
    "Request 1 for clientB: Allowed",
    "Request 2 for clientB: Allowed",
    "Request 3 for clientB: Allowed",
    "Request 4 for clientB: Denied",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("TOKEN_GATE_RATE", "TOKEN_GATE_LOG_LEVEL", "TOKEN_GATE_DEBUG", "TOKEN_GATE_PRUNE_IDLE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def mock_basic_config():
    with patch("token_gate.cli.logging.basicConfig") as mock:
        yield mock


class TestSetupLogging:
    def test_setup_logging_debug(self, mock_basic_config):
        setup_logging(debug=True, stderr=True)

        kwargs = mock_basic_config.call_args[1]
        assert kwargs["level"] == 10  # logging.DEBUG
        assert kwargs["stream"] == sys.stderr

    def test_setup_logging_info(self, mock_basic_config):
        setup_logging(debug=False, stderr=False)

        kwargs = mock_basic_config.call_args[1]
        assert kwargs["level"] == 20  # logging.INFO
        assert kwargs["stream"] == sys.stdout

    def test_setup_logging_named_level(self, mock_basic_config):
        setup_logging(level="error")
        assert mock_basic_config.call_args[1]["level"] == 40


class TestArgumentParser:
    def test_demo_defaults(self):
        args = create_argument_parser().parse_args(["demo"])
        assert args.rate is None
        assert args.json is False
        assert args.instant is False

    def test_mode_is_required(self):
        with pytest.raises(SystemExit):
            create_argument_parser().parse_args([])


class TestMain:
    def test_demo_instant(self, capsys):
        main(["demo", "--instant"])
        assert capsys.readouterr().out.splitlines() == DEMO_OUTPUT

    def test_scenario_json(self, capsys):
        main(["scenario", "basic", "--instant", "--json"])
        lines = capsys.readouterr().out.splitlines()
        records = [orjson.loads(line) for line in lines]
        assert [r["allowed"] for r in records] == [True, True, True, False]
        assert records[0] == {"step": 1, "client_id": "client", "allowed": True}

    def test_unknown_scenario_exits_with_suggestion(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["scenario", "sanitise", "--instant"])
        assert exc_info.value.code == 1
        assert "Did you mean 'sanitize'" in capsys.readouterr().err

    def test_invalid_environment_exits(self, monkeypatch, capsys):
        monkeypatch.setenv("TOKEN_GATE_RATE", "lots")
        with pytest.raises(SystemExit) as exc_info:
            main(["demo", "--instant"])
        assert exc_info.value.code == 1
        assert "TOKEN_GATE_RATE" in capsys.readouterr().err

    def test_list_scenarios(self, capsys):
        main(["scenarios"])
        out = capsys.readouterr().out
        assert "partial-refill" in out
        assert "demo" in out

    def test_log_level_from_environment(self, monkeypatch, mock_basic_config):
        monkeypatch.setenv("TOKEN_GATE_LOG_LEVEL", "error")
        main(["scenario", "sanitize", "--instant"])
        assert mock_basic_config.call_args[1]["level"] == 40

    def test_debug_flag(self, mock_basic_config):
        main(["scenario", "sanitize", "--instant", "--debug"])
        assert mock_basic_config.call_args[1]["level"] == 10


class TestDemoRate:
    """The demo rate comes from --rate, then TOKEN_GATE_RATE, then 3."""

    def test_default_without_environment(self):
        """With nothing set the walkthrough runs at N=3."""
        assert resolve_demo_rate(None, GateSettings()) == 3

    def test_environment_rate_used(self, monkeypatch):
        """TOKEN_GATE_RATE replaces the walkthrough default."""
        monkeypatch.setenv("TOKEN_GATE_RATE", "10")
        assert resolve_demo_rate(None, GateSettings(rate=10)) == 10

    def test_flag_beats_environment(self, monkeypatch):
        """An explicit --rate wins over TOKEN_GATE_RATE."""
        monkeypatch.setenv("TOKEN_GATE_RATE", "10")
        assert resolve_demo_rate(2, GateSettings(rate=10)) == 2

    def test_demo_reads_rate_from_environment(self, monkeypatch, capsys):
        """At N=10 every demo request fits in the bucket."""
        monkeypatch.setenv("TOKEN_GATE_RATE", "10")
        main(["demo", "--instant"])
        out = capsys.readouterr().out.splitlines()
        assert "Request 4 for clientA: Allowed" in out
        assert "Request 4 for clientB: Allowed" in out
        assert not any(line.endswith("Denied") for line in out)

    def test_demo_flag_overrides_environment(self, monkeypatch, capsys):
        """--rate 3 restores the original walkthrough even with TOKEN_GATE_RATE set."""
        monkeypatch.setenv("TOKEN_GATE_RATE", "10")
        main(["demo", "--instant", "--rate", "3"])
        assert capsys.readouterr().out.splitlines() == DEMO_OUTPUT

    def test_epilog_lists_only_variables_the_cli_reads(self):
        """Pruning is not a CLI concern, so its variable is not advertised."""
        epilog = create_argument_parser().epilog
        assert "TOKEN_GATE_RATE" in epilog
        assert "TOKEN_GATE_PRUNE_IDLE" not in epilog
