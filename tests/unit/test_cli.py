"""Unit tests for CLI argument parsing and the quote command."""
from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from stakeledger.cli import _quote, _simulate, build_parser
from stakeledger.notifications.telegram import TelegramNotifier
from stakeledger.services.event_relay import EventRelay


class TestBuildParser:
    def test_quote_command(self) -> None:
        args = build_parser().parse_args(["quote", "1000", "one_year"])
        assert args.command == "quote"
        assert args.amount == 1000
        assert args.tier == "one_year"
        assert args.elapsed_days == 0

    def test_quote_elapsed_days(self) -> None:
        args = build_parser().parse_args(["quote", "1000", "0", "--elapsed-days", "365"])
        assert args.elapsed_days == 365

    def test_simulate_command(self) -> None:
        args = build_parser().parse_args(["simulate", "scenarios/tiers.yaml"])
        assert args.command == "simulate"
        assert args.scenario == "scenarios/tiers.yaml"

    def test_config_and_log_level_flags(self) -> None:
        args = build_parser().parse_args(
            ["--config", "/tmp/c.yaml", "--log-level", "DEBUG", "quote", "1", "0"]
        )
        assert args.config == "/tmp/c.yaml"
        assert args.log_level == "DEBUG"

    def test_no_command(self) -> None:
        assert build_parser().parse_args([]).command is None


class TestQuote:
    def test_no_lock_one_year(self, capsys: pytest.CaptureFixture[str]) -> None:
        args = build_parser().parse_args(["quote", "1000", "no_lock", "--elapsed-days", "365"])
        assert _quote(args) == 0
        assert capsys.readouterr().out.strip() == "withdrawable=1000 reward=100"

    def test_locked_early(self, capsys: pytest.CaptureFixture[str]) -> None:
        args = build_parser().parse_args(["quote", "1000", "2", "--elapsed-days", "10"])
        assert _quote(args) == 0
        assert capsys.readouterr().out.strip() == "withdrawable=900 reward=0"

    def test_bad_tier(self, capsys: pytest.CaptureFixture[str]) -> None:
        args = build_parser().parse_args(["quote", "1000", "weekly"])
        assert _quote(args) == 2
        assert "Unknown rate tier" in capsys.readouterr().err

    @pytest.mark.parametrize("amount", ["0", "-5"])
    def test_non_positive_amount(self, amount: str, capsys: pytest.CaptureFixture[str]) -> None:
        args = build_parser().parse_args(["quote", amount, "no_lock"])
        assert _quote(args) == 2
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "positive integer" in captured.err


SCENARIO = """\
steps:
  - fund: {account: alice, amount: 10}
  - deposit: {account: alice, amount: 10, tier: no_lock}
"""


def _write_config(tmp_path: Path, chat_id: str) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(f"""\
tokens:
  principal: {{address: "0x1", decimals: 0}}
  reward: {{address: "0x2", decimals: 0, initial_supply: 100}}
notifications:
  telegram:
    enabled: true
    alert_bot_token: "tok"
    log_bot_token: "tok"
    chat_id: "{chat_id}"
""")
    return cfg_file


class TestSimulate:
    def test_unconfigured_telegram_is_skipped(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        scenario = tmp_path / "scenario.yaml"
        scenario.write_text(SCENARIO)
        args = build_parser().parse_args(
            ["--config", str(_write_config(tmp_path, "")), "simulate", str(scenario)]
        )
        with patch("stakeledger.cli.EventRelay", wraps=EventRelay) as relay_cls:
            assert _simulate(args) == 0

        assert relay_cls.call_args[0][1] == []
        assert "deposit" in capsys.readouterr().out

    def test_configured_telegram_receives_events(self, tmp_path: Path) -> None:
        scenario = tmp_path / "scenario.yaml"
        scenario.write_text(SCENARIO)
        args = build_parser().parse_args(
            ["--config", str(_write_config(tmp_path, "42")), "simulate", str(scenario)]
        )
        post = AsyncMock(return_value=True)
        with patch.object(TelegramNotifier, "_post", post):
            assert _simulate(args) == 0

        post.assert_awaited_once()
        assert "Deposit #1" in post.call_args[0][1]
