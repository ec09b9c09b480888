"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Callable

import pytest

from stakeledger.clock import ManualClock
from stakeledger.config import (
    AppConfig,
    LedgerConfig,
    NotificationsConfig,
    TelegramConfig,
    TokenConfig,
)
from stakeledger.ledger import StakingLedger
from stakeledger.tokens import InMemoryToken

GENESIS = 1_700_000_000
LEDGER_ADDRESS = "0x" + "5" * 40
ALICE = "0x" + "a" * 40
BOB = "0x" + "b" * 40
CAROL = "0x" + "c" * 40
REWARD_RESERVE = 10**24


# ---------------------------------------------------------------------------
# Ledger fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock(GENESIS)


@pytest.fixture()
def principal_token() -> InMemoryToken:
    return InMemoryToken("0x" + "1" * 40, symbol="MCK")


@pytest.fixture()
def reward_token() -> InMemoryToken:
    return InMemoryToken("0x" + "2" * 40, symbol="FARM")


@pytest.fixture()
def ledger(
    principal_token: InMemoryToken, reward_token: InMemoryToken, clock: ManualClock
) -> StakingLedger:
    staking = StakingLedger(
        principal_token, reward_token, clock=clock, address=LEDGER_ADDRESS
    )
    reward_token.mint(LEDGER_ADDRESS, REWARD_RESERVE)
    return staking


@pytest.fixture()
def fund_and_deposit(
    ledger: StakingLedger, principal_token: InMemoryToken
) -> Callable[..., int]:
    """Give ``account`` exactly ``amount``, approve the ledger, and deposit it."""

    def _deposit(account: str, amount: int, tier: int) -> int:
        principal_token.set_balance(account, amount)
        principal_token.approve(account, ledger.address, amount)
        return ledger.deposit(account, amount, tier)

    return _deposit


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_app_config() -> AppConfig:
    return AppConfig(
        ledger=LedgerConfig(
            address=LEDGER_ADDRESS,
            deployer="0x" + "d" * 40,
            principal_token="mock",
            reward_token="farm",
            reward_funding=500_000,
        ),
        tokens={
            "mock": TokenConfig(
                symbol="MCK", address="0x" + "1" * 40, decimals=0, initial_supply=10**9
            ),
            "farm": TokenConfig(
                symbol="FARM", address="0x" + "2" * 40, decimals=0, initial_supply=10**6
            ),
        },
        notifications=NotificationsConfig(
            telegram=TelegramConfig(
                enabled=True,
                alert_bot_token="fake-alert-token",
                log_bot_token="fake-log-token",
                chat_id="12345",
            ),
        ),
    )


SAMPLE_YAML = textwrap.dedent("""\
    ledger:
      address: "0x5555555555555555555555555555555555555555"
      deployer: "0xdddddddddddddddddddddddddddddddddddddddd"
      principal_token: mock
      reward_token: farm
      reward_funding: 1000
    tokens:
      mock:
        symbol: MCK
        address: "0x1111111111111111111111111111111111111111"
        decimals: 0
        initial_supply: 1000000
      farm:
        symbol: FARM
        address: "0x2222222222222222222222222222222222222222"
        decimals: 0
        initial_supply: 5000
    notifications:
      telegram:
        enabled: true
        alert_bot_token: "tok1"
        log_bot_token: "tok2"
        chat_id: "999"
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file


SAMPLE_SCENARIO = textwrap.dedent("""\
    steps:
      - fund: {account: alice, amount: 1000}
      - deposit: {account: alice, amount: 1000, tier: one_year}
      - advance: {days: 100}
      - lookup: {id: 1}
      - advance: {days: 630}
      - withdraw: {account: alice, id: 1}
      - withdraw: {account: alice, id: 1}
""")


@pytest.fixture()
def sample_scenario_path(tmp_path: Path) -> Path:
    path = tmp_path / "scenario.yaml"
    path.write_text(SAMPLE_SCENARIO)
    return path
