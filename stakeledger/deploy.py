"""Deployment wiring — tokens, ledger, and initial reward custody."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import AppConfig, TokenConfig
from .interfaces.clock import Clock
from .ledger import StakingLedger
from .tokens import InMemoryToken

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Deployment:
    """Everything a deployment created, plus the account that paid for it."""

    ledger: StakingLedger
    principal_token: InMemoryToken
    reward_token: InMemoryToken
    deployer: str


def _build_token(cfg: TokenConfig, deployer: str) -> InMemoryToken:
    token = InMemoryToken(cfg.address, symbol=cfg.symbol, decimals=cfg.decimals)
    if cfg.initial_supply:
        token.mint(deployer, token.to_base_units(cfg.initial_supply))
    return token


def deploy(config: AppConfig, clock: Clock | None = None) -> Deployment:
    """Create both tokens and the ledger, then move reward funds into custody.

    ``reward_funding`` is in whole reward units; when unset the deployer's
    entire reward balance is handed to the ledger.
    """
    ledger_cfg = config.ledger
    deployer = ledger_cfg.deployer

    reward_token = _build_token(config.tokens[ledger_cfg.reward_token], deployer)
    principal_token = _build_token(config.tokens[ledger_cfg.principal_token], deployer)

    ledger = StakingLedger(
        principal_token, reward_token, clock=clock, address=ledger_cfg.address
    )

    if ledger_cfg.reward_funding is None:
        funding = reward_token.balance_of(deployer)
    else:
        funding = reward_token.to_base_units(ledger_cfg.reward_funding)
    if funding:
        reward_token.transfer(deployer, ledger.address, funding)

    logger.info(
        "Deployed ledger %s (%s → %s), reward custody %d",
        ledger.address, principal_token.symbol, reward_token.symbol, funding,
    )
    return Deployment(ledger, principal_token, reward_token, deployer)
