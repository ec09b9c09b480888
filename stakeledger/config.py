"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TokenConfig:
    symbol: str = ""
    address: str = ""
    decimals: int = 18
    initial_supply: int = 0


@dataclass(frozen=True)
class LedgerConfig:
    address: str = "0x" + "5" * 40
    deployer: str = "0x" + "d" * 40
    principal_token: str = "principal"
    reward_token: str = "reward"
    reward_funding: int | None = None


@dataclass(frozen=True)
class TelegramConfig:
    enabled: bool = False
    alert_bot_token: str = ""
    log_bot_token: str = ""
    chat_id: str = ""


@dataclass(frozen=True)
class NotificationsConfig:
    telegram: TelegramConfig = field(default_factory=TelegramConfig)


@dataclass(frozen=True)
class AppConfig:
    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    tokens: dict[str, TokenConfig] = field(default_factory=dict)
    notifications: NotificationsConfig = field(default_factory=NotificationsConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_ledger(raw: dict[str, Any]) -> LedgerConfig:
    funding = raw.get("reward_funding")
    return LedgerConfig(
        address=str(raw.get("address") or LedgerConfig.address),
        deployer=str(raw.get("deployer") or LedgerConfig.deployer),
        principal_token=raw.get("principal_token", "principal"),
        reward_token=raw.get("reward_token", "reward"),
        reward_funding=int(funding) if funding is not None else None,
    )


def _build_tokens(raw: dict[str, Any]) -> dict[str, TokenConfig]:
    tokens: dict[str, TokenConfig] = {}
    for name, cfg in raw.items():
        tokens[name] = TokenConfig(
            symbol=cfg.get("symbol", name.upper()),
            address=str(cfg.get("address", "")),
            decimals=int(cfg.get("decimals", 18)),
            initial_supply=int(cfg.get("initial_supply", 0)),
        )
    return tokens


def _build_notifications(raw: dict[str, Any]) -> NotificationsConfig:
    tg = raw.get("telegram", {})
    return NotificationsConfig(
        telegram=TelegramConfig(
            enabled=bool(tg.get("enabled", False)),
            alert_bot_token=tg.get("alert_bot_token", ""),
            log_bot_token=tg.get("log_bot_token", ""),
            chat_id=str(tg.get("chat_id", "")),
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (one level up from this package).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        ledger=_build_ledger(raw.get("ledger", {})),
        tokens=_build_tokens(raw.get("tokens", {})),
        notifications=_build_notifications(raw.get("notifications", {})),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    ledger = cfg.ledger
    for role, name in (
        ("principal", ledger.principal_token),
        ("reward", ledger.reward_token),
    ):
        if name not in cfg.tokens:
            raise ValueError(f"Ledger references unknown {role} token '{name}'")

    if ledger.principal_token == ledger.reward_token:
        raise ValueError("Principal and reward tokens must be different tokens")

    for name, token in cfg.tokens.items():
        if not token.address:
            raise ValueError(f"Token '{name}' has no address")

    principal = cfg.tokens[ledger.principal_token]
    reward = cfg.tokens[ledger.reward_token]
    if principal.address == reward.address:
        raise ValueError("Principal and reward tokens share an address")

    if ledger.reward_funding is not None and ledger.reward_funding < 0:
        raise ValueError("Ledger reward_funding cannot be negative")
