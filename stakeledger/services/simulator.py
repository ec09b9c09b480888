"""Scenario replay — drives a deployment through scripted deposits and withdrawals."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from ..clock import ManualClock
from ..deploy import Deployment
from ..errors import LedgerError, TokenError
from ..rewards import SECONDS_PER_DAY

logger = logging.getLogger(__name__)

# action -> required params
ACTIONS: dict[str, tuple[str, ...]] = {
    "fund": ("account", "amount"),
    "deposit": ("account", "amount"),
    "advance": (),
    "lookup": ("id",),
    "withdraw": ("account", "id"),
}


@dataclass(frozen=True)
class Step:
    action: str
    params: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class StepResult:
    """Outcome of one step. ``values`` holds integer outputs in base units."""

    index: int
    action: str
    ok: bool
    values: dict[str, int] = field(default_factory=dict)
    error: str = ""


def parse_steps(raw: list[Any]) -> tuple[Step, ...]:
    """Turn YAML step entries (``{action: {params}}``) into ``Step`` objects."""
    steps: list[Step] = []
    for i, entry in enumerate(raw, start=1):
        if not isinstance(entry, dict) or len(entry) != 1:
            raise ValueError(f"Step {i} must be a mapping with exactly one action")
        action, params = next(iter(entry.items()))
        if action not in ACTIONS:
            raise ValueError(f"Step {i} has unknown action '{action}'")
        if params is not None and not isinstance(params, dict):
            raise ValueError(f"Step {i} ({action}) params must be a mapping")
        params = dict(params or {})
        _check_params(i, action, params)
        steps.append(Step(action=action, params=params))
    return tuple(steps)


def _check_params(index: int, action: str, params: dict[str, Any]) -> None:
    missing = [name for name in ACTIONS[action] if name not in params]
    if missing:
        raise ValueError(f"Step {index} ({action}) is missing {', '.join(missing)}")

    if "amount" in params:
        try:
            amount = Decimal(str(params["amount"]))
        except InvalidOperation:
            raise ValueError(
                f"Step {index} ({action}) amount {params['amount']!r} is not a number"
            ) from None
        if not amount.is_finite() or (action == "fund" and amount < 0):
            raise ValueError(
                f"Step {index} ({action}) amount {params['amount']!r} is out of range"
            )

    for name in ("id", "seconds", "days"):
        if name not in params:
            continue
        value = params[name]
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(
                f"Step {index} ({action}) {name} must be a non-negative integer, got {value!r}"
            )


def load_scenario(path: str | Path) -> tuple[Step, ...]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Scenario file not found: {path}")
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    return parse_steps(raw.get("steps", []))


class Simulator:
    """Replays steps against a deployment whose ledger runs on a ``ManualClock``.

    Amounts in steps are whole units, scaled by each token's decimals.
    Rejected ledger or token operations are recorded and the run continues.
    """

    def __init__(self, deployment: Deployment, clock: ManualClock) -> None:
        self._deployment = deployment
        self._clock = clock

    def run(self, steps: tuple[Step, ...] | list[Step]) -> list[StepResult]:
        results: list[StepResult] = []
        for index, step in enumerate(steps, start=1):
            handler = getattr(self, f"_do_{step.action}")
            try:
                values = handler(step.params)
            except (LedgerError, TokenError) as e:
                logger.info("Step %d (%s) rejected: %s", index, step.action, e)
                results.append(
                    StepResult(index, step.action, ok=False, error=e.code)
                )
                continue
            results.append(StepResult(index, step.action, ok=True, values=values))
        return results

    # ------------------------------------------------------------------
    # Step handlers
    # ------------------------------------------------------------------

    def _do_fund(self, params: dict[str, Any]) -> dict[str, int]:
        token = self._deployment.principal_token
        amount = token.to_base_units(params["amount"])
        token.mint(params["account"], amount)
        return {"balance": token.balance_of(params["account"])}

    def _do_deposit(self, params: dict[str, Any]) -> dict[str, int]:
        ledger = self._deployment.ledger
        token = self._deployment.principal_token
        account = params["account"]
        amount = token.to_base_units(params["amount"])
        # a non-positive amount is rejected by the ledger itself
        token.approve(account, ledger.address, max(amount, 0))
        position_id = ledger.deposit(account, amount, params.get("tier", 0))
        return {"id": position_id, "amount": amount}

    def _do_advance(self, params: dict[str, Any]) -> dict[str, int]:
        seconds = int(params.get("seconds", 0)) + int(params.get("days", 0)) * SECONDS_PER_DAY
        return {"now": self._clock.advance(seconds)}

    def _do_lookup(self, params: dict[str, Any]) -> dict[str, int]:
        withdrawable, reward = self._deployment.ledger.lookup_rewards(int(params["id"]))
        return {"withdrawable": withdrawable, "reward": reward}

    def _do_withdraw(self, params: dict[str, Any]) -> dict[str, int]:
        account = params["account"]
        withdrawable, reward = self._deployment.ledger.withdraw(
            account, int(params["id"]), params.get("to", account)
        )
        return {"withdrawable": withdrawable, "reward": reward}
