"""Data models — all frozen (immutable)."""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

ZERO_ADDRESS = "0x" + "0" * 40


class RateTier(IntEnum):
    """Lock term chosen at deposit time; the integer value is the wire code."""

    NO_LOCK = 0
    SIX_MONTH = 1
    ONE_YEAR = 2


class Status(IntEnum):
    """Lifecycle of a position. ``NONE`` is the status of an unissued id."""

    NONE = 0
    ACTIVE = 1
    WITHDRAWN = 2


@dataclass(frozen=True)
class Position:
    """One deposit. Only ``status`` ever changes, by record replacement."""

    owner: str = ZERO_ADDRESS
    principal: int = 0
    deposited_at: int = 0
    tier: RateTier = RateTier.NO_LOCK
    status: Status = Status.NONE

    @property
    def exists(self) -> bool:
        return self.status is not Status.NONE


@dataclass(frozen=True)
class DepositEvent:
    position_id: int
    owner: str
    amount: int
    tier: RateTier


@dataclass(frozen=True)
class WithdrawEvent:
    position_id: int
    owner: str
    withdrawable: int
    reward: int
    destination: str
