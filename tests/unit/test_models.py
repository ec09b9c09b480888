"""Unit tests for data models."""
from __future__ import annotations

from dataclasses import replace

import pytest

from stakeledger.models import (
    ZERO_ADDRESS,
    DepositEvent,
    Position,
    RateTier,
    Status,
    WithdrawEvent,
)


class TestPosition:
    def test_defaults_are_zero_valued(self) -> None:
        p = Position()
        assert p.owner == ZERO_ADDRESS
        assert p.principal == 0
        assert p.deposited_at == 0
        assert p.tier is RateTier.NO_LOCK
        assert p.status is Status.NONE
        assert p.exists is False

    def test_frozen(self) -> None:
        p = Position(owner="0xA", principal=10, status=Status.ACTIVE)
        with pytest.raises(AttributeError):
            p.principal = 20  # type: ignore[misc]

    def test_status_replacement_keeps_other_fields(self) -> None:
        p = Position(owner="0xA", principal=10, deposited_at=5, tier=RateTier.ONE_YEAR, status=Status.ACTIVE)
        q = replace(p, status=Status.WITHDRAWN)
        assert q.exists is True
        assert (q.owner, q.principal, q.deposited_at, q.tier) == ("0xA", 10, 5, RateTier.ONE_YEAR)


class TestEnums:
    def test_wire_codes(self) -> None:
        assert [t.value for t in RateTier] == [0, 1, 2]
        assert [s.value for s in Status] == [0, 1, 2]


class TestEvents:
    def test_equality(self) -> None:
        assert DepositEvent(1, "0xA", 5, RateTier.NO_LOCK) == DepositEvent(1, "0xA", 5, RateTier.NO_LOCK)

    def test_frozen(self) -> None:
        e = WithdrawEvent(1, "0xA", 900, 0, "0xB")
        with pytest.raises(AttributeError):
            e.reward = 1  # type: ignore[misc]
