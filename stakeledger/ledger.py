"""Staking ledger — deposits principal, accrues reward, pays out on withdrawal."""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable

from .clock import SystemClock
from .errors import (
    AlreadyWithdrawn,
    InsufficientCustody,
    InvalidAmount,
    InvalidAsset,
    InvalidRewardToken,
    InvalidStakingToken,
    InvalidTokenPair,
    UnownedAsset,
)
from .interfaces.asset import AssetMover
from .interfaces.clock import Clock
from .models import (
    ZERO_ADDRESS,
    DepositEvent,
    Position,
    RateTier,
    Status,
    WithdrawEvent,
)
from .rewards import compute_payout, decode_tier

logger = logging.getLogger(__name__)

LedgerEvent = DepositEvent | WithdrawEvent
Listener = Callable[[LedgerEvent], Any]

DEFAULT_LEDGER_ADDRESS = "0x" + "5" * 40


class StakingLedger:
    """Holds principal in custody and pays principal plus reward back out.

    Calls are expected to run one at a time per instance. Withdrawals flip a
    position to ``WITHDRAWN`` before any outbound transfer, so a transfer that
    calls back into the ledger sees the position as already withdrawn.
    """

    def __init__(
        self,
        staking_token: AssetMover,
        reward_token: AssetMover,
        *,
        clock: Clock | None = None,
        address: str = DEFAULT_LEDGER_ADDRESS,
    ) -> None:
        if staking_token is None or _token_address(staking_token) == ZERO_ADDRESS:
            raise InvalidStakingToken("Staking token must have a non-zero address")
        if reward_token is None or _token_address(reward_token) == ZERO_ADDRESS:
            raise InvalidRewardToken("Reward token must have a non-zero address")
        if _token_address(staking_token) == _token_address(reward_token):
            raise InvalidTokenPair("Staking and reward tokens must differ")

        self._staking_token = staking_token
        self._reward_token = reward_token
        self._clock: Clock = clock or SystemClock()
        self._address = address

        self._nonce = 0
        self._positions: dict[int, Position] = {}
        self._events: list[LedgerEvent] = []
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Public state
    # ------------------------------------------------------------------

    @property
    def address(self) -> str:
        return self._address

    @property
    def staking_token(self) -> AssetMover:
        return self._staking_token

    @property
    def reward_token(self) -> AssetMover:
        return self._reward_token

    @property
    def nonce(self) -> int:
        return self._nonce

    @property
    def events(self) -> tuple[LedgerEvent, ...]:
        return tuple(self._events)

    def position(self, position_id: int) -> Position:
        """Return the stored record, or a zero-valued one for an unissued id."""
        return self._positions.get(position_id, Position())

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def deposit(self, caller: str, amount: int, tier: RateTier | int) -> int:
        """Pull ``amount`` of principal from ``caller`` and open a position.

        Returns the new position id.
        """
        try:
            validate_amount(amount)
        except InvalidAmount:
            logger.warning("Rejected deposit from %s: invalid amount %r", caller, amount)
            raise
        rate_tier = decode_tier(tier)
        now = self._clock.now()

        # Raises on insufficient balance or allowance before anything is recorded.
        self._staking_token.transfer_from(self._address, caller, self._address, amount)

        self._nonce += 1
        position_id = self._nonce
        self._positions[position_id] = Position(
            owner=caller,
            principal=amount,
            deposited_at=now,
            tier=rate_tier,
            status=Status.ACTIVE,
        )

        logger.info(
            "Deposit #%d — owner %s · amount %d · tier %s",
            position_id, caller, amount, rate_tier.name,
        )
        self._emit(DepositEvent(position_id, caller, amount, rate_tier))
        return position_id

    def lookup_rewards(self, position_id: int) -> tuple[int, int]:
        """Return ``(withdrawable, reward)`` if withdrawn now; ``(0, 0)`` unless active."""
        position = self.position(position_id)
        if position.status is not Status.ACTIVE:
            return 0, 0
        return compute_payout(
            position.principal, position.tier, position.deposited_at, self._clock.now()
        )

    def withdraw(self, caller: str, position_id: int, to: str) -> tuple[int, int]:
        """Close a position and send principal and reward to ``to``."""
        position = self.position(position_id)
        if not position.exists:
            logger.warning("Rejected withdraw of unknown position #%s", position_id)
            raise InvalidAsset(f"Position #{position_id} does not exist")
        if caller != position.owner:
            logger.warning(
                "Rejected withdraw of position #%d by non-owner %s", position_id, caller
            )
            raise UnownedAsset(f"Position #{position_id} is not owned by {caller}")
        if position.status is Status.WITHDRAWN:
            raise AlreadyWithdrawn(f"Position #{position_id} was already withdrawn")

        withdrawable, reward = self.lookup_rewards(position_id)
        self._check_custody(self._staking_token, withdrawable)
        self._check_custody(self._reward_token, reward)

        self._positions[position_id] = replace(position, status=Status.WITHDRAWN)
        principal_paid = False
        try:
            if withdrawable > 0:
                self._staking_token.transfer(self._address, to, withdrawable)
                principal_paid = True
            if reward > 0:
                self._reward_token.transfer(self._address, to, reward)
        except Exception:
            if principal_paid:
                # principal already left custody; reopening would pay it twice
                logger.error(
                    "Reward payout of %d for position #%d failed after principal was paid",
                    reward, position_id,
                )
                # the audit record carries what actually left custody
                self._emit(WithdrawEvent(position_id, caller, withdrawable, 0, to))
            else:
                logger.error("Payout for position #%d failed; position stays active", position_id)
                self._positions[position_id] = position
            raise

        logger.info(
            "Withdraw #%d — owner %s · withdrawable %d · reward %d · to %s",
            position_id, caller, withdrawable, reward, to,
        )
        self._emit(WithdrawEvent(position_id, caller, withdrawable, reward, to))
        return withdrawable, reward

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_custody(self, token: AssetMover, amount: int) -> None:
        if amount <= 0:
            return
        held = token.balance_of(self._address)
        if held < amount:
            raise InsufficientCustody(
                f"Ledger holds {held} of {_token_address(token)}, owes {amount}"
            )

    def _emit(self, event: LedgerEvent) -> None:
        self._events.append(event)
        for listener in self._listeners:
            try:
                listener(event)
            except Exception as e:
                logger.error("Ledger event listener failed: %s", e)


def validate_amount(amount: int) -> int:
    """Raise ``InvalidAmount`` unless ``amount`` is a positive integer."""
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmount(f"Deposit amount must be a positive integer, got {amount!r}")
    return amount


def _token_address(token: AssetMover) -> str:
    return getattr(token, "address", "") or ZERO_ADDRESS
