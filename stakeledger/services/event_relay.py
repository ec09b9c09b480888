"""Forwards ledger events to notification channels."""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from ..interfaces.notifier import Notifier
from ..ledger import LedgerEvent, StakingLedger
from ..models import DepositEvent, RateTier, WithdrawEvent

logger = logging.getLogger(__name__)

_TIER_LABELS = {
    RateTier.NO_LOCK: "No lock · 10%",
    RateTier.SIX_MONTH: "6 months · 20%",
    RateTier.ONE_YEAR: "1 year · 30%",
}


class EventRelay:
    """Queues events from a ledger and sends one message per event on ``flush``.

    The ledger is synchronous and notifiers are not, so events are buffered
    by the subscription callback and delivered later from async code.
    """

    def __init__(
        self,
        ledger: StakingLedger,
        notifiers: list[Notifier],
        principal_symbol: str = "",
        reward_symbol: str = "",
    ) -> None:
        self._ledger = ledger
        self._notifiers = notifiers
        self._principal_symbol = principal_symbol or "principal"
        self._reward_symbol = reward_symbol or "reward"
        self._pending: list[LedgerEvent] = []
        ledger.subscribe(self._enqueue)

    def _enqueue(self, event: LedgerEvent) -> None:
        self._pending.append(event)

    @property
    def pending(self) -> int:
        return len(self._pending)

    # ------------------------------------------------------------------
    # Formatting helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _short(address: str) -> str:
        if len(address) > 16:
            return f"{address[:10]}...{address[-6:]}"
        return address

    @staticmethod
    def _now_str() -> str:
        return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

    def format_deposit(self, event: DepositEvent) -> str:
        return (
            f"📥 Deposit #{event.position_id}\n"
            f"\n"
            f"Owner: {self._short(event.owner)}\n"
            f"Amount: {event.amount:,} {self._principal_symbol}\n"
            f"Tier: {_TIER_LABELS[event.tier]}\n"
            f"\n"
            f"{self._now_str()} UTC"
        )

    def format_withdraw(self, event: WithdrawEvent) -> str:
        return (
            f"📤 Withdraw #{event.position_id}\n"
            f"\n"
            f"Owner: {self._short(event.owner)}\n"
            f"Principal: {event.withdrawable:,} {self._principal_symbol}\n"
            f"Reward: {event.reward:,} {self._reward_symbol}\n"
            f"To: {self._short(event.destination)}\n"
            f"\n"
            f"{self._now_str()} UTC"
        )

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def _send_log(self, message: str) -> None:
        for notifier in self._notifiers:
            try:
                await notifier.send_log(message, silent=True)
            except Exception as e:
                logger.error("Notifier send_log failed: %s", e)

    async def _send_alert(self, message: str, subject: str = "") -> None:
        for notifier in self._notifiers:
            try:
                await notifier.send_alert(message, subject=subject)
            except Exception as e:
                logger.error("Notifier send_alert failed: %s", e)

    async def flush(self) -> int:
        """Deliver every queued event; returns the number of events sent."""
        events, self._pending = self._pending, []
        for event in events:
            if isinstance(event, DepositEvent):
                await self._send_log(self.format_deposit(event))
            elif self._ledger.position(event.position_id).principal > event.withdrawable:
                await self._send_alert(
                    self.format_withdraw(event), subject="⚠️ Early withdrawal"
                )
            else:
                await self._send_log(self.format_withdraw(event))
        return len(events)
