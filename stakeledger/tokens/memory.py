"""In-memory fungible token — a mock balance book with ERC20-style allowances."""
from __future__ import annotations

import logging
from collections import defaultdict
from decimal import Decimal

from ..errors import InsufficientAllowance, InsufficientBalance

logger = logging.getLogger(__name__)


class InMemoryToken:
    """Balance book keyed by account address.

    Every mutating call validates first and only then touches balances, so a
    failed transfer leaves the book unchanged.
    """

    def __init__(self, address: str, symbol: str = "", decimals: int = 18) -> None:
        self._address = address
        self.symbol = symbol
        self.decimals = decimals
        self._balances: dict[str, int] = defaultdict(int)
        self._allowances: dict[tuple[str, str], int] = defaultdict(int)
        self.total_supply = 0

    def __repr__(self) -> str:
        return f"InMemoryToken({self.symbol or self._address!r})"

    @property
    def address(self) -> str:
        return self._address

    def to_base_units(self, amount: int | float | str) -> int:
        """Scale a whole-unit amount by ``decimals``, e.g. 1000 → 1000 * 10**18."""
        return int(Decimal(str(amount)) * (10**self.decimals))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((owner, spender), 0)

    # ------------------------------------------------------------------
    # Supply helpers
    # ------------------------------------------------------------------

    def mint(self, to: str, amount: int) -> None:
        if amount < 0:
            raise ValueError("Cannot mint a negative amount")
        self._balances[to] += amount
        self.total_supply += amount
        logger.debug("%s minted %d to %s", self.symbol, amount, to)

    def set_balance(self, account: str, amount: int) -> None:
        """Force an account balance, adjusting supply to match."""
        if amount < 0:
            raise ValueError("Balance cannot be negative")
        self.total_supply += amount - self.balance_of(account)
        self._balances[account] = amount

    # ------------------------------------------------------------------
    # Transfers
    # ------------------------------------------------------------------

    def approve(self, owner: str, spender: str, amount: int) -> None:
        if amount < 0:
            raise ValueError("Allowance cannot be negative")
        self._allowances[(owner, spender)] = amount

    def transfer(self, sender: str, to: str, amount: int) -> None:
        self._check_amount(amount)
        self._check_balance(sender, amount)
        self._move(sender, to, amount)

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> None:
        self._check_amount(amount)
        allowed = self.allowance(owner, spender)
        if allowed < amount:
            raise InsufficientAllowance(
                f"{self.symbol}: {spender} may spend {allowed} of {owner}, needs {amount}"
            )
        self._check_balance(owner, amount)
        self._allowances[(owner, spender)] = allowed - amount
        self._move(owner, to, amount)

    @staticmethod
    def _check_amount(amount: int) -> None:
        if amount < 0:
            raise ValueError("Transfer amount cannot be negative")

    def _check_balance(self, account: str, amount: int) -> None:
        balance = self.balance_of(account)
        if balance < amount:
            raise InsufficientBalance(
                f"{self.symbol}: {account} holds {balance}, needs {amount}"
            )

    def _move(self, sender: str, to: str, amount: int) -> None:
        self._balances[sender] -= amount
        self._balances[to] += amount
        logger.debug("%s transfer %d %s -> %s", self.symbol, amount, sender, to)
