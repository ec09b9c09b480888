"""Asset mover protocol — fungible balance abstraction."""
from typing import Protocol


class AssetMover(Protocol):
    """Abstract interface for moving a fungible balance between accounts."""

    @property
    def address(self) -> str: ...

    def balance_of(self, account: str) -> int: ...

    def transfer(self, sender: str, to: str, amount: int) -> None: ...

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> None: ...
