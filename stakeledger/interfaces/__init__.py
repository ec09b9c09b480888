"""Protocol interfaces for the staking ledger."""
from .asset import AssetMover
from .clock import Clock
from .notifier import Notifier

__all__ = ["AssetMover", "Clock", "Notifier"]
