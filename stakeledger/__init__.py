"""Deposit/reward staking ledger."""
from .errors import LedgerError
from .ledger import StakingLedger
from .models import Position, RateTier, Status

__all__ = ["LedgerError", "Position", "RateTier", "StakingLedger", "Status"]
