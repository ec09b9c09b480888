"""Exception taxonomy for the ledger and the token books it moves value through."""
from __future__ import annotations


class LedgerError(Exception):
    """Base class for rejected ledger operations.

    Every subclass carries a stable ``code`` so callers (the simulator, the
    CLI) can report a rejection without matching on message text.
    """

    code = "ledger_error"

    def __init__(self, reason: str = "") -> None:
        super().__init__(reason or self.code)
        self.reason = reason


class InvalidAmount(LedgerError):
    code = "invalid_amount"


class InvalidRateTier(LedgerError):
    code = "invalid_rate_tier"


class InvalidAsset(LedgerError):
    code = "invalid_asset"


class UnownedAsset(LedgerError):
    code = "unowned_asset"


class AlreadyWithdrawn(LedgerError):
    code = "already_withdrawn"


class InsufficientCustody(LedgerError):
    code = "insufficient_custody"


class InvalidStakingToken(LedgerError):
    code = "invalid_staking_token"


class InvalidRewardToken(LedgerError):
    code = "invalid_reward_token"


class InvalidTokenPair(LedgerError):
    code = "invalid_token_pair"


class TokenError(Exception):
    """Base class for balance-book failures."""

    code = "token_error"


class InsufficientBalance(TokenError):
    code = "insufficient_balance"


class InsufficientAllowance(TokenError):
    code = "insufficient_allowance"
