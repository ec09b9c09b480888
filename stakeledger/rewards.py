"""Pure reward and penalty math — no I/O, no ledger state.

The reward is simple (non-compounding) interest on the elapsed time since
deposit:

    reward = principal * elapsed * rate_percent // 86400 // 36500

Integer arithmetic throughout, multiplications first, floor divisions last
and in that order. Accrual is not capped at the lock term.
"""
from __future__ import annotations

from .errors import InvalidRateTier
from .models import RateTier

SECONDS_PER_DAY = 86_400
DAYS_PER_YEAR = 365
SECONDS_PER_YEAR = SECONDS_PER_DAY * DAYS_PER_YEAR

EARLY_EXIT_PERCENT = 90

# tier -> (lock duration in seconds, nominal annual rate in percent)
TIER_TERMS: dict[RateTier, tuple[int, int]] = {
    RateTier.NO_LOCK: (0, 10),
    RateTier.SIX_MONTH: (182 * SECONDS_PER_DAY, 20),
    RateTier.ONE_YEAR: (DAYS_PER_YEAR * SECONDS_PER_DAY, 30),
}


def decode_tier(code: RateTier | int | str) -> RateTier:
    """Decode a tier code (enum, integer code or enum name) into a ``RateTier``.

    Examples:
        2 → RateTier.ONE_YEAR
        "six_month" → RateTier.SIX_MONTH
    """
    if isinstance(code, RateTier):
        return code
    if isinstance(code, str):
        key = code.strip().upper()
        if key in RateTier.__members__:
            return RateTier[key]
        if not key.isdigit():
            raise InvalidRateTier(f"Unknown rate tier {code!r}")
        code = int(key)
    if isinstance(code, bool) or not isinstance(code, int):
        raise InvalidRateTier(f"Unknown rate tier {code!r}")
    try:
        return RateTier(code)
    except ValueError:
        raise InvalidRateTier(f"Unknown rate tier {code!r}") from None


def lock_duration(tier: RateTier) -> int:
    return TIER_TERMS[tier][0]


def annual_rate(tier: RateTier) -> int:
    return TIER_TERMS[tier][1]


def is_locked(tier: RateTier, deposited_at: int, now: int) -> bool:
    """True while an early exit would be penalised. ``NO_LOCK`` never is."""
    if tier is RateTier.NO_LOCK:
        return False
    return now < deposited_at + lock_duration(tier)


def accrued_reward(principal: int, elapsed: int, tier: RateTier) -> int:
    return principal * elapsed * annual_rate(tier) // SECONDS_PER_DAY // 36_500


def compute_payout(
    principal: int, tier: RateTier, deposited_at: int, now: int
) -> tuple[int, int]:
    """Return ``(withdrawable, reward)`` for a position withdrawn at ``now``."""
    if is_locked(tier, deposited_at, now):
        return principal * EARLY_EXIT_PERCENT // 100, 0

    elapsed = max(now - deposited_at, 0)
    return principal, accrued_reward(principal, elapsed, tier)
