"""
Package containing the shared data models of the prediction bettor.

These models are used by the platform adapters, the round lifecycle
controller and the tests.
"""

from protocol.models import (
    Side,
    Strategy,
    PoolAmounts,
    LedgerEntry,
    ClaimEligibility,
    Payout,
    Receipt,
)

__all__ = [
    "Side",
    "Strategy",
    "PoolAmounts",
    "LedgerEntry",
    "ClaimEligibility",
    "Payout",
    "Receipt",
]
