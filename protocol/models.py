"""
Shared data models for prediction rounds.

These models describe what the bot reads from and receives back from a
prediction contract. All token amounts are integers in wei.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Side(str, Enum):
    """Side of a prediction round."""

    BULL = "Bull"
    BEAR = "Bear"


class Strategy(str, Enum):
    """Betting strategy relative to the heavier pool."""

    AGAINST = "Against"
    WITH = "With"


class PoolAmounts(BaseModel):
    """Bull and bear pool totals for one round, read once per round."""

    model_config = ConfigDict(frozen=True)

    bull_amount: int = Field(..., ge=0, description="Total staked on Bull (wei)")
    bear_amount: int = Field(..., ge=0, description="Total staked on Bear (wei)")


class LedgerEntry(BaseModel):
    """The account's bet record for one round, as stored by the contract."""

    model_config = ConfigDict(frozen=True)

    amount: int = Field(0, ge=0, description="Amount staked (wei)")
    claimed: bool = Field(False, description="Whether winnings were claimed")
    position: Optional[int] = Field(None, description="0 = Bull, 1 = Bear")


class ClaimEligibility(BaseModel):
    """Contract-reported eligibility flags for a past round."""

    model_config = ConfigDict(frozen=True)

    claimable: bool = False
    refundable: bool = False


class Payout(BaseModel):
    """A payout event decoded from a claim receipt."""

    epoch: Optional[int] = Field(None, description="Round the payout belongs to")
    amount: Optional[int] = Field(None, ge=0, description="Realized amount (wei)")


class Receipt(BaseModel):
    """Confirmed transaction receipt."""

    tx_hash: str = Field(..., description="Transaction hash (0x-prefixed hex)")
    status: int = Field(1, description="1 = success, 0 = reverted")
    block_number: Optional[int] = None
    payouts: List[Payout] = Field(default_factory=list)
