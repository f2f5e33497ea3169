"""
Prediction platforms supported by the bettor.

Both contracts implement the same round/bet/claim model; only their
function names and contract addresses differ.
"""
from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field


class PlatformSpec(BaseModel):
    """Contract call names of one prediction platform."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="CLI / config key")
    name: str = Field(..., description="Display name")
    abi_name: str = Field(..., description="ABI file under bettor/utils/abis")
    currency: str = "BNB"
    rounds_fn: str
    bet_bull_fn: str
    bet_bear_fn: str
    ledger_fn: str
    claim_fn: str
    claimable_fn: str = "claimable"
    refundable_fn: str = "refundable"
    start_round_event: str = "StartRound"
    payout_events: Tuple[str, ...] = ("Claim",)


PANCAKESWAP = PlatformSpec(
    key="pancakeswap",
    name="PancakeSwap",
    abi_name="PancakePredictionV2",
    rounds_fn="rounds",
    bet_bull_fn="betBull",
    bet_bear_fn="betBear",
    ledger_fn="ledger",
    claim_fn="claim",
)

CANDLEGENIE = PlatformSpec(
    key="candlegenie",
    name="CandleGenie",
    abi_name="CandleGeniePredictionV3",
    rounds_fn="Rounds",
    bet_bull_fn="user_BetBull",
    bet_bear_fn="user_BetBear",
    ledger_fn="Bets",
    claim_fn="user_Claim",
)

PLATFORMS: Dict[str, PlatformSpec] = {
    PANCAKESWAP.key: PANCAKESWAP,
    CANDLEGENIE.key: CANDLEGENIE,
}
