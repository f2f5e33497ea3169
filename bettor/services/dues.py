from typing import Optional

from web3 import Web3

from bettor.utils.env import DUES_DIVISOR, MIN_DUES_AMOUNT_BNB


class DuesCalculator:
    """Service fee on realized winnings: 2% of the payout, never below a floor."""

    def __init__(
        self,
        minimum_fee: int = Web3.to_wei(MIN_DUES_AMOUNT_BNB, "ether"),
        divisor: int = DUES_DIVISOR,
    ):
        if minimum_fee < 0:
            raise ValueError("minimum_fee must be non-negative")
        if divisor <= 0:
            raise ValueError("divisor must be positive")
        self.minimum_fee = minimum_fee
        self.divisor = divisor

    def compute_fee(self, payout_amount: Optional[int]) -> int:
        """
        Fee in wei for a payout in wei.

        Unknown payouts are charged the minimum fee.
        """
        if payout_amount is None:
            return self.minimum_fee
        return max(payout_amount // self.divisor, self.minimum_fee)
