"""
Scan of recent rounds for winnings or refunds that can still be claimed.
"""
import asyncio
import logging
from typing import List, Optional

from protocol.models import ClaimEligibility, LedgerEntry
from bettor.adapters.base import PlatformAdapter
from bettor.utils.env import CLAIMABLE_EPOCHS_CHECK_COUNT

logger = logging.getLogger(__name__)


def is_claimable(eligibility: ClaimEligibility, entry: LedgerEntry) -> bool:
    """A round is claimable when we staked, it paid out or refunds, and it is unclaimed."""
    return (
        entry.amount > 0
        and (eligibility.claimable or eligibility.refundable)
        and not entry.claimed
    )


class ClaimWindowScanner:
    """Checks the `window_size` rounds before the current one for unclaimed payouts."""

    def __init__(self, adapter: PlatformAdapter, window_size: int = CLAIMABLE_EPOCHS_CHECK_COUNT):
        if window_size < 1:
            raise ValueError("window_size must be at least 1")
        self.adapter = adapter
        self.window_size = window_size

    def candidates(self, current_epoch: int) -> List[int]:
        """Epochs in the window, most recent first. Epochs below zero do not exist."""
        return [
            current_epoch - i
            for i in range(1, self.window_size + 1)
            if current_epoch - i >= 0
        ]

    async def _check(self, epoch: int, account: str) -> Optional[int]:
        eligibility, entry = await asyncio.gather(
            self.adapter.get_claim_eligibility(epoch, account),
            self.adapter.get_ledger_entry(epoch, account),
        )
        if is_claimable(eligibility, entry):
            return epoch
        return None

    async def scan(self, current_epoch: int, account: str) -> List[int]:
        """
        Return the claimable epochs of the window.

        Raises whatever the adapter raises; the caller decides how to handle it.
        """
        results = await asyncio.gather(
            *(self._check(epoch, account) for epoch in self.candidates(current_epoch))
        )
        batch = [epoch for epoch in results if epoch is not None]
        logger.debug(
            f"Claim scan before epoch {current_epoch} for {account}: {batch or 'nothing'}"
        )
        return batch
