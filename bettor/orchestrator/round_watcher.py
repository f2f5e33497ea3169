"""
StartRound signal source.

Polls the prediction contract's StartRound event logs over HTTP and hands
each new epoch to a callback, in block order.
"""
import asyncio
import logging
from typing import Callable, Optional

from web3 import AsyncWeb3
from web3.contract import AsyncContract

from bettor.utils.env import (
    DEFAULT_POLL_INTERVAL_SECONDS,
    MAX_LOG_BLOCK_RANGE,
    STALE_ROUND_BLOCKS,
)

logger = logging.getLogger(__name__)


class StartRoundWatcher:
    """
    Delivers `StartRound(epoch)` events emitted after the watcher started.

    Each `get_logs` query spans at most `max_block_range` blocks. After an
    outage, blocks older than `stale_after_blocks` behind the head are
    skipped: rounds started there can no longer take bets.
    """

    def __init__(
        self,
        w3: AsyncWeb3,
        contract: AsyncContract,
        event_name: str = "StartRound",
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        max_block_range: int = MAX_LOG_BLOCK_RANGE,
        stale_after_blocks: int = STALE_ROUND_BLOCKS,
    ):
        if max_block_range < 1 or stale_after_blocks < 1:
            raise ValueError("max_block_range and stale_after_blocks must be at least 1")
        self.w3 = w3
        self.contract = contract
        self.event_name = event_name
        self.poll_interval = poll_interval
        self.max_block_range = max_block_range
        self.stale_after_blocks = stale_after_blocks
        self.next_block: Optional[int] = None
        self._stopped = asyncio.Event()

    async def poll(self, on_start_round: Callable[[int], None]) -> int:
        """
        Fetch StartRound logs since the last poll and dispatch them.

        Returns:
            Number of epochs dispatched
        """
        latest = await self.w3.eth.block_number
        if self.next_block is None:
            self.next_block = latest + 1
            logger.debug(f"Watching {self.event_name} from block {self.next_block}")
            return 0
        if latest < self.next_block:
            return 0

        oldest_useful = latest - self.stale_after_blocks + 1
        if self.next_block < oldest_useful:
            logger.warning(
                f"Skipping {self.event_name} blocks {self.next_block}-{oldest_useful - 1}: "
                f"those rounds are already closed"
            )
            self.next_block = oldest_useful

        to_block = min(latest, self.next_block + self.max_block_range - 1)
        event = getattr(self.contract.events, self.event_name)()
        logs = await event.get_logs(from_block=self.next_block, to_block=to_block)
        self.next_block = to_block + 1

        for log in sorted(logs, key=lambda l: (l["blockNumber"], l["logIndex"])):
            on_start_round(int(log["args"]["epoch"]))
        return len(logs)

    async def watch(self, on_start_round: Callable[[int], None]) -> None:
        """Poll until stop() is called. Poll errors are logged and retried next interval."""
        self._stopped.clear()
        while not self._stopped.is_set():
            try:
                await self.poll(on_start_round)
            except Exception as e:
                logger.error(f"Error polling {self.event_name} events: {e}")
            try:
                await asyncio.wait_for(self._stopped.wait(), timeout=self.poll_interval)
            except asyncio.TimeoutError:
                pass

    def stop(self) -> None:
        self._stopped.set()
