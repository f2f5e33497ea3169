import asyncio
import logging

from bettor.utils.env import (
    DEFAULT_WAITING_TIME_MS,
    MIN_WAITING_TIME_MS,
    WAITING_TIME_REDUCTION_MS,
)

logger = logging.getLogger(__name__)


class WaitingTime:
    """
    Delay between round start and bet submission, shared by all rounds.

    Only ever reduced, never below `floor_ms`. Reads and reductions are
    serialized by a lock so concurrent lifecycles apply reductions one
    after another.
    """

    def __init__(
        self,
        initial_ms: int = DEFAULT_WAITING_TIME_MS,
        floor_ms: int = MIN_WAITING_TIME_MS,
        step_ms: int = WAITING_TIME_REDUCTION_MS,
    ):
        if floor_ms < 0 or step_ms < 0:
            raise ValueError("floor_ms and step_ms must be non-negative")
        if initial_ms < floor_ms:
            raise ValueError(f"initial_ms ({initial_ms}) is below floor_ms ({floor_ms})")
        self._value_ms = initial_ms
        self.floor_ms = floor_ms
        self.step_ms = step_ms
        self._lock = asyncio.Lock()

    @property
    def value_ms(self) -> int:
        return self._value_ms

    async def get(self) -> int:
        async with self._lock:
            return self._value_ms

    async def reduce(self) -> int:
        """Shorten the wait by one step, stopping at the floor. Returns the new value."""
        async with self._lock:
            previous = self._value_ms
            self._value_ms = max(previous - self.step_ms, self.floor_ms)
            if self._value_ms != previous:
                logger.warning(
                    f"Waiting time reduced from {previous} ms to {self._value_ms} ms"
                )
            return self._value_ms
