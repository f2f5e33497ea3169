"""
Round lifecycle controller.

One lifecycle runs per StartRound signal:

    SIGNALED -> WAITING -> AMOUNTS_READ -> DECIDED -> BET_PENDING
      -> BET_CONFIRMED | BET_FAILED
      -> CLAIM_SCANNED -> CLAIM_NONE | CLAIM_PENDING
      -> CLAIM_CONFIRMED | CLAIM_FAILED
      -> DUES_DISPATCHED -> DONE

Claim processing runs after the bet step whatever its outcome: a failed bet
(or failed pool read, which skips betting) still moves on to CLAIM_SCANNED.
Lifecycles of different rounds run concurrently and only share the
WaitingTime and the chain client.
"""
from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field
from web3 import Web3

from protocol.models import Payout, PoolAmounts, Side, Strategy
from bettor.adapters.base import PlatformAdapter
from bettor.orchestrator.waiting_time import WaitingTime
from bettor.services.claims import ClaimWindowScanner
from bettor.services.dues import DuesCalculator
from bettor.services.strategy import decide_for_pools
from bettor.utils.console import SUCCESS
from bettor.utils.env import DUES_RECIPIENT, STRATEGY_RATIO_THRESHOLD

logger = logging.getLogger(__name__)


class RoundState(str, Enum):
    SIGNALED = "signaled"
    WAITING = "waiting"
    AMOUNTS_READ = "amounts_read"
    AMOUNTS_FAILED = "amounts_failed"
    DECIDED = "decided"
    BET_PENDING = "bet_pending"
    BET_CONFIRMED = "bet_confirmed"
    BET_FAILED = "bet_failed"
    CLAIM_SCANNED = "claim_scanned"
    CLAIM_NONE = "claim_none"
    CLAIM_PENDING = "claim_pending"
    CLAIM_CONFIRMED = "claim_confirmed"
    CLAIM_FAILED = "claim_failed"
    DUES_DISPATCHED = "dues_dispatched"
    DONE = "done"
    FAILED = "failed"


class RoundLifecycle(BaseModel):
    """What happened to one round. Kept in memory only."""

    epoch: int
    state: RoundState = RoundState.SIGNALED
    history: List[RoundState] = Field(default_factory=lambda: [RoundState.SIGNALED])
    waited_ms: Optional[int] = None
    pools: Optional[PoolAmounts] = None
    side: Optional[Side] = None
    bet_tx: Optional[str] = None
    claim_batch: List[int] = Field(default_factory=list)
    claim_tx: Optional[str] = None
    payouts: List[Payout] = Field(default_factory=list)
    dues_sent: List[int] = Field(default_factory=list)
    dues_failed: int = 0
    error: Optional[str] = None

    def advance(self, state: RoundState) -> None:
        self.state = state
        self.history.append(state)


def _bnb(amount: int) -> str:
    return f"{Web3.from_wei(amount, 'ether')}"


class RoundLifecycleController:
    """
    Drives each signalled round through wait, bet, claim and dues.

    Args:
        adapter: Platform the rounds belong to
        chain: Signer; provides `address` and `send_value(to, amount)`
        strategy: AGAINST or WITH the majority
        stake: Bet size in wei
        waiting_time: Shared adaptive delay before betting
        scanner: Claim window scanner over the same adapter
        dues: Fee calculator applied to each payout
        dues_recipient: Address the dues are sent to
        ratio_threshold: Pool ratio passed to the strategy
    """

    def __init__(
        self,
        adapter: PlatformAdapter,
        chain,
        strategy: Strategy,
        stake: int,
        waiting_time: WaitingTime,
        scanner: Optional[ClaimWindowScanner] = None,
        dues: Optional[DuesCalculator] = None,
        dues_recipient: str = DUES_RECIPIENT,
        ratio_threshold: int = STRATEGY_RATIO_THRESHOLD,
    ):
        self.adapter = adapter
        self.chain = chain
        self.strategy = strategy
        self.stake = stake
        self.waiting_time = waiting_time
        self.scanner = scanner or ClaimWindowScanner(adapter)
        self.dues = dues or DuesCalculator()
        self.dues_recipient = dues_recipient
        self.ratio_threshold = ratio_threshold

    async def run_round(self, epoch: int) -> RoundLifecycle:
        """
        Run one round's lifecycle to the end.

        Never raises except on cancellation: unexpected errors are logged
        with the epoch and recorded on the returned lifecycle.
        """
        lifecycle = RoundLifecycle(epoch=epoch)
        try:
            await self._run(lifecycle)
        except Exception as e:
            logger.error(f"[ROUND={epoch}] Error handling round: {e}", exc_info=True)
            lifecycle.error = str(e)
            lifecycle.advance(RoundState.FAILED)
        return lifecycle

    async def _run(self, lifecycle: RoundLifecycle) -> None:
        epoch = lifecycle.epoch
        logger.info(f"[ROUND={epoch}] Started epoch {epoch}")

        await self._wait(lifecycle)

        pools = await self._read_amounts(lifecycle)
        if pools is not None:
            await self._bet(lifecycle, pools)

        await self._claim(lifecycle)
        lifecycle.advance(RoundState.DONE)

    async def _wait(self, lifecycle: RoundLifecycle) -> None:
        lifecycle.advance(RoundState.WAITING)
        wait_ms = await self.waiting_time.get()
        lifecycle.waited_ms = wait_ms
        logger.info(f"[ROUND={lifecycle.epoch}] Now waiting for {wait_ms / 60000:g} min")
        await asyncio.sleep(wait_ms / 1000)

    async def _read_amounts(self, lifecycle: RoundLifecycle) -> Optional[PoolAmounts]:
        epoch = lifecycle.epoch
        logger.info(f"[ROUND={epoch}] Getting amounts")
        try:
            pools = await self.adapter.get_round_amounts(epoch)
        except Exception as e:
            logger.error(f"[ROUND={epoch}] Failed to read pool amounts, skipping bet: {e}")
            lifecycle.error = str(e)
            lifecycle.advance(RoundState.AMOUNTS_FAILED)
            return None

        lifecycle.pools = pools
        lifecycle.advance(RoundState.AMOUNTS_READ)
        logger.log(SUCCESS, f"[ROUND={epoch}] Bull amount {_bnb(pools.bull_amount)} BNB")
        logger.log(SUCCESS, f"[ROUND={epoch}] Bear amount {_bnb(pools.bear_amount)} BNB")
        return pools

    async def _bet(self, lifecycle: RoundLifecycle, pools: PoolAmounts) -> None:
        epoch = lifecycle.epoch
        side = decide_for_pools(self.strategy, pools, self.ratio_threshold)
        lifecycle.side = side
        lifecycle.advance(RoundState.DECIDED)
        logger.log(SUCCESS, f"[ROUND={epoch}] Betting on {side.value} bet")

        lifecycle.advance(RoundState.BET_PENDING)
        try:
            tx = await self.adapter.submit_bet(epoch, side, self.stake)
            lifecycle.bet_tx = tx.tx_hash
            logger.info(f"[ROUND={epoch}] {side.value} betting tx started: {tx.tx_hash}")
            await tx.await_confirmation()
        except Exception as e:
            logger.error(f"[ROUND={epoch}] {side.value} betting tx error")
            logger.warning(f"[ROUND={epoch}] Error details: {e}")
            lifecycle.advance(RoundState.BET_FAILED)
            await self.waiting_time.reduce()
            return

        lifecycle.advance(RoundState.BET_CONFIRMED)
        logger.info(f"[ROUND={epoch}] {side.value} betting tx success")

    async def _claim(self, lifecycle: RoundLifecycle) -> None:
        epoch = lifecycle.epoch
        batch = await self.scanner.scan(epoch, self.chain.address)
        lifecycle.claim_batch = batch
        lifecycle.advance(RoundState.CLAIM_SCANNED)
        if not batch:
            lifecycle.advance(RoundState.CLAIM_NONE)
            return

        lifecycle.advance(RoundState.CLAIM_PENDING)
        try:
            tx = await self.adapter.submit_claim(batch)
            lifecycle.claim_tx = tx.tx_hash
            logger.info(f"[ROUND={epoch}] Claim tx started for epochs {batch}: {tx.tx_hash}")
            receipt = await tx.await_confirmation()
        except Exception as e:
            logger.error(f"[ROUND={epoch}] Claim tx error")
            logger.warning(f"[ROUND={epoch}] Error details: {e}")
            lifecycle.advance(RoundState.CLAIM_FAILED)
            return

        lifecycle.payouts = receipt.payouts
        lifecycle.advance(RoundState.CLAIM_CONFIRMED)
        logger.log(SUCCESS, f"[ROUND={epoch}] Claim tx success")

        await self._dispatch_dues(lifecycle)
        lifecycle.advance(RoundState.DUES_DISPATCHED)

    async def _dispatch_dues(self, lifecycle: RoundLifecycle) -> None:
        # One transfer at a time: they share the signer's nonce
        for payout in lifecycle.payouts:
            if payout.amount is None:
                continue
            fee = self.dues.compute_fee(payout.amount)
            try:
                tx = await self.chain.send_value(self.dues_recipient, fee)
                await tx.await_confirmation()
            except Exception as e:
                lifecycle.dues_failed += 1
                logger.error(f"[ROUND={lifecycle.epoch}] Failed to send dues")
                logger.warning(f"[ROUND={lifecycle.epoch}] Error details: {e}")
                continue
            lifecycle.dues_sent.append(fee)
            logger.log(SUCCESS, f"[ROUND={lifecycle.epoch}] Dues sent: {_bnb(fee)} BNB")
