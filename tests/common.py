"""
Shared test helpers and utilities for project-wide use.

In-memory stand-ins for the prediction contract, the chain client and the
StartRound watcher. Use these from conftest.py fixtures or individual tests.
"""
from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from web3 import Web3


# Ensure project root is on path when tests run
def _ensure_project_root() -> Path:
    root = Path(__file__).resolve().parent.parent
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))
    return root


def ensure_project_root() -> Path:
    """Add project root to sys.path. Idempotent. Returns root Path."""
    return _ensure_project_root()


ensure_project_root()

from protocol.models import (  # noqa: E402
    ClaimEligibility,
    LedgerEntry,
    Payout,
    PoolAmounts,
    Receipt,
    Side,
)
from bettor.config import BotConfig  # noqa: E402

TEST_PRIVATE_KEY = "0x" + "4c" * 32
TEST_ACCOUNT = "0x1111111111111111111111111111111111111111"
TEST_DUES_RECIPIENT = "0x74b8B9b7aa13D26056F4eceBDF06C917d15974C7"
STAKE = 10**17
MIN_FEE = 10


def make_config(**overrides) -> BotConfig:
    """BotConfig with a throwaway key and a 1 ms wait."""
    values = {
        "private_key": TEST_PRIVATE_KEY,
        "bet_amount": "0.1",
        "rpc_url": "http://127.0.0.1:8545",
        "waiting_time_ms": 1,
        "min_waiting_time_ms": 1,
    }
    values.update(overrides)
    return BotConfig(**values)


class FakePendingTx:
    """Pending transaction that confirms (or fails) on demand."""

    def __init__(
        self,
        tx_hash: str,
        payouts: Optional[List[Payout]] = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ):
        self.tx_hash = tx_hash
        self.payouts = payouts or []
        self.error = error
        self.delay = delay
        self.confirmed = False

    async def await_confirmation(self) -> Receipt:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        self.confirmed = True
        return Receipt(tx_hash=self.tx_hash, status=1, block_number=1, payouts=self.payouts)


class FakeAdapter:
    """In-memory prediction platform."""

    name = "FakePlatform"

    def __init__(self):
        self.pools: Dict[int, PoolAmounts] = {}
        self.eligibility: Dict[Tuple[int, str], ClaimEligibility] = {}
        self.ledger: Dict[Tuple[int, str], LedgerEntry] = {}
        self.claim_payouts: List[Payout] = []

        self.amounts_error: Optional[Exception] = None
        self.bet_submit_error: Optional[Exception] = None
        self.bet_confirm_error: Optional[Exception] = None
        self.claim_submit_error: Optional[Exception] = None
        self.claim_confirm_error: Optional[Exception] = None
        self.read_error: Optional[Exception] = None

        self.bets: List[Tuple[int, Side, int]] = []
        self.claims: List[List[int]] = []
        self.scanned: List[int] = []
        self.amount_reads: List[int] = []

    def set_pools(self, epoch: int, bull: int, bear: int) -> None:
        self.pools[epoch] = PoolAmounts(bull_amount=bull, bear_amount=bear)

    def set_bet(
        self,
        epoch: int,
        account: str,
        amount: int,
        claimable: bool = False,
        refundable: bool = False,
        claimed: bool = False,
    ) -> None:
        self.eligibility[(epoch, account)] = ClaimEligibility(
            claimable=claimable, refundable=refundable
        )
        self.ledger[(epoch, account)] = LedgerEntry(amount=amount, claimed=claimed)

    async def get_round_amounts(self, epoch: int) -> PoolAmounts:
        self.amount_reads.append(epoch)
        if self.amounts_error is not None:
            raise self.amounts_error
        return self.pools.get(epoch, PoolAmounts(bull_amount=0, bear_amount=0))

    async def submit_bet(self, epoch: int, side: Side, stake: int) -> FakePendingTx:
        if self.bet_submit_error is not None:
            raise self.bet_submit_error
        self.bets.append((epoch, side, stake))
        return FakePendingTx(f"0xbet{epoch}", error=self.bet_confirm_error)

    async def get_claim_eligibility(self, epoch: int, account: str) -> ClaimEligibility:
        self.scanned.append(epoch)
        await asyncio.sleep(0)
        if self.read_error is not None:
            raise self.read_error
        return self.eligibility.get((epoch, account), ClaimEligibility())

    async def get_ledger_entry(self, epoch: int, account: str) -> LedgerEntry:
        await asyncio.sleep(0)
        if self.read_error is not None:
            raise self.read_error
        return self.ledger.get((epoch, account), LedgerEntry())

    async def submit_claim(self, epochs: List[int]) -> FakePendingTx:
        if self.claim_submit_error is not None:
            raise self.claim_submit_error
        self.claims.append(list(epochs))
        return FakePendingTx(
            "0xclaim", payouts=self.claim_payouts, error=self.claim_confirm_error
        )


class FakeChain:
    """Chain client recording value transfers; flags overlapping transfers."""

    def __init__(self, address: str = TEST_ACCOUNT, confirm_delay: float = 0.0):
        self.address = address
        self.confirm_delay = confirm_delay
        self.transfers: List[Tuple[str, int]] = []
        self.fail_transfers: Dict[int, Exception] = {}
        self.in_flight = 0
        self.max_in_flight = 0

    async def is_connected(self) -> bool:
        return True

    async def send_value(self, to: str, amount: int) -> FakePendingTx:
        index = len(self.transfers)
        self.transfers.append((to, amount))
        if index in self.fail_transfers:
            raise self.fail_transfers[index]
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        tx = FakePendingTx(f"0xdues{index}", delay=self.confirm_delay)
        confirm = tx.await_confirmation

        async def _confirm():
            try:
                return await confirm()
            finally:
                self.in_flight -= 1

        tx.await_confirmation = _confirm
        return tx


class FakeWatcher:
    """Signal source that delivers a fixed list of epochs then idles until stopped."""

    def __init__(self, epochs: List[int]):
        self.epochs = list(epochs)
        self._stopped = asyncio.Event()

    async def watch(self, on_start_round) -> None:
        for epoch in self.epochs:
            on_start_round(epoch)
        await self._stopped.wait()

    def stop(self) -> None:
        self._stopped.set()


def resolved(value):
    """A fresh awaitable resolving to value."""

    async def _value():
        return value

    return _value()


class FakeEth:
    """Subset of AsyncWeb3.eth used by the chain client and the watcher."""

    def __init__(self, nonce: int = 7, chain_id: int = 56, block_number: int = 100):
        self.nonce = nonce
        self._chain_id = chain_id
        self.block = block_number
        self.sent: List[bytes] = []
        self.send_error: Optional[Exception] = None
        self.receipts: Dict[str, dict] = {}
        self.nonce_reads = 0

    @property
    def chain_id(self):
        return resolved(self._chain_id)

    @property
    def gas_price(self):
        return resolved(Web3.to_wei(1, "gwei"))

    @property
    def block_number(self):
        return resolved(self.block)

    async def get_transaction_count(self, address, block_identifier="latest"):
        self.nonce_reads += 1
        return self.nonce

    async def send_raw_transaction(self, raw):
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(bytes(raw))
        return Web3.keccak(raw)

    async def wait_for_transaction_receipt(self, tx_hash, timeout=120):
        return self.receipts.get(tx_hash, {"status": 1, "blockNumber": 1, "logs": []})


class FakeWeb3:
    def __init__(self, eth: Optional[FakeEth] = None, connected: bool = True):
        self.eth = eth or FakeEth()
        self.connected = connected

    async def is_connected(self) -> bool:
        return self.connected
