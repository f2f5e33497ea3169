"""
Platform adapter over a prediction contract.

Reads use the platform's view functions; struct-returning calls are decoded
by ABI output name. Writes are signed and broadcast by the ChainClient.
"""
import asyncio
import logging
from typing import List

from web3.contract import AsyncContract
from web3.logs import DISCARD

from protocol.models import ClaimEligibility, LedgerEntry, Payout, PoolAmounts, Side
from bettor.adapters.platforms import PlatformSpec
from bettor.chain import ChainClient, PendingTransaction
from bettor.utils.web3 import decode_outputs

logger = logging.getLogger(__name__)


class PredictionContractAdapter:
    """PlatformAdapter bound to one prediction contract."""

    def __init__(self, spec: PlatformSpec, contract: AsyncContract, chain: ChainClient):
        self.spec = spec
        self.contract = contract
        self.chain = chain

    @property
    def name(self) -> str:
        return self.spec.name

    def _fn(self, fn_name: str):
        return getattr(self.contract.functions, fn_name)

    async def get_round_amounts(self, epoch: int) -> PoolAmounts:
        raw = await self._fn(self.spec.rounds_fn)(epoch).call()
        fields = decode_outputs(self.contract.abi, self.spec.rounds_fn, raw)
        return PoolAmounts(
            bull_amount=int(fields["bullAmount"]),
            bear_amount=int(fields["bearAmount"]),
        )

    async def submit_bet(self, epoch: int, side: Side, stake: int) -> PendingTransaction:
        fn_name = self.spec.bet_bear_fn if side == Side.BEAR else self.spec.bet_bull_fn
        logger.debug(f"{self.name}: {fn_name}({epoch}) value={stake}")
        return await self.chain.submit_call(self._fn(fn_name)(epoch), value=stake)

    async def get_claim_eligibility(self, epoch: int, account: str) -> ClaimEligibility:
        claimable, refundable = await asyncio.gather(
            self._fn(self.spec.claimable_fn)(epoch, account).call(),
            self._fn(self.spec.refundable_fn)(epoch, account).call(),
        )
        return ClaimEligibility(claimable=bool(claimable), refundable=bool(refundable))

    async def get_ledger_entry(self, epoch: int, account: str) -> LedgerEntry:
        raw = await self._fn(self.spec.ledger_fn)(epoch, account).call()
        fields = decode_outputs(self.contract.abi, self.spec.ledger_fn, raw)
        return LedgerEntry(
            amount=int(fields["amount"]),
            claimed=bool(fields["claimed"]),
            position=fields.get("position"),
        )

    async def submit_claim(self, epochs: List[int]) -> PendingTransaction:
        logger.debug(f"{self.name}: {self.spec.claim_fn}({epochs})")
        return await self.chain.submit_call(
            self._fn(self.spec.claim_fn)(list(epochs)),
            decode_payouts=self.decode_payouts,
        )

    def decode_payouts(self, receipt) -> List[Payout]:
        """Payout events emitted by this contract in a claim receipt."""
        payouts: List[Payout] = []
        for event_name in self.spec.payout_events:
            event = getattr(self.contract.events, event_name)()
            for log in event.process_receipt(receipt, errors=DISCARD):
                args = log["args"]
                payouts.append(Payout(epoch=args.get("epoch"), amount=args.get("amount")))
        return payouts
