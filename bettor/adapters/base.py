from typing import List, Protocol, runtime_checkable

from protocol.models import ClaimEligibility, LedgerEntry, PoolAmounts, Receipt, Side


@runtime_checkable
class PendingTx(Protocol):
    tx_hash: str

    async def await_confirmation(self) -> Receipt: ...


@runtime_checkable
class PlatformAdapter(Protocol):
    """
    Operations a prediction platform must expose to the round lifecycle.

    Every call is a request against the platform contract and may raise on
    network or contract errors.
    """

    name: str

    async def get_round_amounts(self, epoch: int) -> PoolAmounts: ...

    async def submit_bet(self, epoch: int, side: Side, stake: int) -> PendingTx: ...

    async def get_claim_eligibility(self, epoch: int, account: str) -> ClaimEligibility: ...

    async def get_ledger_entry(self, epoch: int, account: str) -> LedgerEntry: ...

    async def submit_claim(self, epochs: List[int]) -> PendingTx: ...
