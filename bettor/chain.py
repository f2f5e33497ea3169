"""
Chain client: signs and broadcasts transactions for the bettor's one account.

All submissions from concurrent round lifecycles go through one lock and a
locally tracked nonce, so two rounds never sign with the same nonce. After a
failed submission the nonce is re-read from the node.
"""
import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3, Web3

from protocol.models import Payout, Receipt
from bettor.exceptions import TransactionFailedError
from bettor.utils.env import DEFAULT_TX_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

PLAIN_TRANSFER_GAS = 21000

PayoutDecoder = Callable[[Any], List[Payout]]


class PendingTransaction:
    """A broadcast transaction that has not been confirmed yet."""

    def __init__(
        self,
        client: "ChainClient",
        tx_hash: str,
        decode_payouts: Optional[PayoutDecoder] = None,
    ):
        self.client = client
        self.tx_hash = tx_hash
        self.decode_payouts = decode_payouts

    async def await_confirmation(self) -> Receipt:
        """
        Wait for the receipt.

        Raises:
            TransactionFailedError: If the transaction reverted
        """
        raw = await self.client.wait_for_receipt(self.tx_hash)
        status = int(raw.get("status", 0))
        if status != 1:
            raise TransactionFailedError(self.tx_hash)
        payouts = self.decode_payouts(raw) if self.decode_payouts else []
        return Receipt(
            tx_hash=self.tx_hash,
            status=status,
            block_number=raw.get("blockNumber"),
            payouts=payouts,
        )

    def __repr__(self) -> str:
        return f"PendingTransaction({self.tx_hash})"


class ChainClient:
    """Signer bound to one private key and one RPC endpoint."""

    def __init__(
        self,
        w3: AsyncWeb3,
        private_key: str,
        tx_timeout: int = DEFAULT_TX_TIMEOUT_SECONDS,
    ):
        self.w3 = w3
        self.account: LocalAccount = Account.from_key(private_key)
        self.tx_timeout = tx_timeout
        self._nonce: Optional[int] = None
        self._chain_id: Optional[int] = None
        self._lock = asyncio.Lock()

    @property
    def address(self) -> str:
        return self.account.address

    async def is_connected(self) -> bool:
        return await self.w3.is_connected()

    async def _next_nonce(self) -> int:
        if self._nonce is None:
            self._nonce = await self.w3.eth.get_transaction_count(self.address, "pending")
        return self._nonce

    async def _get_chain_id(self) -> int:
        if self._chain_id is None:
            self._chain_id = await self.w3.eth.chain_id
        return self._chain_id

    async def _sign_and_send(self, tx: Dict[str, Any]) -> str:
        signed = self.account.sign_transaction(tx)
        tx_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
        return Web3.to_hex(tx_hash)

    async def submit_call(
        self,
        fn_call,
        value: int = 0,
        decode_payouts: Optional[PayoutDecoder] = None,
    ) -> PendingTransaction:
        """
        Sign and broadcast a contract function call.

        Args:
            fn_call: Bound contract function, e.g. contract.functions.betBull(epoch)
            value: Native value to send (wei)
            decode_payouts: Turns the raw receipt into payouts on confirmation
        """
        async with self._lock:
            try:
                nonce = await self._next_nonce()
                tx = await fn_call.build_transaction(
                    {
                        "from": self.address,
                        "value": value,
                        "nonce": nonce,
                        "chainId": await self._get_chain_id(),
                    }
                )
                tx_hash = await self._sign_and_send(tx)
            except Exception:
                self._nonce = None
                raise
            self._nonce = nonce + 1
        logger.debug(f"Sent {tx_hash} with nonce {nonce}")
        return PendingTransaction(self, tx_hash, decode_payouts)

    async def send_value(self, to: str, amount: int) -> PendingTransaction:
        """Sign and broadcast a plain native-token transfer."""
        async with self._lock:
            try:
                nonce = await self._next_nonce()
                tx = {
                    "from": self.address,
                    "to": Web3.to_checksum_address(to),
                    "value": amount,
                    "gas": PLAIN_TRANSFER_GAS,
                    "gasPrice": await self.w3.eth.gas_price,
                    "nonce": nonce,
                    "chainId": await self._get_chain_id(),
                }
                tx_hash = await self._sign_and_send(tx)
            except Exception:
                self._nonce = None
                raise
            self._nonce = nonce + 1
        logger.debug(f"Sent transfer {tx_hash} with nonce {nonce}")
        return PendingTransaction(self, tx_hash)

    async def wait_for_receipt(self, tx_hash: str):
        return await self.w3.eth.wait_for_transaction_receipt(
            tx_hash, timeout=self.tx_timeout
        )
