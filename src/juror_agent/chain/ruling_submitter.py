from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Protocol

from eth_account import Account
from web3 import Web3
from web3.exceptions import TransactionNotFound

from juror_agent.chain.addresses import normalize_address
from juror_agent.domain import SubmissionReceipt
from juror_agent.errors import SubmissionError
from juror_agent.observability.logging import get_logger
from juror_agent.resilience import RetryPolicy

GIVE_RULING_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "giveRuling",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "_disputeID", "type": "uint256"},
            {"name": "_ruling", "type": "uint256"},
        ],
        "outputs": [],
    }
]

StillPending = Callable[[], Awaitable[bool]]


class TransactionReverted(RuntimeError):
    def __init__(self, tx_hash: str) -> None:
        super().__init__(f"transaction {tx_hash} reverted")
        self.tx_hash = tx_hash


@dataclass(slots=True, frozen=True)
class SignedRuling:
    """A signed ``giveRuling`` call. Its nonce is fixed, so sending it again is harmless."""

    dispute_id: int
    ruling: int
    nonce: int
    tx_hash: str
    raw_transaction: bytes


class RulingGateway(Protocol):
    async def sign(self, dispute_id: int, ruling: int) -> SignedRuling:
        ...

    async def broadcast(self, signed: SignedRuling) -> None:
        ...

    async def wait_for_confirmation(self, tx_hash: str) -> SubmissionReceipt:
        ...


class Web3RulingGateway:
    """Signs ``giveRuling`` locally and sends it through a blocking Web3 client.

    Blocking calls run in a worker thread so the event loop keeps serving
    the scheduler while a transaction confirms.
    """

    def __init__(
        self,
        w3: Web3,
        contract_address: str,
        private_key: str,
        *,
        confirmation_timeout: float = 180.0,
    ) -> None:
        self._w3 = w3
        self._account = Account.from_key(private_key)
        self._contract = w3.eth.contract(
            address=normalize_address(contract_address, field_name="kleros_court_address"),
            abi=GIVE_RULING_ABI,
        )
        self._confirmation_timeout = confirmation_timeout

    def _sign_sync(self, dispute_id: int, ruling: int) -> SignedRuling:
        nonce = self._w3.eth.get_transaction_count(self._account.address, "pending")
        tx = self._contract.functions.giveRuling(dispute_id, ruling).build_transaction(
            {
                "from": self._account.address,
                "nonce": nonce,
                "chainId": self._w3.eth.chain_id,
            }
        )
        signed = self._account.sign_transaction(tx)
        return SignedRuling(
            dispute_id=dispute_id,
            ruling=ruling,
            nonce=nonce,
            tx_hash=Web3.to_hex(signed.hash),
            raw_transaction=bytes(signed.raw_transaction),
        )

    def _is_known(self, tx_hash: str) -> bool:
        try:
            self._w3.eth.get_transaction(tx_hash)
        except TransactionNotFound:
            return False
        return True

    def _broadcast_sync(self, signed: SignedRuling) -> None:
        try:
            self._w3.eth.send_raw_transaction(signed.raw_transaction)
        except Exception:
            # the node may have accepted it before the call failed
            if not self._is_known(signed.tx_hash):
                raise

    def _wait_sync(self, tx_hash: str) -> SubmissionReceipt:
        receipt = self._w3.eth.wait_for_transaction_receipt(
            tx_hash, timeout=self._confirmation_timeout
        )
        if receipt["status"] != 1:
            raise TransactionReverted(tx_hash)
        return SubmissionReceipt(
            tx_hash=tx_hash,
            block_number=int(receipt["blockNumber"]),
            confirmations=1,
        )

    async def sign(self, dispute_id: int, ruling: int) -> SignedRuling:
        return await asyncio.to_thread(self._sign_sync, dispute_id, ruling)

    async def broadcast(self, signed: SignedRuling) -> None:
        await asyncio.to_thread(self._broadcast_sync, signed)

    async def wait_for_confirmation(self, tx_hash: str) -> SubmissionReceipt:
        return await asyncio.to_thread(self._wait_sync, tx_hash)


class RulingSubmitter:
    def __init__(self, gateway: RulingGateway, policy: RetryPolicy) -> None:
        self._gateway = gateway
        self._policy = policy

    async def submit(
        self,
        dispute_id: int,
        ruling: int,
        *,
        still_pending: StillPending | None = None,
    ) -> SubmissionReceipt | None:
        """Send ``giveRuling`` and wait for one confirmation.

        Returns None when ``still_pending`` reports, before a transaction is
        signed, that the dispute no longer needs a ruling. Retries resend the
        same signed transaction, so a broadcast that failed after the node took
        it cannot produce a second ruling. Only a revert leads to a new
        transaction.
        """
        logger = get_logger("ruling_submitter").bind(dispute_id=dispute_id, ruling=ruling)
        signed: SignedRuling | None = None
        sent = False
        skipped = False

        async def attempt() -> SubmissionReceipt | None:
            nonlocal signed, sent, skipped
            if signed is None:
                if still_pending is not None and not await still_pending():
                    skipped = True
                    return None
                signed = await self._gateway.sign(dispute_id, ruling)
            if not sent:
                await self._gateway.broadcast(signed)
                sent = True
                logger.info("ruling_broadcast", tx_hash=signed.tx_hash, nonce=signed.nonce)
            try:
                return await self._gateway.wait_for_confirmation(signed.tx_hash)
            except TransactionReverted:
                signed = None
                sent = False
                raise

        try:
            receipt = await self._policy.run(attempt, name="submit_ruling")
        except Exception as exc:
            raise SubmissionError(dispute_id, ruling, exc) from exc

        if skipped:
            logger.info("ruling_submission_skipped", reason="dispute no longer pending")
            return None
        if receipt is not None:
            logger.info("ruling_confirmed", **receipt.as_dict())
        return receipt
