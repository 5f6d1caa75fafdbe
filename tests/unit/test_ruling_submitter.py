from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any

import pytest
from web3.exceptions import TransactionNotFound

from juror_agent.chain import (
    RulingSubmitter,
    SignedRuling,
    TransactionReverted,
    Web3RulingGateway,
    normalize_address,
)
from juror_agent.domain import SubmissionReceipt
from juror_agent.errors import SubmissionError
from juror_agent.resilience import RetryPolicy

TEST_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class FakeGateway:
    def __init__(
        self,
        *,
        broadcast_failures: int = 0,
        confirmation_failures: int = 0,
        reverts: int = 0,
    ) -> None:
        self.broadcast_failures = broadcast_failures
        self.confirmation_failures = confirmation_failures
        self.reverts = reverts
        self.signed: list[SignedRuling] = []
        self.broadcasts: list[SignedRuling] = []
        self.waits: list[str] = []

    async def sign(self, dispute_id: int, ruling: int) -> SignedRuling:
        nonce = len(self.signed)
        signed = SignedRuling(dispute_id, ruling, nonce, f"0x{nonce + 1:064x}", b"\x02raw")
        self.signed.append(signed)
        return signed

    async def broadcast(self, signed: SignedRuling) -> None:
        self.broadcasts.append(signed)
        if len(self.broadcasts) <= self.broadcast_failures:
            raise ConnectionError("rpc unavailable")

    async def wait_for_confirmation(self, tx_hash: str) -> SubmissionReceipt:
        self.waits.append(tx_hash)
        if len(self.waits) <= self.confirmation_failures:
            raise TimeoutError("receipt not found")
        if self.reverts:
            self.reverts -= 1
            raise TransactionReverted(tx_hash)
        return SubmissionReceipt(tx_hash=tx_hash, block_number=10)


def _submitter(gateway: FakeGateway, sleep: RecordingSleep | None = None) -> RulingSubmitter:
    return RulingSubmitter(
        gateway, RetryPolicy(retries=3, base_delay=0.5, sleep=sleep or RecordingSleep())
    )


def test_submit_waits_for_one_confirmation() -> None:
    gateway = FakeGateway()

    receipt = asyncio.run(_submitter(gateway).submit(100, 1))

    assert receipt == SubmissionReceipt(tx_hash=f"0x{1:064x}", block_number=10, confirmations=1)
    assert [(s.dispute_id, s.ruling) for s in gateway.broadcasts] == [(100, 1)]


def test_failed_broadcast_resends_the_same_signed_transaction() -> None:
    gateway = FakeGateway(broadcast_failures=2)
    sleep = RecordingSleep()

    receipt = asyncio.run(_submitter(gateway, sleep).submit(100, 1))

    assert receipt is not None
    assert len(gateway.signed) == 1
    assert len(gateway.broadcasts) == 3
    assert {s.nonce for s in gateway.broadcasts} == {0}
    assert {s.tx_hash for s in gateway.broadcasts} == {receipt.tx_hash}
    assert sleep.delays == [0.5, 1.0]


def test_confirmation_failure_waits_again_instead_of_rebroadcasting() -> None:
    gateway = FakeGateway(confirmation_failures=1)

    receipt = asyncio.run(_submitter(gateway).submit(100, 1))

    assert receipt is not None
    assert len(gateway.broadcasts) == 1
    assert gateway.waits == [f"0x{1:064x}", f"0x{1:064x}"]


def test_reverted_transaction_is_signed_and_sent_again() -> None:
    gateway = FakeGateway(reverts=1)

    receipt = asyncio.run(_submitter(gateway).submit(100, 1))

    assert receipt is not None
    assert [s.nonce for s in gateway.signed] == [0, 1]
    assert len(gateway.broadcasts) == 2


def test_exhausted_retries_raise_submission_error() -> None:
    gateway = FakeGateway(broadcast_failures=5)

    with pytest.raises(SubmissionError) as excinfo:
        asyncio.run(_submitter(gateway).submit(100, 1))

    assert excinfo.value.dispute_id == 100
    assert isinstance(excinfo.value.cause, ConnectionError)
    assert len(gateway.broadcasts) == 3


def test_reconciliation_skips_signing_for_settled_dispute() -> None:
    gateway = FakeGateway()
    checks = 0

    async def still_pending() -> bool:
        nonlocal checks
        checks += 1
        return False

    receipt = asyncio.run(_submitter(gateway).submit(100, 1, still_pending=still_pending))

    assert receipt is None
    assert checks == 1
    assert gateway.signed == []
    assert gateway.broadcasts == []


def test_reconciliation_runs_before_every_new_transaction() -> None:
    gateway = FakeGateway(reverts=1)
    answers = [True, False]

    async def still_pending() -> bool:
        return answers.pop(0)

    receipt = asyncio.run(_submitter(gateway).submit(100, 1, still_pending=still_pending))

    assert receipt is None
    assert len(gateway.signed) == 1
    assert answers == []


class FakeEth:
    def __init__(self, *, send_error: Exception | None = None, known: bool = False) -> None:
        self.send_error = send_error
        self.known = known
        self.sent: list[bytes] = []

    def contract(self, address: str, abi: list[dict[str, Any]]) -> SimpleNamespace:
        return SimpleNamespace(address=address, abi=abi)

    def send_raw_transaction(self, raw: bytes) -> bytes:
        self.sent.append(raw)
        if self.send_error is not None:
            raise self.send_error
        return b"\x01" * 32

    def get_transaction(self, tx_hash: str) -> dict[str, Any]:
        if not self.known:
            raise TransactionNotFound(f"transaction {tx_hash} not found")
        return {"hash": tx_hash}


def _web3_gateway(eth: FakeEth) -> Web3RulingGateway:
    return Web3RulingGateway(
        SimpleNamespace(eth=eth),  # type: ignore[arg-type]
        "0x" + "1" * 40,
        TEST_PRIVATE_KEY,
    )


SIGNED = SignedRuling(100, 1, 7, "0x" + "ab" * 32, b"\x02raw")


def test_broadcast_accepted_despite_transport_error_is_not_an_error() -> None:
    eth = FakeEth(send_error=TimeoutError("read timed out"), known=True)

    asyncio.run(_web3_gateway(eth).broadcast(SIGNED))

    assert eth.sent == [b"\x02raw"]


def test_broadcast_unknown_to_the_node_is_raised() -> None:
    eth = FakeEth(send_error=TimeoutError("read timed out"), known=False)

    with pytest.raises(TimeoutError):
        asyncio.run(_web3_gateway(eth).broadcast(SIGNED))


def test_invalid_contract_address_is_rejected() -> None:
    with pytest.raises(ValueError, match="kleros_court_address"):
        Web3RulingGateway(
            SimpleNamespace(eth=FakeEth()),  # type: ignore[arg-type]
            "not-an-address",
            TEST_PRIVATE_KEY,
        )


def test_normalize_address_checksums_and_rejects_garbage() -> None:
    assert normalize_address("0x" + "ab" * 20, field_name="x") == normalize_address(
        "0x" + "AB" * 20, field_name="x"
    )
    with pytest.raises(ValueError, match="valid EVM address"):
        normalize_address("0x123", field_name="kleros_court_address")
    with pytest.raises(ValueError, match="required"):
        normalize_address("  ", field_name="kleros_court_address")
