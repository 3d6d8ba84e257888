import asyncio
import logging
import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from web3.exceptions import TimeExhausted, TransactionNotFound

from chaingate.db.models.transaction import TransactionRecord
from chaingate.db.repos.transaction_repo import TransactionRepo
from chaingate.domain.enums import TxStatus
from chaingate.transactions.watcher import ConfirmationWatcher, status_from_receipt

TX_HASH = "0x" + "cd" * 32


@pytest.fixture()
def w3():
    mock = MagicMock()
    mock.eth.wait_for_transaction_receipt = AsyncMock(return_value={"status": 1})
    mock.eth.get_transaction_receipt = AsyncMock(return_value={"status": 1})
    return mock


@pytest.fixture()
def watcher(session_factory, w3):
    providers = MagicMock()
    providers.get.return_value = w3
    return ConfirmationWatcher(session_factory, providers, receipt_timeout=5.0, poll_interval=0.1)


async def _submitted(session, tx_hash: str | None = TX_HASH, status: TxStatus = TxStatus.SUBMITTED) -> uuid.UUID:
    record = TransactionRecord(
        id=uuid.uuid4(), chain_id="1", user_id="system", to_addr="0xabc", status=status.value, tx_hash=tx_hash,
    )
    await TransactionRepo(session).create(record)
    await session.commit()
    return record.id


async def _status(session, tx_id) -> str:
    return (await TransactionRepo(session).get_by_id(tx_id)).status


class TestStatusFromReceipt:
    def test_success(self):
        assert status_from_receipt({"status": 1}) == TxStatus.CONFIRMED

    def test_reverted(self):
        assert status_from_receipt({"status": 0}) == TxStatus.FAILED

    def test_missing_status(self):
        assert status_from_receipt({}) == TxStatus.FAILED


class TestWatch:
    async def test_confirmed(self, seeded, watcher, w3):
        tx_id = await _submitted(seeded)

        assert await watcher.watch(tx_id, "1", TX_HASH) == TxStatus.CONFIRMED

        assert await _status(seeded, tx_id) == "CONFIRMED"
        w3.eth.wait_for_transaction_receipt.assert_awaited_once_with(TX_HASH, timeout=5.0, poll_latency=0.1)
        assert watcher.active_count == 0

    async def test_reverted(self, seeded, watcher, w3):
        w3.eth.wait_for_transaction_receipt.return_value = {"status": 0}
        tx_id = await _submitted(seeded)

        assert await watcher.watch(tx_id, "1", TX_HASH) == TxStatus.FAILED
        assert await _status(seeded, tx_id) == "FAILED"

    async def test_timeout_is_failed_not_raised(self, seeded, watcher, w3):
        w3.eth.wait_for_transaction_receipt.side_effect = TimeExhausted("not mined")
        tx_id = await _submitted(seeded)

        assert await watcher.watch(tx_id, "1", TX_HASH) == TxStatus.FAILED
        assert await _status(seeded, tx_id) == "FAILED"

    async def test_final_status_only_applied_to_submitted(self, seeded, watcher):
        tx_id = await _submitted(seeded, status=TxStatus.CONFIRMED)

        assert await watcher.apply_status(tx_id, TxStatus.FAILED) is False
        assert await _status(seeded, tx_id) == "CONFIRMED"

    async def test_unchanged_status_not_logged_as_failure(self, seeded, watcher, caplog):
        tx_id = await _submitted(seeded, status=TxStatus.CONFIRMED)

        with caplog.at_level(logging.INFO, logger="chaingate.transactions.watcher"):
            await watcher.apply_status(tx_id, TxStatus.FAILED, TX_HASH)

        assert "not recorded" in caplog.text
        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]

    async def test_reverted_logged_as_on_chain(self, seeded, watcher, w3, caplog):
        w3.eth.wait_for_transaction_receipt.return_value = {"status": 0}
        tx_id = await _submitted(seeded)

        with caplog.at_level(logging.INFO, logger="chaingate.transactions.watcher"):
            await watcher.watch(tx_id, "1", TX_HASH)

        assert "reverted on-chain" in caplog.text

    async def test_timeout_logged_as_watch_error(self, seeded, watcher, w3, caplog):
        w3.eth.wait_for_transaction_receipt.side_effect = TimeExhausted("not mined")
        tx_id = await _submitted(seeded)

        with caplog.at_level(logging.INFO, logger="chaingate.transactions.watcher"):
            await watcher.watch(tx_id, "1", TX_HASH)

        assert "watch error: TimeExhausted" in caplog.text
        assert "on-chain" not in caplog.text

    async def test_one_watch_per_transaction(self, seeded, watcher, w3):
        gate = asyncio.Event()

        async def slow_receipt(*args, **kwargs):
            await gate.wait()
            return {"status": 1}

        w3.eth.wait_for_transaction_receipt.side_effect = slow_receipt
        tx_id = await _submitted(seeded)

        first = watcher.watch(tx_id, "1", TX_HASH)
        second = watcher.watch(tx_id, "1", TX_HASH)
        assert first is second
        assert watcher.is_watching(tx_id)

        gate.set()
        await first
        assert not watcher.is_watching(tx_id)

    async def test_shutdown_leaves_record_submitted(self, seeded, watcher, w3):
        async def never(*args, **kwargs):
            await asyncio.Event().wait()

        w3.eth.wait_for_transaction_receipt.side_effect = never
        tx_id = await _submitted(seeded)
        watcher.watch(tx_id, "1", TX_HASH)
        await asyncio.sleep(0)

        await watcher.shutdown()

        assert watcher.active_count == 0
        assert await _status(seeded, tx_id) == "SUBMITTED"


class TestResumePending:
    async def test_watches_submitted_records_with_hash(self, seeded, watcher):
        with_hash = await _submitted(seeded)
        await _submitted(seeded, tx_hash=None)
        await _submitted(seeded, status=TxStatus.PENDING, tx_hash=None)

        assert await watcher.resume_pending() == 1
        assert watcher.is_watching(with_hash)

        await watcher.shutdown()


class TestReconcileOnce:
    async def test_finalizes_mined_and_skips_unmined(self, seeded, watcher, w3):
        mined = await _submitted(seeded, tx_hash="0x01")
        unmined = await _submitted(seeded, tx_hash="0x02")

        async def receipt(tx_hash):
            if tx_hash == "0x02":
                raise TransactionNotFound("not yet")
            return {"status": 1}

        w3.eth.get_transaction_receipt.side_effect = receipt

        counts = await watcher.reconcile_once()

        assert counts == {"checked": 2, "confirmed": 1, "failed": 0, "pending": 1}
        assert await _status(seeded, mined) == "CONFIRMED"
        assert await _status(seeded, unmined) == "SUBMITTED"

    async def test_rpc_errors_leave_record_pending(self, seeded, watcher, w3):
        tx_id = await _submitted(seeded)
        w3.eth.get_transaction_receipt.side_effect = ConnectionError("rpc down")

        counts = await watcher.reconcile_once()

        assert counts["pending"] == 1
        assert await _status(seeded, tx_id) == "SUBMITTED"
