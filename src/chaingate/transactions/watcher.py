"""ConfirmationWatcher: background receipt tracking for submitted transactions."""

import asyncio
import logging
import uuid
from typing import Any, Mapping

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from web3.exceptions import TransactionNotFound

from chaingate.db.repos.transaction_repo import TransactionRepo
from chaingate.db.session import session_scope
from chaingate.domain.enums import TxStatus
from chaingate.infra.blockchain.evm.provider_registry import ProviderRegistry

logger = logging.getLogger(__name__)


def status_from_receipt(receipt: Mapping[str, Any]) -> TxStatus:
    return TxStatus.CONFIRMED if receipt.get("status") == 1 else TxStatus.FAILED


class ConfirmationWatcher:
    """Owns one asyncio task per watched transaction id.

    Watches are best-effort: every failure (timeout, RPC error) ends as FAILED and is logged,
    never raised. A cancelled watch leaves the record SUBMITTED for ``resume_pending`` to pick up.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        providers: ProviderRegistry,
        receipt_timeout: float = 600.0,
        poll_interval: float = 2.0,
    ) -> None:
        self._session_factory = session_factory
        self._providers = providers
        self._receipt_timeout = receipt_timeout
        self._poll_interval = poll_interval
        self._tasks: dict[uuid.UUID, asyncio.Task[TxStatus]] = {}

    @property
    def active_count(self) -> int:
        return len(self._tasks)

    def is_watching(self, tx_id: uuid.UUID) -> bool:
        task = self._tasks.get(tx_id)
        return task is not None and not task.done()

    def watch(self, tx_id: uuid.UUID, chain_id: str, tx_hash: str) -> asyncio.Task[TxStatus]:
        """Start watching, or return the task already watching this id."""
        existing = self._tasks.get(tx_id)
        if existing is not None and not existing.done():
            return existing

        task = asyncio.create_task(self._run(tx_id, chain_id, tx_hash), name=f"watch-{tx_id}")
        self._tasks[tx_id] = task
        task.add_done_callback(lambda t: self._forget(tx_id, t))
        return task

    def _forget(self, tx_id: uuid.UUID, task: asyncio.Task[TxStatus]) -> None:
        if self._tasks.get(tx_id) is task:
            del self._tasks[tx_id]

    async def _run(self, tx_id: uuid.UUID, chain_id: str, tx_hash: str) -> TxStatus:
        cause = "reverted on-chain"
        try:
            w3 = self._providers.get(chain_id)
            receipt = await w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self._receipt_timeout, poll_latency=self._poll_interval
            )
            status = status_from_receipt(receipt)
        except asyncio.CancelledError:
            logger.info("Stopped watching transaction %s, left SUBMITTED", tx_id)
            raise
        except Exception as e:
            logger.exception("Error watching confirmation for transaction %s", tx_id)
            status = TxStatus.FAILED
            cause = f"watch error: {type(e).__name__}"

        await self.apply_status(tx_id, status, tx_hash, cause)
        return status

    async def apply_status(
        self, tx_id: uuid.UUID, status: TxStatus, tx_hash: str = "", cause: str = "reverted on-chain"
    ) -> bool:
        """Persist the final status if the record is still SUBMITTED.

        ``cause`` names why a FAILED status was reached; it only shapes the log line.
        """
        try:
            async with session_scope(self._session_factory) as session:
                changed = await TransactionRepo(session).transition(tx_id, status, (TxStatus.SUBMITTED,))
        except Exception:
            logger.exception("Could not record %s for transaction %s", status.value, tx_id)
            return False

        if not changed:
            logger.info("Transaction %s no longer SUBMITTED, %s not recorded", tx_id, status.value)
        elif status == TxStatus.CONFIRMED:
            logger.info("Transaction %s confirmed with hash %s", tx_id, tx_hash)
        else:
            logger.error("Transaction %s failed (%s, hash %s)", tx_id, cause, tx_hash)
        return changed

    async def resume_pending(self) -> int:
        """Start watches for every SUBMITTED record, e.g. after a restart."""
        async with session_scope(self._session_factory) as session:
            records = await TransactionRepo(session).list_by_status(TxStatus.SUBMITTED)

        resumed = 0
        for record in records:
            if not record.tx_hash:
                continue
            self.watch(record.id, record.chain_id, record.tx_hash)
            resumed += 1
        if resumed:
            logger.info("Resumed confirmation watch for %d submitted transactions", resumed)
        return resumed

    async def reconcile_once(self) -> dict[str, int]:
        """Single non-blocking pass over SUBMITTED records: finalize those already mined."""
        async with session_scope(self._session_factory) as session:
            records = await TransactionRepo(session).list_by_status(TxStatus.SUBMITTED)

        counts = {"checked": 0, "confirmed": 0, "failed": 0, "pending": 0}
        for record in records:
            if not record.tx_hash or self.is_watching(record.id):
                continue
            counts["checked"] += 1
            try:
                w3 = self._providers.get(record.chain_id)
                receipt = await w3.eth.get_transaction_receipt(record.tx_hash)
            except TransactionNotFound:
                counts["pending"] += 1
                continue
            except Exception:
                logger.exception("Receipt lookup failed for transaction %s", record.id)
                counts["pending"] += 1
                continue

            status = status_from_receipt(receipt)
            await self.apply_status(record.id, status, record.tx_hash)
            counts["confirmed" if status == TxStatus.CONFIRMED else "failed"] += 1
        return counts

    async def shutdown(self) -> None:
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
