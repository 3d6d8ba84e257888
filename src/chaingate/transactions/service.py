"""TransactionService: prepared transaction lifecycle.

prepare (PENDING) -> approve/reject -> submit (broadcast, SUBMITTED) -> watcher (CONFIRMED/FAILED).
The service commits its own writes: a FAILED status must be durable before the error is raised,
and a SUBMITTED row must be visible to the watcher's separate session.
"""

from __future__ import annotations

import logging
import re
import uuid
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from chaingate.transactions.watcher import ConfirmationWatcher

from eth_account import Account
from sqlalchemy.ext.asyncio import AsyncSession
from web3 import Web3

from chaingate.db.models.transaction import NO_DATA, TransactionRecord
from chaingate.db.repos.transaction_repo import TransactionRepo
from chaingate.domain.enums import SUBMITTABLE_STATUSES, TxStatus
from chaingate.domain.models.transaction import PrepareTransactionRequest, SubmitResult, TransactionView
from chaingate.exceptions import InvalidStateError, NotFoundError, SubmissionError, ValidationError
from chaingate.infra.blockchain.evm.provider_registry import ProviderRegistry
from chaingate.infra.blockchain.evm.utils import parse_native, require_address

logger = logging.getLogger(__name__)

_HEX_DATA = re.compile(r"^0x([0-9a-fA-F]{2})*$")


def recover_sender(signed_transaction: str) -> Optional[str]:
    """Sender of a raw signed transaction, or None when the payload cannot be decoded."""
    try:
        return Account.recover_transaction(signed_transaction)
    except Exception:
        logger.debug("Could not recover sender from signed payload", exc_info=True)
        return None


class TransactionService:
    def __init__(
        self,
        session: AsyncSession,
        providers: ProviderRegistry,
        watcher: "ConfirmationWatcher | None" = None,
    ) -> None:
        self._session = session
        self._repo = TransactionRepo(session)
        self._providers = providers
        self._watcher = watcher

    async def prepare(self, request: PrepareTransactionRequest) -> TransactionView:
        require_address(request.to, "recipient address")
        parse_native(request.value)
        data = request.data or NO_DATA
        if not _HEX_DATA.match(data):
            raise ValidationError(f"Invalid transaction data: {data}")
        if request.gas_limit is not None and not (request.gas_limit.isdigit() and int(request.gas_limit) > 0):
            raise ValidationError(f"Invalid gas limit: {request.gas_limit}")

        record = await self._repo.create(
            TransactionRecord(
                id=uuid.uuid4(),
                chain_id=request.chain_id,
                user_id=request.user_id,
                to_addr=request.to,
                value=request.value,
                data=data,
                gas_limit=request.gas_limit,
                status=TxStatus.PENDING.value,
            )
        )
        await self._session.commit()
        logger.info("Transaction prepared with ID %s", record.id)
        return TransactionView.model_validate(record)

    async def get(self, tx_id: uuid.UUID) -> Optional[TransactionView]:
        record = await self._repo.get_by_id(tx_id)
        return TransactionView.model_validate(record) if record is not None else None

    async def list_for_user(self, user_id: str) -> list[TransactionView]:
        records = await self._repo.list_for_user(user_id)
        return [TransactionView.model_validate(r) for r in records]

    async def approve(self, tx_id: uuid.UUID) -> TransactionView:
        return await self._review(tx_id, TxStatus.APPROVED, "approved")

    async def reject(self, tx_id: uuid.UUID) -> TransactionView:
        return await self._review(tx_id, TxStatus.REJECTED, "rejected")

    async def _review(self, tx_id: uuid.UUID, to_status: TxStatus, action: str) -> TransactionView:
        await self._load(tx_id)
        changed = await self._repo.transition(tx_id, to_status, (TxStatus.PENDING,))
        await self._session.commit()
        if not changed:
            current = await self._load(tx_id)
            raise InvalidStateError(str(tx_id), current.status, action)
        record = await self._load(tx_id)
        logger.info("Transaction %s %s", tx_id, action)
        return TransactionView.model_validate(record)

    async def submit(self, tx_id: uuid.UUID, signed_transaction: str) -> SubmitResult:
        record = await self._load(tx_id)
        if record.status not in {s.value for s in SUBMITTABLE_STATUSES}:
            raise InvalidStateError(str(tx_id), record.status)

        w3 = self._providers.get(record.chain_id)
        sender = recover_sender(signed_transaction)

        try:
            raw_hash = await w3.eth.send_raw_transaction(signed_transaction)
        except Exception as e:
            changed = await self._repo.mark_failed(tx_id)
            await self._session.commit()
            if not changed:
                # A concurrent submit already broadcast this record; its node rejected the duplicate.
                current = await self._load(tx_id)
                logger.warning("Duplicate submit for transaction %s rejected by node: %s", tx_id, e)
                raise InvalidStateError(str(tx_id), current.status) from e
            logger.error("Error submitting transaction %s: %s", tx_id, e)
            raise SubmissionError(f"Failed to submit transaction: {e}") from e

        tx_hash = Web3.to_hex(raw_hash)
        changed = await self._repo.mark_submitted(tx_id, tx_hash, sender)
        await self._session.commit()
        if not changed:
            # Another submit for this record won the conditional update.
            current = await self._load(tx_id)
            raise InvalidStateError(str(tx_id), current.status)

        logger.info("Transaction %s submitted with hash %s", tx_id, tx_hash)
        if self._watcher is not None:
            self._watcher.watch(tx_id, record.chain_id, tx_hash)

        return SubmitResult(id=tx_id, status=TxStatus.SUBMITTED.value, tx_hash=tx_hash)

    async def _load(self, tx_id: uuid.UUID) -> TransactionRecord:
        record = await self._repo.get_by_id(tx_id)
        if record is None:
            raise NotFoundError(f"Transaction with ID {tx_id} not found")
        return record
