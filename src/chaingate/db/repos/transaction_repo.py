import uuid
from typing import Iterable, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from chaingate.db.models.transaction import TransactionRecord
from chaingate.domain.enums import SUBMITTABLE_STATUSES, TxStatus


class TransactionRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, record: TransactionRecord) -> TransactionRecord:
        self._session.add(record)
        await self._session.flush()
        await self._session.refresh(record)
        return record

    async def get_by_id(self, tx_id: uuid.UUID) -> Optional[TransactionRecord]:
        result = await self._session.execute(
            select(TransactionRecord)
            .where(TransactionRecord.id == tx_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: str) -> list[TransactionRecord]:
        """Newest first."""
        result = await self._session.execute(
            select(TransactionRecord)
            .where(TransactionRecord.user_id == user_id)
            .order_by(TransactionRecord.created_at.desc(), TransactionRecord.id.desc())
        )
        return list(result.scalars().all())

    async def list_by_status(self, status: TxStatus) -> list[TransactionRecord]:
        result = await self._session.execute(
            select(TransactionRecord)
            .where(TransactionRecord.status == status.value)
            .order_by(TransactionRecord.created_at.asc())
        )
        return list(result.scalars().all())

    async def transition(
        self,
        tx_id: uuid.UUID,
        to_status: TxStatus,
        from_statuses: Iterable[TxStatus] | None = None,
        **fields: object,
    ) -> bool:
        """Set status (and extra columns) in one conditional UPDATE.

        When ``from_statuses`` is given the row only changes if its current status is one of them,
        so two callers racing on the same record cannot both win. Returns whether the row changed.
        """
        stmt = (
            update(TransactionRecord)
            .where(TransactionRecord.id == tx_id)
            .values(status=to_status.value, updated_at=func.now(), **fields)
            .execution_options(synchronize_session=False)
        )
        if from_statuses is not None:
            stmt = stmt.where(TransactionRecord.status.in_([s.value for s in from_statuses]))
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount == 1

    async def mark_submitted(self, tx_id: uuid.UUID, tx_hash: str, from_addr: Optional[str] = None) -> bool:
        """PENDING/APPROVED -> SUBMITTED, atomically."""
        fields: dict[str, object] = {"tx_hash": tx_hash}
        if from_addr is not None:
            fields["from_addr"] = from_addr
        return await self.transition(tx_id, TxStatus.SUBMITTED, SUBMITTABLE_STATUSES, **fields)

    async def mark_failed(self, tx_id: uuid.UUID) -> bool:
        """PENDING/APPROVED -> FAILED after a rejected broadcast. Rows already moved on are left alone."""
        return await self.transition(tx_id, TxStatus.FAILED, SUBMITTABLE_STATUSES)
