from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from chaingate.db.models.chain import Chain


class ChainRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def count(self) -> int:
        result = await self._session.execute(select(func.count()).select_from(Chain))
        return result.scalar_one()

    async def list_active(self) -> list[Chain]:
        result = await self._session.execute(select(Chain).where(Chain.is_active.is_(True)))
        return list(result.scalars().all())

    async def get_by_id(self, chain_id: str) -> Optional[Chain]:
        result = await self._session.execute(select(Chain).where(Chain.id == chain_id))
        return result.scalar_one_or_none()

    async def bulk_insert(self, chains: list[Chain]) -> None:
        self._session.add_all(chains)
        await self._session.flush()
