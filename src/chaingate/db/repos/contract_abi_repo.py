from typing import Any, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from chaingate.db.models.contract_abi import ContractAbi
from chaingate.domain.enums import AbiSource


class ContractAbiRepo:
    """All lookups go through the lowercased address so checksum and plain forms share one row."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, chain_id: str, address: str) -> Optional[ContractAbi]:
        result = await self._session.execute(
            select(ContractAbi).where(
                ContractAbi.chain_id == chain_id,
                ContractAbi.address == address.lower(),
            )
        )
        return result.scalar_one_or_none()

    async def upsert(
        self,
        chain_id: str,
        address: str,
        abi: list[dict[str, Any]],
        source: AbiSource = AbiSource.ETHERSCAN,
    ) -> ContractAbi:
        record = await self.get(chain_id, address)
        if record is None:
            record = ContractAbi(chain_id=chain_id, address=address.lower(), abi=abi, source=source.value)
            self._session.add(record)
        else:
            record.abi = abi
            record.source = source.value
        await self._session.flush()
        return record

    async def delete(self, chain_id: str, address: str) -> bool:
        result = await self._session.execute(
            delete(ContractAbi).where(
                ContractAbi.chain_id == chain_id,
                ContractAbi.address == address.lower(),
            )
        )
        await self._session.flush()
        return result.rowcount > 0
