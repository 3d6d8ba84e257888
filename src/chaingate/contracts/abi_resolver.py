"""ContractAbiResolver: DB cache in front of the block explorer's ABI endpoint."""

import json
import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from chaingate.db.repos.contract_abi_repo import ContractAbiRepo
from chaingate.domain.enums import AbiSource
from chaingate.exceptions import InvalidFormatError
from chaingate.infra.blockchain.evm.etherscan_client import EtherscanClient

logger = logging.getLogger(__name__)


def parse_abi(abi_json: str, address: str) -> list[dict[str, Any]]:
    try:
        abi = json.loads(abi_json)
    except (json.JSONDecodeError, TypeError) as e:
        logger.error("Error parsing ABI for contract %s: %s", address, e)
        raise InvalidFormatError(f"Invalid ABI format for contract {address}") from e
    if not isinstance(abi, list):
        raise InvalidFormatError(f"Invalid ABI format for contract {address}")
    return abi


class ContractAbiResolver:
    """Cache lookup -> explorer fetch -> cache store.

    Cached entries never expire. A proxy contract upgraded to a new implementation keeps serving
    the old ABI until ``invalidate`` is called for it.
    """

    def __init__(self, session: AsyncSession, explorer: EtherscanClient) -> None:
        self._repo = ContractAbiRepo(session)
        self._explorer = explorer

    async def get_abi(self, chain_id: str, address: str) -> list[dict[str, Any]]:
        cached = await self._repo.get(chain_id, address)
        if cached is not None and cached.abi:
            return cached.abi

        logger.info("ABI cache miss for %s on chain %s, fetching from explorer", address, chain_id)
        abi_json = await self._explorer.get_abi(chain_id, address)
        abi = parse_abi(abi_json, address)
        await self._repo.upsert(chain_id, address, abi, AbiSource.ETHERSCAN)
        return abi

    async def put(
        self, chain_id: str, address: str, abi: list[dict[str, Any]], source: AbiSource = AbiSource.MANUAL
    ) -> None:
        """Store an ABI supplied by an operator, replacing any cached one."""
        await self._repo.upsert(chain_id, address, abi, source)

    async def invalidate(self, chain_id: str, address: str) -> bool:
        removed = await self._repo.delete(chain_id, address)
        if removed:
            logger.info("Invalidated cached ABI for %s on chain %s", address, chain_id)
        return removed
