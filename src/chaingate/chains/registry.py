"""ChainRegistry: configured networks, seeded with well-known defaults on first run."""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from chaingate.db.models.chain import Chain
from chaingate.db.repos.chain_repo import ChainRepo
from chaingate.domain.enums import ChainId
from chaingate.infra.blockchain.evm.provider_registry import build_rpc_url

logger = logging.getLogger(__name__)

DEFAULT_CHAINS: list[dict] = [
    {
        "id": ChainId.ETHEREUM.value,
        "name": "Ethereum Mainnet",
        "currency": "ETH",
        "explorer_url": "https://etherscan.io",
        "is_testnet": False,
    },
    {
        "id": ChainId.SEPOLIA.value,
        "name": "Sepolia Testnet",
        "currency": "ETH",
        "explorer_url": "https://sepolia.etherscan.io",
        "is_testnet": True,
    },
    {
        "id": ChainId.POLYGON.value,
        "name": "Polygon Mainnet",
        "currency": "MATIC",
        "explorer_url": "https://polygonscan.com",
        "is_testnet": False,
    },
    {
        "id": ChainId.POLYGON_MUMBAI.value,
        "name": "Polygon Mumbai",
        "currency": "MATIC",
        "explorer_url": "https://mumbai.polygonscan.com",
        "is_testnet": True,
    },
]


class ChainRegistry:
    def __init__(self, session: AsyncSession, infura_api_key: str = "") -> None:
        self._repo = ChainRepo(session)
        self._infura_api_key = infura_api_key

    async def initialize(self) -> int:
        """Seed the default chains if the table is empty. Returns how many rows were inserted.

        Emptiness is checked, not per-row existence: two processes seeding a cold database at
        the same time can both see it empty, and the second insert fails on the primary key.
        """
        existing = await self._repo.count()
        if existing > 0:
            logger.info("Chains table already contains %d chains", existing)
            return 0

        logger.info("Initializing chains table with default chains")
        chains = [
            Chain(**spec, rpc_url=build_rpc_url(spec["id"], self._infura_api_key), is_active=True)
            for spec in DEFAULT_CHAINS
        ]
        await self._repo.bulk_insert(chains)
        logger.info("Chains initialized successfully")
        return len(chains)

    async def list_active(self) -> list[Chain]:
        """Active chains only."""
        return await self._repo.list_active()

    async def get_by_id(self, chain_id: str) -> Optional[Chain]:
        return await self._repo.get_by_id(chain_id)
