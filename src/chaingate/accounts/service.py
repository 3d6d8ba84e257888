"""AccountService: native balance lookups."""

import logging

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from web3 import Web3

from chaingate.chains.registry import ChainRegistry
from chaingate.exceptions import NotFoundError
from chaingate.infra.blockchain.evm.provider_registry import ProviderRegistry
from chaingate.infra.blockchain.evm.utils import format_native, require_address

logger = logging.getLogger(__name__)


class BalanceInfo(BaseModel):
    address: str
    balance: str  # Display units, exact decimal string
    currency: str


class AccountService:
    def __init__(self, session: AsyncSession, providers: ProviderRegistry) -> None:
        self._chains = ChainRegistry(session)
        self._providers = providers

    async def get_balance(self, chain_id: str, address: str) -> BalanceInfo:
        require_address(address)

        chain = await self._chains.get_by_id(chain_id)
        if chain is None:
            raise NotFoundError(f"Chain with ID {chain_id} not found")

        w3 = self._providers.get(chain_id)
        balance_wei = await w3.eth.get_balance(Web3.to_checksum_address(address))
        logger.debug("Balance of %s on chain %s: %d wei", address, chain_id, balance_wei)

        return BalanceInfo(address=address, balance=format_native(balance_wei), currency=chain.currency)
