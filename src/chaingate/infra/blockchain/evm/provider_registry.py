"""Per-chain AsyncWeb3 handles, created lazily and owned by the application container."""

import logging
from typing import Callable

from web3 import AsyncWeb3
from web3.providers import AsyncHTTPProvider

from chaingate.domain.enums import ChainId
from chaingate.exceptions import ChainConnectionError, ConfigurationError

logger = logging.getLogger(__name__)

# Built-in endpoints. Chains present only in the registry table are not reachable until added here.
RPC_ENDPOINTS: dict[str, str] = {
    ChainId.ETHEREUM.value: "https://mainnet.infura.io/v3/{api_key}",
    ChainId.SEPOLIA.value: "https://sepolia.infura.io/v3/{api_key}",
    ChainId.POLYGON.value: "https://polygon-mainnet.infura.io/v3/{api_key}",
    ChainId.POLYGON_MUMBAI.value: "https://polygon-mumbai.infura.io/v3/{api_key}",
}


def build_rpc_url(chain_id: str, api_key: str) -> str:
    """Infura URL for a well-known chain. Also used to seed the chain registry."""
    return RPC_ENDPOINTS[chain_id].format(api_key=api_key)


def _make_async_web3(rpc_url: str, timeout: float) -> AsyncWeb3:
    return AsyncWeb3(AsyncHTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))


class ProviderRegistry:
    """Map of chain id -> AsyncWeb3. At most one handle per chain id is cached.

    Concurrent first calls for the same chain may both build a handle; the last one wins,
    which is harmless because handles are stateless HTTP clients.
    """

    def __init__(
        self,
        infura_api_key: str,
        request_timeout: float = 30.0,
        web3_factory: Callable[[str, float], AsyncWeb3] = _make_async_web3,
    ) -> None:
        self._api_key = infura_api_key
        self._timeout = request_timeout
        self._factory = web3_factory
        self._providers: dict[str, AsyncWeb3] = {}

    def __contains__(self, chain_id: str) -> bool:
        return chain_id in self._providers

    def __len__(self) -> int:
        return len(self._providers)

    def resolve_endpoint(self, chain_id: str) -> str:
        if chain_id not in RPC_ENDPOINTS:
            raise ConfigurationError(f"No RPC URL configured for chain ID {chain_id}")
        if not self._api_key:
            raise ConfigurationError("INFURA_API_KEY environment variable is required")
        return build_rpc_url(chain_id, self._api_key)

    def get(self, chain_id: str) -> AsyncWeb3:
        cached = self._providers.get(chain_id)
        if cached is not None:
            return cached

        rpc_url = self.resolve_endpoint(chain_id)
        try:
            w3 = self._factory(rpc_url, self._timeout)
        except Exception as e:
            logger.error("Failed to create provider for chain ID %s: %s", chain_id, e)
            raise ChainConnectionError(f"Could not connect to RPC for chain {chain_id}: {e}") from e

        self._providers[chain_id] = w3
        logger.debug("Created provider for chain ID %s", chain_id)
        return w3

    async def close_all(self) -> None:
        """Drop every cached handle. Not safe to run alongside in-flight get() calls."""
        for chain_id in list(self._providers):
            w3 = self._providers.pop(chain_id)
            try:
                await w3.provider.disconnect()
            except Exception:
                logger.warning("Error closing provider for chain %s", chain_id, exc_info=True)
        logger.info("Closed all RPC providers")
