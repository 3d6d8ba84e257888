"""Etherscan v2 unified API client, used to fetch verified contract ABIs."""

import logging

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from chaingate.domain.enums import ChainId
from chaingate.exceptions import AbiUnavailableError, ExternalServiceError, UnsupportedChainError
from chaingate.infra.http.rate_limited_client import RateLimitedClient

logger = logging.getLogger(__name__)

# Etherscan v2 uses a single base URL + chainid param
BASE_URL = "https://api.etherscan.io/v2/api"

EXPLORER_CHAIN_IDS: dict[str, int] = {
    ChainId.ETHEREUM.value: 1,
    ChainId.SEPOLIA.value: 11155111,
    ChainId.POLYGON.value: 137,
    ChainId.POLYGON_MUMBAI.value: 80001,
}

RATE_LIMIT_MARKERS = ("rate limit", "max calls per sec")


class EtherscanClient:
    def __init__(self, api_key: str, http_client: RateLimitedClient) -> None:
        self._api_key = api_key
        self._http = http_client

    @staticmethod
    def supports(chain_id: str) -> bool:
        return chain_id in EXPLORER_CHAIN_IDS

    @retry(
        retry=retry_if_exception_type(ExternalServiceError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def get_abi(self, chain_id: str, address: str) -> str:
        """Return the raw ABI JSON string for a verified contract."""
        if chain_id not in EXPLORER_CHAIN_IDS:
            logger.warning("No explorer API configured for chain ID %s", chain_id)
            raise UnsupportedChainError(chain_id)

        params = {
            "module": "contract",
            "action": "getabi",
            "address": address,
            "apikey": self._api_key,
            "chainid": EXPLORER_CHAIN_IDS[chain_id],
        }
        data = await self._http.get_json(BASE_URL, params=params)

        status = data.get("status")
        message = data.get("message", "")
        result = data.get("result")

        if status == "1" and isinstance(result, str) and result:
            return result

        detail = result if isinstance(result, str) else message
        if status is None or any(marker in str(detail).lower() for marker in RATE_LIMIT_MARKERS):
            raise ExternalServiceError(f"Etherscan error: {detail}")

        logger.warning("Could not fetch ABI for %s on chain %s: %s", address, chain_id, detail or "Unknown error")
        raise AbiUnavailableError(f"Could not fetch ABI for contract {address} on chain {chain_id}: {detail}")
