"""ContractReader: read-only contract calls with typed result rendering."""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession
from web3 import Web3

from chaingate.contracts.abi_resolver import ContractAbiResolver
from chaingate.domain.models.contract_values import from_outputs
from chaingate.exceptions import MethodNotFoundError, ValidationError
from chaingate.infra.blockchain.evm.etherscan_client import EtherscanClient
from chaingate.infra.blockchain.evm.provider_registry import ProviderRegistry
from chaingate.infra.blockchain.evm.utils import require_address

logger = logging.getLogger(__name__)


def select_function(abi: list[dict[str, Any]], method: str, arg_count: int) -> dict[str, Any] | None:
    """Pick the callable ABI entry for ``method``, preferring the overload matching the arity."""
    candidates = [e for e in abi if e.get("type", "function") == "function" and e.get("name") == method]
    if not candidates:
        return None
    for entry in candidates:
        if len(entry.get("inputs", [])) == arg_count:
            return entry
    return candidates[0]


def coerce_arg(param: dict[str, Any], value: Any) -> Any:
    """Convert loosely-typed input (query strings, JSON) to what the ABI encoder expects."""
    abi_type: str = param.get("type", "")
    if not isinstance(value, str):
        return value
    text = value.strip()
    if abi_type.startswith(("uint", "int")) and not abi_type.endswith("]"):
        try:
            return int(text, 0)
        except ValueError as e:
            raise ValidationError(f"Invalid {abi_type} argument: {value}") from e
    if abi_type == "bool":
        lowered = text.lower()
        if lowered not in ("true", "false", "1", "0"):
            raise ValidationError(f"Invalid bool argument: {value}")
        return lowered in ("true", "1")
    if abi_type == "address":
        require_address(text, "address argument")
        return Web3.to_checksum_address(text)
    return value


class ContractReader:
    def __init__(self, session: AsyncSession, providers: ProviderRegistry, explorer: EtherscanClient) -> None:
        self._providers = providers
        self._abis = ContractAbiResolver(session, explorer)

    async def read(self, chain_id: str, address: str, method: str, args: list[Any] | None = None) -> Any:
        """Call a view/pure method and return the result as JSON-friendly Python."""
        args = list(args or [])
        require_address(address)

        w3 = self._providers.get(chain_id)
        abi = await self._abis.get_abi(chain_id, address)

        entry = select_function(abi, method, len(args))
        if entry is None:
            raise MethodNotFoundError(method, address)

        inputs = entry.get("inputs", [])
        if len(inputs) != len(args):
            raise ValidationError(f"Method {method} expects {len(inputs)} arguments, got {len(args)}")
        call_args = [coerce_arg(param, value) for param, value in zip(inputs, args)]

        contract = w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)
        raw = await contract.functions[method](*call_args).call()
        logger.debug("Read %s.%s on chain %s", address, method, chain_id)

        return from_outputs(entry.get("outputs", []), raw).render()
