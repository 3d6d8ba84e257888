"""Tool-calling server: blockchain reads and transaction preparation for an agent.

Every tool answers with text content. Failures come back as text with ``isError`` set,
never as a protocol fault, so the calling agent always gets a response.
"""

import json
import logging
import uuid
from typing import Any, Awaitable, Callable

from mcp.server import Server
from mcp.types import CallToolResult, TextContent, Tool

from chaingate.accounts.service import AccountService
from chaingate.chains.registry import ChainRegistry
from chaingate.container import Container
from chaingate.contracts.reader import ContractReader
from chaingate.db.session import session_scope
from chaingate.domain.models.chain import ChainView
from chaingate.domain.models.transaction import PrepareTransactionRequest
from chaingate.exceptions import ChainGateError
from chaingate.transactions.service import TransactionService

logger = logging.getLogger(__name__)

SERVER_NAME = "chaingate"

CHAIN_ID_SCHEMA = {"type": "string", "description": "Chain ID (e.g., '1' for Ethereum Mainnet)"}

TOOLS: list[Tool] = [
    Tool(
        name="get-chains",
        description="Get list of supported blockchain networks",
        inputSchema={"type": "object", "properties": {}},
    ),
    Tool(
        name="get-balance",
        description="Get account balance for an address on a specific chain",
        inputSchema={
            "type": "object",
            "properties": {
                "chainId": CHAIN_ID_SCHEMA,
                "address": {"type": "string", "description": "Wallet address to check balance for"},
            },
            "required": ["chainId", "address"],
        },
    ),
    Tool(
        name="read-contract",
        description="Read data from a smart contract",
        inputSchema={
            "type": "object",
            "properties": {
                "chainId": CHAIN_ID_SCHEMA,
                "address": {"type": "string", "description": "Contract address"},
                "method": {"type": "string", "description": "Contract method to call"},
                "args": {"type": "array", "items": {}, "description": "Arguments for the contract method (optional)"},
            },
            "required": ["chainId", "address", "method"],
        },
    ),
    Tool(
        name="prepare-transaction",
        description="Prepare an unsigned transaction for user approval",
        inputSchema={
            "type": "object",
            "properties": {
                "chainId": CHAIN_ID_SCHEMA,
                "to": {"type": "string", "description": "Recipient address"},
                "value": {"type": "string", "description": "Amount to send in ETH/native token (optional)"},
                "data": {"type": "string", "description": "Transaction data for contract interactions (optional)"},
                "gasLimit": {"type": "string", "description": "Gas limit for the transaction (optional)"},
            },
            "required": ["chainId", "to"],
        },
    ),
    Tool(
        name="get-transaction-status",
        description="Get the current status of a transaction",
        inputSchema={
            "type": "object",
            "properties": {"uuid": {"type": "string", "description": "Transaction UUID"}},
            "required": ["uuid"],
        },
    ),
]


def as_json(payload: Any) -> str:
    return json.dumps(payload, indent=2, default=str)


def ok(text: str) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)])


def error(message: str) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=message)], isError=True)


class ChainTools:
    """Tool implementations. Each call runs in its own database session."""

    def __init__(self, container: Container) -> None:
        self._container = container
        self._handlers: dict[str, tuple[Callable[[dict[str, Any]], Awaitable[CallToolResult]], str]] = {
            "get-chains": (self.get_chains, "Error fetching chains"),
            "get-balance": (self.get_balance, "Error fetching balance"),
            "read-contract": (self.read_contract, "Error reading contract"),
            "prepare-transaction": (self.prepare_transaction, "Error preparing transaction"),
            "get-transaction-status": (self.get_transaction_status, "Error fetching transaction"),
        }

    async def dispatch(self, name: str, arguments: dict[str, Any]) -> CallToolResult:
        if name not in self._handlers:
            return error(f"Unknown tool: {name}")
        handler, error_prefix = self._handlers[name]
        try:
            return await handler(arguments)
        except ChainGateError as e:
            logger.error("Error in %s tool: %s", name, e)
            return error(f"{error_prefix}: {e}")
        except Exception as e:
            logger.exception("Unexpected error in %s tool", name)
            return error(f"{error_prefix}: {e}")

    async def get_chains(self, arguments: dict[str, Any]) -> CallToolResult:
        async with session_scope(self._container.session_factory()) as session:
            chains = await ChainRegistry(session).list_active()
        return ok(as_json([ChainView.model_validate(c).model_dump(by_alias=True) for c in chains]))

    async def get_balance(self, arguments: dict[str, Any]) -> CallToolResult:
        async with session_scope(self._container.session_factory()) as session:
            service = AccountService(session, self._container.provider_registry())
            balance = await service.get_balance(str(arguments["chainId"]), arguments["address"])
        return ok(as_json(balance.model_dump()))

    async def read_contract(self, arguments: dict[str, Any]) -> CallToolResult:
        async with session_scope(self._container.session_factory()) as session:
            reader = ContractReader(session, self._container.provider_registry(), self._container.etherscan())
            result = await reader.read(
                str(arguments["chainId"]),
                arguments["address"],
                arguments["method"],
                arguments.get("args") or [],
            )
        return ok(as_json(result))

    async def prepare_transaction(self, arguments: dict[str, Any]) -> CallToolResult:
        chain_id = str(arguments["chainId"])
        settings = self._container.settings()
        async with session_scope(self._container.session_factory()) as session:
            chain = await ChainRegistry(session).get_by_id(chain_id)
            if chain is None:
                return error(f"Chain with ID {chain_id} not found.")

            service = TransactionService(session, self._container.provider_registry(), self._container.watcher())
            transaction = await service.prepare(
                PrepareTransactionRequest(
                    chain_id=chain_id,
                    to=arguments["to"],
                    value=arguments.get("value") or "0",
                    data=arguments.get("data") or None,
                    gas_limit=arguments.get("gasLimit") or None,
                    user_id=settings.default_user_id,
                )
            )

        url = settings.transaction_url(str(transaction.id))
        return ok(
            "Transaction prepared successfully.\n\n"
            f"Transaction ID: {transaction.id}\n"
            f"Transaction URL: {url}\n\n"
            "Please share this URL with the user to review and approve the transaction."
        )

    async def get_transaction_status(self, arguments: dict[str, Any]) -> CallToolResult:
        raw_id = str(arguments["uuid"])
        try:
            tx_id = uuid.UUID(raw_id)
        except ValueError:
            return error(f"Invalid transaction UUID: {raw_id}")

        async with session_scope(self._container.session_factory()) as session:
            service = TransactionService(session, self._container.provider_registry())
            transaction = await service.get(tx_id)
        if transaction is None:
            return error(f"Transaction with UUID {raw_id} not found.")
        return ok(as_json(transaction.model_dump(mode="json", by_alias=True, exclude_none=True)))


def create_server(container: Container) -> Server:
    server: Server = Server(SERVER_NAME)
    tools = ChainTools(container)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return TOOLS

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> CallToolResult:
        return await tools.dispatch(name, arguments or {})

    return server
