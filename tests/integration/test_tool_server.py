import json
import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from dependency_injector import providers

from chaingate.bootstrap import startup
from chaingate.config import Settings
from chaingate.container import Container
from chaingate.tools.server import TOOLS, ChainTools, create_server

RECIPIENT = "0x742d35Cc6634C0532925a3b844Bc454e4438f44e"
USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"


@pytest.fixture()
def w3():
    mock = MagicMock()
    mock.eth.get_balance = AsyncMock(return_value=10**18)
    return mock


@pytest.fixture()
def explorer():
    return AsyncMock()


@pytest.fixture()
async def tools(session_factory, w3, explorer):
    registry = MagicMock()
    registry.get.return_value = w3

    container = Container()
    settings = Settings(web_dapp_url="http://ui.test", infura_api_key="k", resume_watches_on_startup=False)
    container.settings.override(providers.Object(settings))
    container.session_factory.override(providers.Object(session_factory))
    container.provider_registry.override(providers.Object(registry))
    container.etherscan.override(providers.Object(explorer))
    container.watcher.override(providers.Object(MagicMock()))

    await startup(container)
    yield ChainTools(container)
    container.unwire()


def _text(result) -> str:
    return result.content[0].text


class TestToolList:
    def test_names(self):
        assert [t.name for t in TOOLS] == [
            "get-chains", "get-balance", "read-contract", "prepare-transaction", "get-transaction-status",
        ]

    def test_status_tool_takes_uuid(self):
        status_tool = next(t for t in TOOLS if t.name == "get-transaction-status")
        assert status_tool.inputSchema["required"] == ["uuid"]

    async def test_server_builds(self, tools):
        assert create_server(tools._container).name == "chaingate"


class TestGetChains:
    async def test_lists_seeded_chains(self, tools):
        result = await tools.dispatch("get-chains", {})
        assert not result.isError
        chains = json.loads(_text(result))
        assert {c["id"] for c in chains} == {"1", "11155111", "137", "80001"}


class TestGetBalance:
    async def test_balance(self, tools):
        result = await tools.dispatch("get-balance", {"chainId": "1", "address": RECIPIENT})
        assert json.loads(_text(result)) == {"address": RECIPIENT, "balance": "1.0", "currency": "ETH"}

    async def test_invalid_address_is_error_payload(self, tools):
        result = await tools.dispatch("get-balance", {"chainId": "1", "address": "0x123"})
        assert result.isError
        assert _text(result).startswith("Error fetching balance: Invalid address")

    async def test_unexpected_errors_are_contained(self, tools, w3):
        w3.eth.get_balance.side_effect = RuntimeError("socket closed")
        result = await tools.dispatch("get-balance", {"chainId": "1", "address": RECIPIENT})
        assert result.isError
        assert "socket closed" in _text(result)


class TestReadContract:
    async def test_read(self, tools, w3, explorer):
        explorer.get_abi.return_value = json.dumps([
            {"type": "function", "name": "symbol", "inputs": [], "outputs": [{"name": "", "type": "string"}]},
        ])
        call = MagicMock()
        call.call = AsyncMock(return_value="USDC")
        w3.eth.contract.return_value.functions.__getitem__.return_value = MagicMock(return_value=call)

        result = await tools.dispatch("read-contract", {"chainId": "1", "address": USDC, "method": "symbol"})

        assert not result.isError
        assert json.loads(_text(result)) == "USDC"


class TestPrepareAndStatus:
    async def test_prepare_then_status(self, tools):
        result = await tools.dispatch("prepare-transaction", {"chainId": "1", "to": RECIPIENT, "value": "0.5"})
        assert not result.isError
        text = _text(result)
        tx_id = text.split("Transaction ID: ")[1].split("\n")[0]
        assert f"Transaction URL: http://ui.test/tx/{tx_id}" in text

        status = await tools.dispatch("get-transaction-status", {"uuid": tx_id})
        payload = json.loads(_text(status))
        assert payload["status"] == "PENDING"
        assert payload["userId"] == "system"
        assert payload["data"] == "0x"
        assert payload["value"] == "0.5"

    async def test_prepare_unknown_chain(self, tools):
        result = await tools.dispatch("prepare-transaction", {"chainId": "999", "to": RECIPIENT})
        assert result.isError
        assert _text(result) == "Chain with ID 999 not found."

    async def test_status_not_found(self, tools):
        missing = str(uuid.uuid4())
        result = await tools.dispatch("get-transaction-status", {"uuid": missing})
        assert result.isError
        assert _text(result) == f"Transaction with UUID {missing} not found."

    async def test_status_bad_uuid(self, tools):
        result = await tools.dispatch("get-transaction-status", {"uuid": "abc"})
        assert result.isError


class TestUnknownTool:
    async def test_unknown(self, tools):
        result = await tools.dispatch("send-everything", {})
        assert result.isError
        assert _text(result) == "Unknown tool: send-everything"
