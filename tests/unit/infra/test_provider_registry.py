from unittest.mock import AsyncMock, MagicMock

import pytest

from chaingate.exceptions import ChainConnectionError, ConfigurationError
from chaingate.infra.blockchain.evm.provider_registry import ProviderRegistry, build_rpc_url


@pytest.fixture()
def factory():
    return MagicMock(side_effect=lambda url, timeout: MagicMock(name=url))


class TestBuildRpcUrl:
    def test_known_chains(self):
        assert build_rpc_url("1", "k") == "https://mainnet.infura.io/v3/k"
        assert build_rpc_url("11155111", "k") == "https://sepolia.infura.io/v3/k"
        assert build_rpc_url("137", "k") == "https://polygon-mainnet.infura.io/v3/k"
        assert build_rpc_url("80001", "k") == "https://polygon-mumbai.infura.io/v3/k"


class TestGet:
    def test_creates_handle_once_per_chain(self, factory):
        registry = ProviderRegistry("key", web3_factory=factory)

        first = registry.get("1")
        second = registry.get("1")

        assert first is second
        factory.assert_called_once_with("https://mainnet.infura.io/v3/key", 30.0)
        assert "1" in registry
        assert len(registry) == 1

    def test_separate_handles_per_chain(self, factory):
        registry = ProviderRegistry("key", web3_factory=factory)
        assert registry.get("1") is not registry.get("137")
        assert len(registry) == 2

    def test_unknown_chain(self, factory):
        registry = ProviderRegistry("key", web3_factory=factory)
        with pytest.raises(ConfigurationError, match="No RPC URL configured for chain ID 999"):
            registry.get("999")
        factory.assert_not_called()

    def test_missing_api_key(self, factory):
        registry = ProviderRegistry("", web3_factory=factory)
        with pytest.raises(ConfigurationError, match="INFURA_API_KEY"):
            registry.get("1")
        assert len(registry) == 0

    def test_factory_failure_is_connection_error(self):
        registry = ProviderRegistry("key", web3_factory=MagicMock(side_effect=ValueError("bad url")))
        with pytest.raises(ChainConnectionError, match="bad url"):
            registry.get("1")
        assert "1" not in registry

    def test_default_factory_builds_async_web3(self):
        from web3 import AsyncWeb3

        w3 = ProviderRegistry("key", request_timeout=5.0).get("11155111")
        assert isinstance(w3, AsyncWeb3)


class TestCloseAll:
    async def test_disconnects_and_clears(self):
        handles = []

        def make(url, timeout):
            w3 = MagicMock()
            w3.provider.disconnect = AsyncMock()
            handles.append(w3)
            return w3

        registry = ProviderRegistry("key", web3_factory=make)
        registry.get("1")
        registry.get("137")

        await registry.close_all()

        assert len(registry) == 0
        for w3 in handles:
            w3.provider.disconnect.assert_awaited_once()

    async def test_disconnect_error_does_not_stop_others(self):
        bad = MagicMock()
        bad.provider.disconnect = AsyncMock(side_effect=RuntimeError("boom"))
        good = MagicMock()
        good.provider.disconnect = AsyncMock()
        handles = iter([bad, good])

        registry = ProviderRegistry("key", web3_factory=lambda url, timeout: next(handles))
        registry.get("1")
        registry.get("137")

        await registry.close_all()

        good.provider.disconnect.assert_awaited_once()
        assert len(registry) == 0
