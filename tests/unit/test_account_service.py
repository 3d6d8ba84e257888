from unittest.mock import AsyncMock, MagicMock

import pytest

from chaingate.accounts.service import AccountService
from chaingate.exceptions import ConfigurationError, NotFoundError, ValidationError

HOLDER = "0x742d35Cc6634C0532925a3b844Bc454e4438f44e"


def _providers(balance_wei: int) -> MagicMock:
    w3 = MagicMock()
    w3.eth.get_balance = AsyncMock(return_value=balance_wei)
    providers = MagicMock()
    providers.get.return_value = w3
    return providers


class TestGetBalance:
    async def test_formats_in_display_units(self, seeded):
        providers = _providers(1_500_000_000_000_000_000)
        info = await AccountService(seeded, providers).get_balance("1", HOLDER.lower())

        assert info.balance == "1.5"
        assert info.currency == "ETH"
        assert info.address == HOLDER.lower()
        providers.get.return_value.eth.get_balance.assert_awaited_once_with(HOLDER)

    async def test_zero_balance(self, seeded):
        info = await AccountService(seeded, _providers(0)).get_balance("137", HOLDER)
        assert info.balance == "0.0"
        assert info.currency == "MATIC"

    async def test_invalid_address(self, seeded):
        providers = _providers(0)
        with pytest.raises(ValidationError):
            await AccountService(seeded, providers).get_balance("1", "0x123")
        providers.get.assert_not_called()

    async def test_unknown_chain(self, seeded):
        with pytest.raises(NotFoundError, match="Chain with ID 999 not found"):
            await AccountService(seeded, _providers(0)).get_balance("999", HOLDER)

    async def test_missing_provider_credential(self, seeded):
        providers = MagicMock()
        providers.get.side_effect = ConfigurationError("INFURA_API_KEY environment variable is required")
        with pytest.raises(ConfigurationError):
            await AccountService(seeded, providers).get_balance("1", HOLDER)
