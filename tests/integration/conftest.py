from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from chaingate.api.deps import get_db, get_etherscan, get_providers, get_settings, get_watcher
from chaingate.api.main import app
from chaingate.chains.registry import ChainRegistry
from chaingate.config import Settings


@pytest.fixture()
async def api(session_factory):
    """API client over a seeded in-memory database, with RPC, explorer and watcher mocked."""
    async with session_factory() as session:
        await ChainRegistry(session, "test-key").initialize()
        await session.commit()

    w3 = MagicMock()
    providers = MagicMock()
    providers.get.return_value = w3
    explorer = AsyncMock()
    watcher = MagicMock()
    settings = Settings(web_dapp_url="http://ui.test/", default_user_id="system")

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_providers] = lambda: providers
    app.dependency_overrides[get_etherscan] = lambda: explorer
    app.dependency_overrides[get_watcher] = lambda: watcher
    app.dependency_overrides[get_settings] = lambda: settings
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield SimpleNamespace(
            client=ac, factory=session_factory, w3=w3, providers=providers,
            explorer=explorer, watcher=watcher, settings=settings,
        )
    app.dependency_overrides.clear()


@pytest.fixture()
async def auth(api):
    """Registers a user and returns bearer headers for it."""
    res = await api.client.post("/api/v1/auth/apikey", json={"name": "alice"})
    return {"Authorization": f"Bearer {res.json()['apiKey']}"}
