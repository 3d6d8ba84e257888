from __future__ import annotations

from typing import Annotated, AsyncGenerator, Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from chaingate.config import Settings
from chaingate.container import Container
from chaingate.db.models.user import User
from chaingate.db.repos.user_repo import UserRepo
from chaingate.infra.blockchain.evm.etherscan_client import EtherscanClient
from chaingate.infra.blockchain.evm.provider_registry import ProviderRegistry
from chaingate.transactions.watcher import ConfirmationWatcher

bearer = HTTPBearer(auto_error=False)


@inject
async def get_db(
    session_factory: async_sessionmaker[AsyncSession] = Depends(Provide[Container.session_factory]),
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@inject
def get_settings(settings: Settings = Depends(Provide[Container.settings])) -> Settings:
    return settings


@inject
def get_providers(registry: ProviderRegistry = Depends(Provide[Container.provider_registry])) -> ProviderRegistry:
    return registry


@inject
def get_etherscan(client: EtherscanClient = Depends(Provide[Container.etherscan])) -> EtherscanClient:
    return client


@inject
def get_watcher(watcher: ConfirmationWatcher = Depends(Provide[Container.watcher])) -> ConfirmationWatcher:
    return watcher


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer)],
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the bearer token (an API key) to an active user."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user = await UserRepo(db).get_by_api_key(credentials.credentials)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


DbDep = Annotated[AsyncSession, Depends(get_db)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
ProvidersDep = Annotated[ProviderRegistry, Depends(get_providers)]
EtherscanDep = Annotated[EtherscanClient, Depends(get_etherscan)]
WatcherDep = Annotated[ConfirmationWatcher, Depends(get_watcher)]
CurrentUserDep = Annotated[User, Depends(get_current_user)]
