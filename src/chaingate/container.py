from dependency_injector import containers, providers

from chaingate.config import Settings
from chaingate.db.session import build_engine, build_session_factory
from chaingate.infra.blockchain.evm.etherscan_client import EtherscanClient
from chaingate.infra.blockchain.evm.provider_registry import ProviderRegistry
from chaingate.infra.http.rate_limited_client import RateLimitedClient
from chaingate.transactions.watcher import ConfirmationWatcher


class Container(containers.DeclarativeContainer):
    """Application context. Owns every process-wide handle: engine, RPC providers, explorer client, watcher."""

    wiring_config = containers.WiringConfiguration(modules=["chaingate.api.deps"])

    settings = providers.Singleton(Settings)

    engine = providers.Singleton(
        build_engine,
        database_url=settings.provided.database_url,
        echo=settings.provided.debug,
    )

    session_factory = providers.Singleton(
        build_session_factory,
        engine=engine,
    )

    provider_registry = providers.Singleton(
        ProviderRegistry,
        infura_api_key=settings.provided.infura_api_key,
    )

    explorer_http = providers.Singleton(
        RateLimitedClient,
        rate_per_second=settings.provided.explorer_rate_per_second,
        timeout=settings.provided.explorer_timeout,
    )

    etherscan = providers.Singleton(
        EtherscanClient,
        api_key=settings.provided.etherscan_api_key,
        http_client=explorer_http,
    )

    watcher = providers.Singleton(
        ConfirmationWatcher,
        session_factory=session_factory,
        providers=provider_registry,
        receipt_timeout=settings.provided.receipt_timeout,
        poll_interval=settings.provided.receipt_poll_interval,
    )


async def shutdown_container(container: Container) -> None:
    """Release everything the container opened, in reverse dependency order."""
    await container.watcher().shutdown()
    await container.provider_registry().close_all()
    await container.explorer_http().close()
    await container.engine().dispose()
