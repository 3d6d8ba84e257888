"""Startup steps shared by the HTTP API and the tool server."""

from chaingate.chains.registry import ChainRegistry
from chaingate.container import Container
from chaingate.db.session import session_scope


async def startup(container: Container) -> None:
    """Seed the chain registry and resume confirmation watches left over from a previous run."""
    settings = container.settings()
    async with session_scope(container.session_factory()) as session:
        await ChainRegistry(session, settings.infura_api_key).initialize()

    if settings.resume_watches_on_startup:
        await container.watcher().resume_pending()
