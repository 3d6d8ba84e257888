"""Seed the default chains into the registry.

Usage:
    PYTHONPATH=src python scripts/seed_chains.py

Idempotent: a registry that already holds any chain is left untouched.
The API and the tool server run the same seeding on startup; this script is for
preparing a database ahead of the first deploy.
"""

import asyncio
import logging
import sys

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)-5s %(name)s - %(message)s")
logger = logging.getLogger("seed_chains")
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def separator(title: str) -> None:
    print(f"\n{'=' * 60}")
    print(f"  {title}")
    print(f"{'=' * 60}\n")


async def main() -> None:
    from chaingate.chains.registry import ChainRegistry
    from chaingate.config import settings
    from chaingate.db.session import build_engine, build_session_factory

    separator("Seed: Default Chains")
    print(f"Database: {settings.db_host}:{settings.db_port}/{settings.db_name}\n")
    if not settings.infura_api_key:
        logger.warning("INFURA_API_KEY is not set, stored RPC URLs will lack a project key")

    engine = build_engine(settings.database_url, echo=False)
    session_factory = build_session_factory(engine)

    async with session_factory() as session:
        try:
            registry = ChainRegistry(session, settings.infura_api_key)
            inserted = await registry.initialize()
            await session.commit()
            for chain in await registry.list_active():
                testnet = "testnet" if chain.is_testnet else "mainnet"
                print(f"  {chain.id:<10s} {chain.name:<20s} {chain.currency:<6s} {testnet}")
        except Exception:
            await session.rollback()
            logger.exception("Seeding failed")
            sys.exit(1)

    await engine.dispose()
    print(f"\nDone. {inserted} chains inserted.")
    separator("Seeding Complete")


if __name__ == "__main__":
    asyncio.run(main())
