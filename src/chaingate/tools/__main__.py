"""Run the tool server over stdio: ``python -m chaingate.tools`` or ``chaingate-mcp``."""

import asyncio
import logging

from mcp.server.stdio import stdio_server

from chaingate.bootstrap import startup
from chaingate.config import configure_logging, settings
from chaingate.container import Container, shutdown_container
from chaingate.tools.server import create_server

logger = logging.getLogger("chaingate.tools")


async def serve() -> None:
    container = Container()
    await startup(container)
    server = create_server(container)
    logger.info("Tool server started on stdio transport")
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        logger.info("Shutting down...")
        await shutdown_container(container)
        logger.info("Graceful shutdown complete")


def main() -> None:
    configure_logging(settings.log_level)
    asyncio.run(serve())


if __name__ == "__main__":
    main()
