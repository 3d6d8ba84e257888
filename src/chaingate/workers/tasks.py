"""Celery tasks for background processing."""

import asyncio
import logging

from chaingate.workers.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name="reconcile_submitted", max_retries=2, default_retry_delay=30)
def reconcile_submitted_task(self) -> dict:
    """Finalize SUBMITTED transactions whose receipts are already on chain.

    Bridges to async code via asyncio.run(). Each invocation builds its own container,
    so nothing is shared with the API process.
    """
    return asyncio.run(_reconcile_async())


async def _reconcile_async() -> dict:
    from chaingate.container import Container, shutdown_container

    container = Container()
    try:
        counts = await container.watcher().reconcile_once()
        logger.info(
            "Reconciled %d submitted transactions: %d confirmed, %d failed, %d still pending",
            counts["checked"], counts["confirmed"], counts["failed"], counts["pending"],
        )
        return {"status": "ok", **counts}
    except Exception as e:
        logger.exception("Reconciliation pass failed")
        return {"status": "error", "message": str(e)}
    finally:
        await shutdown_container(container)
