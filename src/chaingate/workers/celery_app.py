from celery import Celery

from chaingate.config import settings

celery_app = Celery(
    "chaingate",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["chaingate.workers.tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    beat_schedule={
        "reconcile-submitted": {
            "task": "reconcile_submitted",
            "schedule": settings.reconcile_interval,
        },
    },
)
