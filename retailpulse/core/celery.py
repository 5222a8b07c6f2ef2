"""
Celery configuration for background report generation
"""
from celery import Celery
import logging

from retailpulse.core.config import settings

logger = logging.getLogger(__name__)

redis_url = settings.redis_url

celery_app = Celery(
    "retailpulse",
    broker=redis_url,
    backend=redis_url,
    include=[
        "retailpulse.modules.reports.tasks",
    ]
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=10 * 60,  # 10 minutes
    task_soft_time_limit=8 * 60,  # 8 minutes
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=1000,

    # Result backend settings
    result_expires=3600,  # 1 hour

    task_routes={
        "retailpulse.modules.reports.tasks.*": {"queue": "reports"},
    },
)

if __name__ == "__main__":
    celery_app.start()
