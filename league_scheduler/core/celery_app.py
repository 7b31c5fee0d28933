"""
Celery configuration for async task processing.
"""

from celery import Celery

from league_scheduler.core.config import DEFAULT_TIMEZONE, REDIS_URL

# Create Celery app
celery_app = Celery(
    "league_scheduler",
    broker=REDIS_URL,
    backend=REDIS_URL,
    include=["league_scheduler.tasks.scheduler_tasks"]
)

# Celery configuration
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone=DEFAULT_TIMEZONE,
    enable_utc=True,
    task_track_started=True,
    task_time_limit=120,
    task_soft_time_limit=90,
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=200,
)
