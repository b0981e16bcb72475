"""
Celery Application Configuration
Queue-based processing of assessment lifecycle events
"""

from celery import Celery
from kombu import Queue, Exchange

from app.config import get_settings

settings = get_settings()

# Create Celery app
celery_app = Celery(
    "split",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=[
        "app.workers.tasks.visibility_tasks",
    ]
)

# Celery configuration
celery_app.conf.update(
    # Task settings
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Result backend settings
    result_expires=3600,  # 1 hour

    # Task execution settings
    task_acks_late=True,  # Acknowledge after task completion
    task_reject_on_worker_lost=True,
    task_time_limit=120,
    task_soft_time_limit=90,

    # Worker settings
    worker_prefetch_multiplier=1,  # Fair distribution

    # Retry settings
    task_default_retry_delay=15,
    task_max_retries=3,

    # Queue configuration
    task_queues=(
        Queue("default", Exchange("default"), routing_key="default"),
        Queue("visibility", Exchange("visibility"), routing_key="visibility"),
    ),

    task_default_queue="default",
    task_default_exchange="default",
    task_default_routing_key="default",

    task_routes={
        "app.workers.tasks.visibility_tasks.*": {"queue": "visibility"},
    },
)
