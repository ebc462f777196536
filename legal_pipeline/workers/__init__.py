"""
Celery application for the pipeline workers.

Beat triggers the chunk worker, the embed worker and the expired-lease
sweep; every task is also callable on demand.

Dependencies: celery, legal_pipeline.configs
System role: Background task processing
"""

from celery import Celery
from celery.signals import setup_logging

from legal_pipeline.configs import get_settings
from legal_pipeline.configs.celery_config import TASKS_MODULE
from legal_pipeline.observability import configure_logging

celery_config = get_settings().celery

celery_app = Celery(
    "legal_pipeline",
    broker=celery_config.broker_url,
    backend=celery_config.result_backend_url,
    include=[TASKS_MODULE],
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone=celery_config.timezone,
    task_time_limit=celery_config.task_time_limit,
    # A worker invocation holds leases; one prefetched message per process
    worker_prefetch_multiplier=1,
    beat_schedule=celery_config.beat_schedule(),
)


@setup_logging.connect
def _configure_worker_logging(**kwargs) -> None:
    configure_logging(get_settings().log_level)

