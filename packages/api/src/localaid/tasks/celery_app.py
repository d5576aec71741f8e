# This project was developed with assistance from AI tools.
"""Celery application.

Broker and result backend both live in Postgres (kombu's SQLAlchemy
transport and Celery's database backend), so no extra infrastructure is
needed beyond the application database.

Run a worker with::

    celery -A localaid.tasks.celery_app worker --loglevel=info
"""

import logging

from celery import Celery

from ..core.config import settings

logger = logging.getLogger(__name__)

celery_app = Celery(
    "localaid",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["localaid.tasks.registration"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="Australia/Sydney",
    enable_utc=True,
    task_track_started=True,
    task_acks_late=True,
    task_time_limit=5 * 60,
    result_expires=settings.REGISTRATION_EXPIRE_SECONDS,
    result_extended=True,
    worker_prefetch_multiplier=1,
    task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,
)

logger.debug("Celery configured with broker %s", settings.CELERY_BROKER_URL.split("@")[-1])
