# This project was developed with assistance from AI tools.
"""Worker registration job.

The HTTP endpoint enqueues the validated payload; this task creates the
account. Business-rule failures (duplicate email, missing fields) are
returned as the job result. Unexpected errors are retried with exponential
backoff up to the configured limit.
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from ..core.config import settings
from ..services.registration import process_worker_registration
from .celery_app import celery_app

logger = logging.getLogger(__name__)

WORKER_REGISTRATION = "worker-registration"


@asynccontextmanager
async def _task_session():
    # Each task runs in a fresh event loop, so pooled connections cannot be reused
    engine = create_async_engine(settings.DATABASE_URL, poolclass=NullPool)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    try:
        async with factory() as session:
            yield session
    finally:
        await engine.dispose()


async def _register(payload: dict) -> dict:
    async with _task_session() as session:
        return await process_worker_registration(session, payload)


@celery_app.task(
    bind=True,
    name=WORKER_REGISTRATION,
    max_retries=settings.REGISTRATION_RETRY_LIMIT,
    default_retry_delay=settings.REGISTRATION_RETRY_DELAY,
)
def process_worker_registration_task(self, payload: dict) -> dict:
    email = payload.get("email")
    try:
        result = asyncio.run(_register(payload))
    except Exception as exc:
        countdown = settings.REGISTRATION_RETRY_DELAY * (2 ** self.request.retries)
        logger.exception(
            "Worker registration for %s failed (attempt %d), retrying in %ds",
            email,
            self.request.retries + 1,
            countdown,
        )
        raise self.retry(exc=exc, countdown=countdown) from exc

    if result.get("success"):
        logger.info("Registration job %s created user %s", self.request.id, result["user_id"])
    else:
        logger.info("Registration job %s rejected: %s", self.request.id, result.get("error"))
    return result
