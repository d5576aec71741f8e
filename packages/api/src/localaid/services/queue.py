# This project was developed with assistance from AI tools.
"""Job queue facade over Celery.

Broker calls are blocking, so they run in the default executor to keep the
event loop free (same approach as the storage service).
"""

import asyncio
import logging
from functools import partial

from celery.result import AsyncResult

from ..core.config import settings
from ..tasks.celery_app import celery_app
from ..tasks.registration import process_worker_registration_task

logger = logging.getLogger(__name__)

_STATE_TO_STATUS = {
    "SUCCESS": "completed",
    "FAILURE": "failed",
    "RETRY": "retrying",
}

_STATUS_MESSAGES = {
    "processing": "Your registration is being processed",
    "retrying": "Registration is taking longer than expected, retrying",
    "completed": "Registration completed successfully",
    "failed": "Registration failed",
}


class QueueSendError(Exception):
    """The broker did not accept the job."""


async def queue_worker_registration(payload: dict) -> str:
    """Enqueue a worker registration and return the job id."""
    loop = asyncio.get_running_loop()
    result = await loop.run_in_executor(
        None,
        partial(
            process_worker_registration_task.apply_async,
            args=[payload],
            expires=settings.REGISTRATION_EXPIRE_SECONDS,
            retry=True,
        ),
    )
    job_id = getattr(result, "id", None)
    if not job_id:
        raise QueueSendError("send returned null")
    logger.info("Queued worker registration job %s", job_id)
    return job_id


def map_job_state(state: str | None) -> str:
    return _STATE_TO_STATUS.get(state or "", "processing")


def _result_for(job_id: str) -> AsyncResult:
    return AsyncResult(job_id, app=celery_app)


async def get_job_status(job_id: str) -> dict:
    """Registration job status as shown to the registering worker.

    Unknown ids report ``processing``: the result backend cannot tell a
    missing job from one that has not started.
    """
    loop = asyncio.get_running_loop()
    job = _result_for(job_id)
    state = await loop.run_in_executor(None, lambda: job.state)
    status = map_job_state(state)

    status_info = {"job_id": job_id, "status": status, "user_id": None, "error": None}
    if status == "completed":
        result = await loop.run_in_executor(None, lambda: job.result)
        if isinstance(result, dict) and not result.get("success", False):
            status_info["status"] = "failed"
            status_info["error"] = result.get("error") or "Registration failed"
        elif isinstance(result, dict):
            status_info["user_id"] = result.get("user_id")
    elif status == "failed":
        status_info["error"] = "Registration could not be completed, please try again"

    status_info["message"] = status_info["error"] or _STATUS_MESSAGES[status_info["status"]]
    return status_info


async def cancel_job(job_id: str) -> bool:
    """Revoke a queued registration job. Running jobs finish normally."""
    loop = asyncio.get_running_loop()
    await loop.run_in_executor(None, partial(celery_app.control.revoke, job_id))
    logger.info("Revoked registration job %s", job_id)
    return True


def _count(by_worker: dict | None) -> int:
    if not by_worker:
        return 0
    return sum(len(jobs) for jobs in by_worker.values())


async def get_queue_stats() -> dict:
    """Job counts across live workers. All zero when no worker answers."""
    loop = asyncio.get_running_loop()
    inspector = celery_app.control.inspect(timeout=2.0)
    active, scheduled, reserved = await asyncio.gather(
        loop.run_in_executor(None, inspector.active),
        loop.run_in_executor(None, inspector.scheduled),
        loop.run_in_executor(None, inspector.reserved),
    )
    stats = {
        "active": _count(active),
        "scheduled": _count(scheduled),
        "reserved": _count(reserved),
    }
    if active is None:
        logger.warning("No Celery workers responded to inspect")
    return stats
