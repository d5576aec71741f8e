# This project was developed with assistance from AI tools.
"""Tests for the registration job queue and the Celery task."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from celery.exceptions import Retry

from localaid.core.config import settings
from localaid.services.queue import (
    QueueSendError,
    cancel_job,
    get_job_status,
    get_queue_stats,
    map_job_state,
    queue_worker_registration,
)
from localaid.tasks.registration import WORKER_REGISTRATION, process_worker_registration_task

PAYLOAD = {"email": "priya@example.com", "passwordHash": "$pbkdf2-sha256$x", "firstName": "Priya"}

# ---------------------------------------------------------------------------
# Enqueue
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_queue_returns_job_id():
    with patch.object(
        process_worker_registration_task, "apply_async", return_value=MagicMock(id="job-1")
    ) as send:
        job_id = await queue_worker_registration(PAYLOAD)

    assert job_id == "job-1"
    send.assert_called_once_with(args=[PAYLOAD], expires=settings.REGISTRATION_EXPIRE_SECONDS, retry=True)


@pytest.mark.asyncio
async def test_queue_without_id_raises():
    with patch.object(process_worker_registration_task, "apply_async", return_value=None):
        with pytest.raises(QueueSendError):
            await queue_worker_registration(PAYLOAD)


@pytest.mark.asyncio
async def test_cancel_revokes():
    with patch("localaid.services.queue.celery_app") as app:
        assert await cancel_job("job-1") is True
    app.control.revoke.assert_called_once_with("job-1")


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "state,expected",
    [
        ("PENDING", "processing"),
        ("STARTED", "processing"),
        ("RETRY", "retrying"),
        ("SUCCESS", "completed"),
        ("FAILURE", "failed"),
        (None, "processing"),
    ],
)
def test_map_job_state(state, expected):
    assert map_job_state(state) == expected


@pytest.mark.asyncio
async def test_status_failed_job_has_generic_error():
    with patch("localaid.services.queue._result_for", return_value=MagicMock(state="FAILURE")):
        info = await get_job_status("job-1")

    assert info["status"] == "failed"
    assert info["error"] == "Registration could not be completed, please try again"
    assert info["message"] == info["error"]


@pytest.mark.asyncio
async def test_status_retrying():
    with patch("localaid.services.queue._result_for", return_value=MagicMock(state="RETRY")):
        info = await get_job_status("job-1")

    assert info["status"] == "retrying"
    assert info["user_id"] is None


# ---------------------------------------------------------------------------
# Queue stats
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_queue_stats_counts_jobs_across_workers():
    inspector = MagicMock()
    inspector.active.return_value = {"w1": [{"id": "a"}], "w2": [{"id": "b"}, {"id": "c"}]}
    inspector.scheduled.return_value = {"w1": []}
    inspector.reserved.return_value = {"w1": [{"id": "d"}]}

    with patch("localaid.services.queue.celery_app") as app:
        app.control.inspect.return_value = inspector
        stats = await get_queue_stats()

    assert stats == {"active": 3, "scheduled": 0, "reserved": 1}


@pytest.mark.asyncio
async def test_queue_stats_without_workers():
    inspector = MagicMock()
    inspector.active.return_value = None
    inspector.scheduled.return_value = None
    inspector.reserved.return_value = None

    with patch("localaid.services.queue.celery_app") as app:
        app.control.inspect.return_value = inspector
        assert await get_queue_stats() == {"active": 0, "scheduled": 0, "reserved": 0}


# ---------------------------------------------------------------------------
# Task
# ---------------------------------------------------------------------------


def test_task_registered_under_stable_name():
    assert process_worker_registration_task.name == WORKER_REGISTRATION
    assert process_worker_registration_task.max_retries == settings.REGISTRATION_RETRY_LIMIT


def test_task_returns_business_result():
    outcome = {"success": False, "error": "An account with this email already exists"}
    with patch("localaid.tasks.registration._register", new=AsyncMock(return_value=outcome)) as register:
        assert process_worker_registration_task.run(PAYLOAD) == outcome
    register.assert_awaited_once_with(PAYLOAD)


def test_task_retries_unexpected_errors_with_backoff():
    failure = RuntimeError("connection refused")
    with (
        patch("localaid.tasks.registration._register", new=AsyncMock(side_effect=failure)),
        patch.object(process_worker_registration_task, "retry", return_value=Retry("retry")) as retry,
    ):
        with pytest.raises(Retry):
            process_worker_registration_task.run(PAYLOAD)

    retry.assert_called_once_with(exc=failure, countdown=settings.REGISTRATION_RETRY_DELAY)
