# This project was developed with assistance from AI tools.
"""Scheduler-facing endpoint for the registration queue.

Called by an external cron with ``Authorization: Bearer <CRON_SECRET>``.
Celery workers consume the queue continuously; this reports what they hold.
"""

import hmac
import logging

from fastapi import APIRouter, HTTPException, Request, status

from ..core.config import settings
from ..schemas.registration import QueueStatsResponse
from ..services.queue import get_queue_stats

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_cron_secret(request: Request) -> None:
    if not settings.CRON_SECRET:
        return
    expected = f"Bearer {settings.CRON_SECRET}"
    provided = request.headers.get("Authorization", "")
    if not hmac.compare_digest(provided.encode(), expected.encode()):
        logger.warning("Rejected process-registrations call with bad cron secret")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


@router.post("/process-registrations", response_model=QueueStatsResponse)
async def process_registrations(request: Request) -> QueueStatsResponse:
    """Registration jobs currently held by workers, by state."""
    _check_cron_secret(request)
    stats = await get_queue_stats()
    total = sum(stats.values())
    return QueueStatsResponse(
        message=f"{total} registration job(s) in progress" if total else "No registration jobs in progress",
        **stats,
    )
