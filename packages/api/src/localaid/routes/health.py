# This project was developed with assistance from AI tools.
"""Liveness and dependency health."""

from db import get_db_service
from fastapi import APIRouter

from .. import __version__
from ..schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=list[HealthResponse])
async def health() -> list[HealthResponse]:
    """API status plus a database round trip."""
    db_status = await get_db_service().health_check()
    return [
        HealthResponse(name="API", status="healthy", message="LocalAid API is running", version=__version__),
        HealthResponse(version=__version__, **db_status),
    ]
