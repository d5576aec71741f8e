# This project was developed with assistance from AI tools.
"""Login, registration and registration-job status endpoints."""

import logging

from db import get_db
from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.auth import create_access_token, hash_password
from ..schemas import MessageResponse
from ..schemas.auth import LoginRequest, LoginResponse
from ..schemas.registration import (
    ClientRegistrationRequest,
    ClientRegistrationResponse,
    RegistrationQueuedResponse,
    RegistrationStatusResponse,
    WorkerRegistrationRequest,
)
from ..services.accounts import authenticate_user, display_name
from ..services.queue import QueueSendError, cancel_job, get_job_status, queue_worker_registration
from ..services.registration import RegistrationError, register_client

logger = logging.getLogger(__name__)

router = APIRouter()


def field_errors(exc: ValidationError) -> dict[str, str]:
    """Pydantic errors -> ``{"fieldName": "message"}`` keyed by the posted alias."""
    errors: dict[str, str] = {}
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"]) or "body"
        errors.setdefault(field, err["msg"])
    return errors


def _validation_failed(exc: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"error": "Validation failed", "details": field_errors(exc)},
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """Exchange email and password for an access token."""
    user = await authenticate_user(session, body.email, body.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    token = create_access_token(
        user_id=user.id,
        email=user.email,
        role=user.role,
        name=display_name(user),
    )
    return LoginResponse(access_token=token, user_id=user.id, role=user.role)


@router.post(
    "/register/worker-async",
    response_model=RegistrationQueuedResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def register_worker_async(body: dict = Body(...)) -> RegistrationQueuedResponse:
    """Validate a worker registration and queue it for processing."""
    try:
        data = WorkerRegistrationRequest.model_validate(body)
    except ValidationError as exc:
        raise _validation_failed(exc) from exc

    payload = data.model_dump(by_alias=True, mode="json", exclude={"password"})
    # Only the hash is written to the broker
    payload["passwordHash"] = hash_password(data.password)
    try:
        job_id = await queue_worker_registration(payload)
    except QueueSendError as exc:
        logger.error("Worker registration for %s not queued: %s", data.email, exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Registration service is temporarily unavailable, please try again",
        ) from exc

    return RegistrationQueuedResponse(
        job_id=job_id,
        message="Registration received and is being processed",
    )


@router.get("/registration-status/{job_id}", response_model=RegistrationStatusResponse)
async def registration_status(job_id: str) -> RegistrationStatusResponse:
    """Poll a queued worker registration."""
    if not job_id.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Job ID is required")
    result = await get_job_status(job_id)
    return RegistrationStatusResponse(**result)


@router.delete("/registration-status/{job_id}", response_model=MessageResponse)
async def cancel_registration(job_id: str) -> MessageResponse:
    """Cancel a registration that has not started yet."""
    await cancel_job(job_id)
    return MessageResponse(message="Registration job cancelled")


@router.post(
    "/register/client",
    response_model=ClientRegistrationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_client_account(
    body: dict = Body(...),
    session: AsyncSession = Depends(get_db),
) -> ClientRegistrationResponse:
    """Create a client account and its first participant."""
    try:
        data = ClientRegistrationRequest.model_validate(body)
    except ValidationError as exc:
        raise _validation_failed(exc) from exc

    try:
        result = await register_client(session, data)
    except RegistrationError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    return ClientRegistrationResponse(message="Registration successful", **result)
