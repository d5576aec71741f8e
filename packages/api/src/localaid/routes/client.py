# This project was developed with assistance from AI tools.
"""Client account routes."""

from db import get_db
from db.enums import UserRole
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, require_roles
from ..schemas.registration import (
    ParticipantItem,
    ParticipantResponse,
    ParticipantsResponse,
    ParticipantUpdateRequest,
)
from ..services.registration import (
    get_client_participant,
    get_client_participants,
    update_client_participant,
)

router = APIRouter()

_CLIENT = [Depends(require_roles(UserRole.CLIENT))]
_NOT_FOUND = "Participant not found"


@router.get("/participants", response_model=ParticipantsResponse, dependencies=_CLIENT)
async def list_participants(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ParticipantsResponse:
    """People the client arranges support for."""
    participants = await get_client_participants(session, user)
    if participants is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client profile not found")
    return ParticipantsResponse(
        participants=[ParticipantItem(**p) for p in participants],
        total=len(participants),
    )


@router.get("/participants/{participant_id}", response_model=ParticipantResponse, dependencies=_CLIENT)
async def get_participant(
    participant_id: str,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ParticipantResponse:
    participant = await get_client_participant(session, user, participant_id)
    if participant is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
    return ParticipantResponse(participant=ParticipantItem(**participant))


@router.patch("/participants/{participant_id}", response_model=ParticipantResponse, dependencies=_CLIENT)
async def update_participant(
    participant_id: str,
    body: ParticipantUpdateRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ParticipantResponse:
    """Update the fields present in the body; other fields keep their values."""
    changes = body.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")
    result = await update_client_participant(session, user, participant_id, changes)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
    if "error" in result:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result["error"])
    return ParticipantResponse(
        message="Participant updated successfully",
        participant=ParticipantItem(**result),
    )
