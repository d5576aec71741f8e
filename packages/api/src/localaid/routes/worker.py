# This project was developed with assistance from AI tools.
"""Worker self-service routes: requirements, wizard steps, documents and progress."""

import logging

from db import get_db
from db.enums import DocumentCategory, UserRole
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, require_roles
from ..schemas import MessageResponse
from ..schemas.compliance import RequirementItem
from ..schemas.requirements import RequirementsResponse, SetupStepsResponse
from ..schemas.worker import (
    DocumentListResponse,
    DocumentMetadataRequest,
    DocumentMetadataResponse,
    DocumentUploadResponse,
    SectionUpdateRequest,
    SetupProgressResponse,
)
from ..services import setup_steps
from ..services.requirements import (
    get_requirements_for_services,
    get_requirements_for_worker,
    get_worker_profile_for_user,
    split_services_param,
)
from ..services.setup_progress import (
    SECTION_SLUGS,
    auto_update_compliance_completion,
    progress_summary,
    update_section_completion,
)
from ..services.worker_documents import (
    RIGHT_TO_WORK,
    DocumentUploadError,
    delete_compliance_document,
    list_compliance_documents,
    save_document_metadata,
    upload_compliance_document,
)

logger = logging.getLogger(__name__)

router = APIRouter()

_WORKER_ROLES = (UserRole.WORKER,)

_NO_PROFILE = "Worker profile not found"


@router.get(
    "/requirements",
    response_model=RequirementsResponse,
    dependencies=[Depends(require_roles(*_WORKER_ROLES))],
)
async def get_requirements(
    user: CurrentUser,
    services: str | None = Query(default=None, description="Comma-separated service strings"),
    session: AsyncSession = Depends(get_db),
) -> RequirementsResponse:
    """Documents required for the given services, or the worker's saved ones."""
    requested = split_services_param(services)
    if requested:
        parsed, grouped = await get_requirements_for_services(session, requested)
    else:
        result = await get_requirements_for_worker(session, user.user_id)
        if result is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NO_PROFILE)
        parsed, grouped = result
        requested = [
            f"{p.category_name}:{p.subcategory_name}" if p.subcategory_name else p.category_name
            for p in parsed
        ]
    return RequirementsResponse(services=requested, worker_services=parsed, requirements=grouped)


async def _worker_requirements(session: AsyncSession, user: CurrentUser):
    result = await get_requirements_for_worker(session, user.user_id)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NO_PROFILE)
    _, grouped = result
    return grouped


@router.get(
    "/setup-steps",
    response_model=SetupStepsResponse,
    dependencies=[Depends(require_roles(*_WORKER_ROLES))],
)
async def get_setup_steps(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> SetupStepsResponse:
    """Compliance wizard steps for the worker's services."""
    grouped = await _worker_requirements(session, user)
    return SetupStepsResponse(
        steps=setup_steps.generate_compliance_steps(grouped),
        is_dynamic=setup_steps.is_dynamic(grouped),
    )


@router.get(
    "/training-steps",
    response_model=SetupStepsResponse,
    dependencies=[Depends(require_roles(*_WORKER_ROLES))],
)
async def get_training_steps(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> SetupStepsResponse:
    """Training wizard steps for the worker's services."""
    grouped = await _worker_requirements(session, user)
    steps = setup_steps.generate_training_steps(grouped)
    return SetupStepsResponse(steps=steps, is_dynamic=bool(steps))


@router.post(
    "/compliance-documents",
    response_model=DocumentUploadResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(*_WORKER_ROLES))],
)
async def upload_document(
    user: CurrentUser,
    file: UploadFile = File(...),
    document_type: str = Form(..., alias="documentType"),
    document_name: str | None = Form(default=None, alias="documentName"),
    document_category: DocumentCategory | None = Form(default=None, alias="documentCategory"),
    is_citizen: bool | None = Form(default=None, alias="isCitizen"),
    session: AsyncSession = Depends(get_db),
) -> DocumentUploadResponse:
    """Upload the file for one compliance requirement."""
    file_data = await file.read()
    metadata = {"isCitizen": is_citizen} if is_citizen is not None else None

    try:
        doc = await upload_compliance_document(
            session,
            user,
            document_type=document_type,
            document_name=document_name,
            filename=file.filename or "document",
            content_type=file.content_type or "",
            file_data=file_data,
            document_category=document_category,
            metadata=metadata,
        )
    except DocumentUploadError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    if doc is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NO_PROFILE)
    return DocumentUploadResponse(document=RequirementItem(**doc))


@router.get(
    "/compliance-documents",
    response_model=DocumentListResponse,
    dependencies=[Depends(require_roles(*_WORKER_ROLES))],
)
async def list_documents(
    user: CurrentUser,
    document_type: str | None = Query(default=None, alias="documentType"),
    session: AsyncSession = Depends(get_db),
) -> DocumentListResponse:
    """The worker's uploaded documents, optionally for one requirement type."""
    docs = await list_compliance_documents(session, user, document_type)
    if docs is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NO_PROFILE)
    return DocumentListResponse(documents=[RequirementItem(**d) for d in docs], total=len(docs))


@router.patch(
    "/compliance-documents",
    response_model=DocumentMetadataResponse,
    dependencies=[Depends(require_roles(*_WORKER_ROLES))],
)
async def update_document_metadata(
    body: DocumentMetadataRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> DocumentMetadataResponse:
    """Save requirement details that need no file, e.g. the citizenship answer."""
    try:
        doc = await save_document_metadata(
            session, user, document_type=body.document_type, metadata=body.metadata
        )
    except DocumentUploadError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if doc is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NO_PROFILE)
    if body.document_type != RIGHT_TO_WORK:
        message = "Document details saved"
    elif body.metadata.get("isCitizen"):
        message = "Australian citizenship confirmed"
    else:
        message = "Citizenship status saved"
    return DocumentMetadataResponse(message=message, document=RequirementItem(**doc))


@router.delete(
    "/compliance-documents/{document_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_roles(*_WORKER_ROLES))],
)
async def delete_document(
    document_id: str,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> MessageResponse:
    deleted = await delete_compliance_document(session, user, document_id)
    if deleted is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return MessageResponse(message="Document deleted successfully")


@router.get(
    "/setup-progress",
    response_model=SetupProgressResponse,
    dependencies=[Depends(require_roles(*_WORKER_ROLES))],
)
async def get_setup_progress(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> SetupProgressResponse:
    """Current onboarding progress; the compliance section is recomputed first."""
    profile = await get_worker_profile_for_user(session, user.user_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NO_PROFILE)
    await auto_update_compliance_completion(session, profile)
    return SetupProgressResponse(**progress_summary(profile))


@router.post(
    "/setup-progress/{section}",
    response_model=SetupProgressResponse,
    dependencies=[Depends(require_roles(*_WORKER_ROLES))],
)
async def update_setup_progress(
    section: str,
    user: CurrentUser,
    body: SectionUpdateRequest | None = None,
    session: AsyncSession = Depends(get_db),
) -> SetupProgressResponse:
    """Mark a section complete (or incomplete with ``{"completed": false}``)."""
    key = SECTION_SLUGS.get(section)
    if key is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown setup section: {section}",
        )
    profile = await get_worker_profile_for_user(session, user.user_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NO_PROFILE)

    completed = body.completed if body is not None else True
    await update_section_completion(session, profile, key, completed)
    logger.info("Worker %s set %s=%s", profile.id, key, completed)
    return SetupProgressResponse(**progress_summary(profile))
