# This project was developed with assistance from AI tools.
"""Worker compliance document uploads.

A worker uploads one file per requirement type. The file goes to blob
storage under ``compliance-documents/{user_id}/``; the requirement row is
created in SUBMITTED status (or, for right-to-work, the existing row is
updated) and the worker is flagged PENDING_REVIEW for the admin queue.
Requirement details such as the citizenship answer can also be saved
without a file.
"""

import logging
from datetime import UTC, datetime

from botocore.exceptions import ClientError
from db import (
    DocumentCategory,
    RequirementStatus,
    VerificationRequirement,
    VerificationStatus,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.auth import UserContext
from .compliance import requirement_to_dict
from .requirements import get_worker_profile_for_user
from .storage import build_compliance_key, get_storage_service, validate_document_file

logger = logging.getLogger(__name__)

RIGHT_TO_WORK = "right-to-work"


class DocumentUploadError(Exception):
    """Raised when a document upload fails validation."""


def _default_category(document_type: str) -> DocumentCategory | None:
    if document_type == RIGHT_TO_WORK:
        return DocumentCategory.WORKING_RIGHTS
    if ":" in document_type:
        return DocumentCategory.SERVICE_QUALIFICATION
    return None


async def _latest_of_type(
    session: AsyncSession, worker_profile_id: str, document_type: str
) -> VerificationRequirement | None:
    # Duplicate rows are possible; the newest one wins
    stmt = (
        select(VerificationRequirement)
        .where(
            VerificationRequirement.worker_profile_id == worker_profile_id,
            VerificationRequirement.requirement_type == document_type,
        )
        .order_by(VerificationRequirement.created_at.desc())
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def upload_compliance_document(
    session: AsyncSession,
    user: UserContext,
    *,
    document_type: str,
    document_name: str | None,
    filename: str,
    content_type: str,
    file_data: bytes,
    document_category: DocumentCategory | None = None,
    metadata: dict | None = None,
) -> dict | None:
    """Store the file and record it against the worker's requirement.

    Returns None if the caller has no worker profile. Raises
    DocumentUploadError for unacceptable files.
    """
    if not document_type or not document_type.strip():
        raise DocumentUploadError("Document type is required")
    error = validate_document_file(content_type, len(file_data))
    if error:
        raise DocumentUploadError(error)

    profile = await get_worker_profile_for_user(session, user.user_id)
    if profile is None:
        return None

    storage = get_storage_service()
    object_key = build_compliance_key(user.user_id, document_type, filename)
    url = await storage.upload_file(file_data, object_key, content_type)

    now = datetime.now(UTC)
    requirement = None
    if document_type == RIGHT_TO_WORK:
        requirement = await _latest_of_type(session, profile.id, RIGHT_TO_WORK)

    if requirement is None:
        requirement = VerificationRequirement(
            worker_profile_id=profile.id,
            requirement_type=document_type,
            requirement_name=document_name or document_type,
            document_category=document_category or _default_category(document_type),
            is_required=True,
        )
        session.add(requirement)

    requirement.status = RequirementStatus.SUBMITTED
    requirement.document_url = url
    requirement.document_uploaded_at = now
    requirement.submitted_at = now
    requirement.rejected_at = None
    requirement.rejection_reason = None
    if metadata:
        requirement.requirement_metadata = {**(requirement.requirement_metadata or {}), **metadata}

    profile.verification_status = VerificationStatus.PENDING_REVIEW

    await session.commit()
    await session.refresh(requirement)
    logger.info("Worker %s uploaded %s", profile.id, document_type)
    return requirement_to_dict(requirement)


async def save_document_metadata(
    session: AsyncSession,
    user: UserContext,
    *,
    document_type: str,
    metadata: dict,
) -> dict | None:
    """Record details for a requirement without uploading a file.

    Used for the right-to-work citizenship answer: ``isCitizen`` true marks
    the requirement SUBMITTED, otherwise a new row starts PENDING and an
    existing row keeps its status.
    """
    if not document_type or not document_type.strip():
        raise DocumentUploadError("Document type is required")
    if not metadata:
        raise DocumentUploadError("Metadata is required")

    profile = await get_worker_profile_for_user(session, user.user_id)
    if profile is None:
        return None

    now = datetime.now(UTC)
    is_citizen = bool(metadata.get("isCitizen"))
    requirement = await _latest_of_type(session, profile.id, document_type)
    if requirement is None:
        requirement = VerificationRequirement(
            worker_profile_id=profile.id,
            requirement_type=document_type,
            requirement_name="Right to Work Documents" if document_type == RIGHT_TO_WORK else document_type,
            document_category=_default_category(document_type),
            is_required=True,
            status=RequirementStatus.PENDING,
        )
        session.add(requirement)

    requirement.requirement_metadata = {**(requirement.requirement_metadata or {}), **metadata}
    if is_citizen:
        requirement.status = RequirementStatus.SUBMITTED
        if requirement.submitted_at is None:
            requirement.submitted_at = now

    await session.commit()
    await session.refresh(requirement)
    logger.info("Worker %s saved %s details (citizen=%s)", profile.id, document_type, is_citizen)
    return requirement_to_dict(requirement)


async def list_compliance_documents(
    session: AsyncSession,
    user: UserContext,
    document_type: str | None = None,
) -> list[dict] | None:
    """The caller's requirement rows, newest first. None without a worker profile."""
    profile = await get_worker_profile_for_user(session, user.user_id)
    if profile is None:
        return None

    stmt = select(VerificationRequirement).where(
        VerificationRequirement.worker_profile_id == profile.id
    )
    if document_type:
        stmt = stmt.where(VerificationRequirement.requirement_type == document_type)
    stmt = stmt.order_by(VerificationRequirement.created_at.desc())
    result = await session.execute(stmt)
    return [requirement_to_dict(r) for r in result.scalars().all()]


async def delete_compliance_document(
    session: AsyncSession,
    user: UserContext,
    requirement_id: str,
) -> bool | None:
    """Remove one of the caller's documents and its stored file.

    Returns None when the row does not exist or belongs to someone else.
    """
    profile = await get_worker_profile_for_user(session, user.user_id)
    if profile is None:
        return None

    stmt = select(VerificationRequirement).where(
        VerificationRequirement.id == requirement_id,
        VerificationRequirement.worker_profile_id == profile.id,
    )
    result = await session.execute(stmt)
    requirement = result.scalar_one_or_none()
    if requirement is None:
        return None

    url = requirement.document_url
    await session.delete(requirement)
    await session.commit()

    if url:
        storage = get_storage_service()
        key = storage.key_from_url(url)
        if key:
            try:
                await storage.delete_file(key)
            except ClientError as exc:
                # Row already deleted; the object is left orphaned
                logger.warning("Failed to delete stored file %s: %s", key, exc)
    return True
