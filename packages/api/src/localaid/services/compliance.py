# This project was developed with assistance from AI tools.
"""Admin compliance review service.

Reads a worker's verification requirements grouped into display buckets,
and applies the single-row review actions (approve, reject, reset, expiry,
publish). Each action is guarded by the requirement's current status; two
admins acting on the same row concurrently is last-write-wins.

Return conventions match the other services: ``None`` when the worker or
requirement does not exist, ``{"error": ...}`` when a business rule blocks
the action.
"""

import logging
from datetime import UTC, datetime

from db import RequirementStatus, VerificationRequirement, WorkerProfile
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from ..schemas.auth import UserContext
from .audit import write_audit_event
from .classification import bucket_requirements, compute_category_stats, compute_stats

logger = logging.getLogger(__name__)

# snake_case bucket names used by the response schema
_BUCKET_FIELDS = {
    "essentialChecks": "essential_checks",
    "modules": "modules",
    "certifications": "certifications",
    "identity": "identity",
    "insurances": "insurances",
    "contracts": "contracts",
}


def requirement_to_dict(req: VerificationRequirement) -> dict:
    return {
        "id": req.id,
        "requirement_type": req.requirement_type,
        "requirement_name": req.requirement_name,
        "document_category": req.document_category,
        "status": req.status,
        "is_required": req.is_required if req.is_required is not None else True,
        "document_url": req.document_url,
        "document_uploaded_at": req.document_uploaded_at,
        "submitted_at": req.submitted_at,
        "reviewed_at": req.reviewed_at,
        "reviewed_by": req.reviewed_by,
        "approved_at": req.approved_at,
        "rejected_at": req.rejected_at,
        "rejection_reason": req.rejection_reason,
        "expires_at": req.expires_at,
        "notes": req.notes,
        "metadata": req.requirement_metadata,
        "created_at": req.created_at,
        "updated_at": req.updated_at,
    }


def worker_to_dict(profile: WorkerProfile) -> dict:
    user = profile.user
    return {
        "id": profile.id,
        "user_id": profile.user_id,
        "first_name": profile.first_name,
        "last_name": profile.last_name,
        "email": user.email if user is not None else None,
        "mobile": profile.mobile,
        "city": profile.city,
        "state": profile.state,
        "is_published": bool(profile.is_published),
        "verification_status": profile.verification_status,
        "updated_at": profile.updated_at,
    }


async def get_worker_profile(session: AsyncSession, worker_id: str) -> WorkerProfile | None:
    stmt = (
        select(WorkerProfile)
        .options(joinedload(WorkerProfile.user))
        .where(WorkerProfile.id == worker_id)
    )
    result = await session.execute(stmt)
    return result.unique().scalar_one_or_none()


async def _get_worker_requirement(
    session: AsyncSession,
    worker_id: str,
    requirement_id: str,
) -> VerificationRequirement | None:
    stmt = select(VerificationRequirement).where(
        VerificationRequirement.id == requirement_id,
        VerificationRequirement.worker_profile_id == worker_id,
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_worker_compliance(session: AsyncSession, worker_id: str) -> dict | None:
    """All requirements for a worker, bucketed, with overall and per-bucket counts.

    Returns None if the worker does not exist. Read-only.
    """
    profile = await get_worker_profile(session, worker_id)
    if profile is None:
        return None

    stmt = (
        select(VerificationRequirement)
        .where(VerificationRequirement.worker_profile_id == worker_id)
        .order_by(VerificationRequirement.created_at.desc())
    )
    result = await session.execute(stmt)
    requirements = list(result.scalars().all())

    buckets = bucket_requirements(requirements)
    return {
        "worker": worker_to_dict(profile),
        "documents": [requirement_to_dict(r) for r in requirements],
        "categorized_documents": {
            _BUCKET_FIELDS[name]: [requirement_to_dict(r) for r in rows]
            for name, rows in buckets.items()
        },
        "stats": compute_stats(requirements),
        "category_stats": compute_category_stats(buckets),
    }


def _blocked(req: VerificationRequirement, verb: str) -> dict:
    status = req.status.value if req.status else "UNKNOWN"
    return {"error": f"Document cannot be {verb} from {status} status"}


async def _finish(
    session: AsyncSession,
    user: UserContext,
    req: VerificationRequirement,
    event_type: str,
    event_data: dict,
) -> None:
    await write_audit_event(
        session,
        event_type=event_type,
        user_id=user.user_id,
        user_role=user.role.value,
        entity_type="verification_requirement",
        entity_id=req.id,
        event_data={
            "worker_profile_id": req.worker_profile_id,
            "requirement_type": req.requirement_type,
            **event_data,
        },
    )
    await session.commit()
    await session.refresh(req)


async def approve_requirement(
    session: AsyncSession,
    user: UserContext,
    worker_id: str,
    requirement_id: str,
) -> dict | None:
    """Approve a SUBMITTED or REJECTED requirement. Approving twice is a no-op."""
    req = await _get_worker_requirement(session, worker_id, requirement_id)
    if req is None:
        return None

    if req.status == RequirementStatus.APPROVED:
        return {"requirement": requirement_to_dict(req), "message": "Document already approved"}
    if req.status not in RequirementStatus.sources_for(RequirementStatus.APPROVED):
        return _blocked(req, "approved")

    previous = req.status
    now = datetime.now(UTC)
    req.status = RequirementStatus.APPROVED
    req.approved_at = now
    req.reviewed_at = now
    req.reviewed_by = user.name or user.email
    req.rejected_at = None
    req.rejection_reason = None

    await _finish(
        session, user, req, "requirement_approved", {"previous_status": previous.value},
    )
    logger.info("Requirement %s approved by %s", req.id, user.user_id)
    return {"requirement": requirement_to_dict(req), "message": "Document approved successfully"}


async def reject_requirement(
    session: AsyncSession,
    user: UserContext,
    worker_id: str,
    requirement_id: str,
    rejection_reason: str | None,
) -> dict | None:
    """Reject a SUBMITTED or APPROVED requirement with a mandatory reason."""
    reason = (rejection_reason or "").strip()
    if not reason:
        return {"error": "Rejection reason is required"}

    req = await _get_worker_requirement(session, worker_id, requirement_id)
    if req is None:
        return None

    if req.status == RequirementStatus.REJECTED:
        return {"requirement": requirement_to_dict(req), "message": "Document already rejected"}
    if req.status not in RequirementStatus.sources_for(RequirementStatus.REJECTED):
        return _blocked(req, "rejected")

    previous = req.status
    now = datetime.now(UTC)
    req.status = RequirementStatus.REJECTED
    req.rejected_at = now
    req.reviewed_at = now
    req.reviewed_by = user.name or user.email
    req.rejection_reason = reason
    req.approved_at = None

    await _finish(
        session,
        user,
        req,
        "requirement_rejected",
        {"previous_status": previous.value, "rejection_reason": reason},
    )
    logger.info("Requirement %s rejected by %s", req.id, user.user_id)
    return {"requirement": requirement_to_dict(req), "message": "Document rejected successfully"}


async def reset_requirement(
    session: AsyncSession,
    user: UserContext,
    worker_id: str,
    requirement_id: str,
) -> dict | None:
    """Send an APPROVED or REJECTED requirement back to SUBMITTED for re-review."""
    req = await _get_worker_requirement(session, worker_id, requirement_id)
    if req is None:
        return None

    if req.status not in RequirementStatus.sources_for(RequirementStatus.SUBMITTED):
        return _blocked(req, "reset")

    previous = req.status
    now = datetime.now(UTC)
    note = f"[{now.isoformat()}] Reset to review by {user.name or user.email}"
    req.status = RequirementStatus.SUBMITTED
    req.approved_at = None
    req.rejected_at = None
    req.rejection_reason = None
    req.reviewed_at = None
    req.reviewed_by = None
    req.notes = f"{req.notes}\n{note}" if req.notes else note

    await _finish(
        session, user, req, "requirement_reset", {"previous_status": previous.value},
    )
    return {"requirement": requirement_to_dict(req), "message": "Document reset to review"}


async def update_requirement_expiry(
    session: AsyncSession,
    user: UserContext,
    worker_id: str,
    requirement_id: str,
    expires_at: datetime | None,
) -> dict | None:
    """Set or clear the expiry date. Allowed in any status."""
    req = await _get_worker_requirement(session, worker_id, requirement_id)
    if req is None:
        return None

    req.expires_at = expires_at
    await _finish(
        session,
        user,
        req,
        "requirement_expiry_updated",
        {"expires_at": expires_at.isoformat() if expires_at else None},
    )
    message = "Expiry date updated" if expires_at else "Expiry date removed"
    return {"requirement": requirement_to_dict(req), "message": message}


async def set_worker_published(
    session: AsyncSession,
    user: UserContext,
    worker_id: str,
    is_published: bool,
) -> dict | None:
    """Toggle whether a worker is visible to clients as compliance-verified."""
    profile = await get_worker_profile(session, worker_id)
    if profile is None:
        return None

    profile.is_published = is_published
    await write_audit_event(
        session,
        event_type="worker_published" if is_published else "worker_unpublished",
        user_id=user.user_id,
        user_role=user.role.value,
        entity_type="worker_profile",
        entity_id=profile.id,
        event_data={"is_published": is_published},
    )
    await session.commit()
    await session.refresh(profile, ["is_published", "updated_at"])

    message = "Compliance verified" if is_published else "Compliance verification removed"
    return {"worker": worker_to_dict(profile), "message": message}


async def list_pending_workers(session: AsyncSession) -> dict:
    """Unpublished workers with SUBMITTED documents awaiting review.

    Ordered by number of submitted documents (most first), then by the age of
    their oldest submission (oldest first).
    """
    stmt = (
        select(VerificationRequirement)
        .join(WorkerProfile, WorkerProfile.id == VerificationRequirement.worker_profile_id)
        .options(joinedload(VerificationRequirement.worker_profile).joinedload(WorkerProfile.user))
        .where(
            VerificationRequirement.status == RequirementStatus.SUBMITTED,
            WorkerProfile.is_published.is_(False),
        )
    )
    result = await session.execute(stmt)
    requirements = result.unique().scalars().all()

    grouped: dict[str, dict] = {}
    for req in requirements:
        entry = grouped.setdefault(
            req.worker_profile_id,
            {"profile": req.worker_profile, "submitted_count": 0, "oldest_submission": None},
        )
        entry["submitted_count"] += 1
        submitted = req.submitted_at or req.created_at
        if submitted is not None and (
            entry["oldest_submission"] is None or submitted < entry["oldest_submission"]
        ):
            entry["oldest_submission"] = submitted

    far_future = datetime.max.replace(tzinfo=UTC)
    ordered = sorted(
        grouped.values(),
        key=lambda e: (-e["submitted_count"], e["oldest_submission"] or far_future),
    )
    workers = [
        {
            "worker": worker_to_dict(e["profile"]),
            "submitted_count": e["submitted_count"],
            "oldest_submission": e["oldest_submission"],
        }
        for e in ordered
    ]
    return {
        "workers": workers,
        "total_workers": len(workers),
        "total_pending_documents": sum(e["submitted_count"] for e in ordered),
    }


async def list_compliant_workers(session: AsyncSession) -> list[dict]:
    """Published workers, most recently updated first."""
    stmt = (
        select(WorkerProfile)
        .options(joinedload(WorkerProfile.user))
        .where(WorkerProfile.is_published.is_(True))
        .order_by(WorkerProfile.updated_at.desc())
    )
    result = await session.execute(stmt)
    return [worker_to_dict(p) for p in result.unique().scalars().all()]
