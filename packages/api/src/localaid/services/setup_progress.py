# This project was developed with assistance from AI tools.
"""Worker onboarding progress.

Progress is stored as a small JSON object on the worker profile with one
boolean per section. Completing every section moves the worker to
PENDING_REVIEW; touching any section moves a NOT_STARTED worker to
IN_PROGRESS.
"""

import logging

from db import RequirementStatus, VerificationRequirement, VerificationStatus, WorkerProfile
from db.enums import DocumentCategory
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .requirements import get_requirements_for_services, worker_service_strings

logger = logging.getLogger(__name__)

SECTIONS: tuple[str, ...] = ("accountDetails", "compliance", "trainings", "services")

# URL slug -> stored key
SECTION_SLUGS = {
    "account-details": "accountDetails",
    "compliance": "compliance",
    "trainings": "trainings",
    "services": "services",
}

# Required document id -> requirement types that satisfy it
_DOCUMENT_ALIASES = {
    "ndis-screening-check": {"ndis-screening-check", "worker-screening-check", "ndis-worker-screening"},
    "right-to-work": {"right-to-work", "identity-working-rights"},
}

_ALIAS_TYPES = {"worker-screening-check", "ndis-worker-screening", "identity-working-rights"}

_COUNTS_AS_DONE = {
    RequirementStatus.APPROVED.value,
    "PENDING_REVIEW",
    RequirementStatus.SUBMITTED.value,
}

_ACCOUNT_DETAIL_FIELDS = (
    "first_name",
    "last_name",
    "photos",
    "introduction",
    "city",
    "state",
    "postal_code",
    "gender",
)


def parse_setup_progress(raw) -> dict[str, bool]:
    """Stored JSON -> full progress dict; missing or malformed values are False."""
    if not isinstance(raw, dict):
        return {section: False for section in SECTIONS}
    return {section: bool(raw.get(section) or False) for section in SECTIONS}


def is_all_sections_completed(progress: dict[str, bool]) -> bool:
    return all(progress.get(section) for section in SECTIONS)


def get_completion_percentage(progress: dict[str, bool]) -> int:
    completed = sum(1 for section in SECTIONS if progress.get(section))
    return round(completed / len(SECTIONS) * 100)


def is_account_details_complete(profile: WorkerProfile) -> bool:
    for field in _ACCOUNT_DETAIL_FIELDS:
        value = getattr(profile, field, None)
        if not value:
            return False
    return profile.age is not None


def _status_value(status) -> str | None:
    return status.value if hasattr(status, "value") else status


def _category_value(category) -> str | None:
    return category.value if hasattr(category, "value") else category


def is_compliance_complete(
    required_ids: set[str],
    requirements: list[VerificationRequirement],
    abn: str | None,
) -> bool:
    """Every required base compliance document is present and in a done state.

    ``identity-points-100`` is satisfied by one PRIMARY and one SECONDARY
    identity document; ``abn-contractor`` by an ABN on the profile.
    """
    if not required_ids:
        return False

    uploaded = {r.requirement_type for r in requirements}
    categories = {_category_value(r.document_category) for r in requirements}

    for doc_id in required_ids:
        if doc_id == "identity-points-100":
            ok = {DocumentCategory.PRIMARY.value, DocumentCategory.SECONDARY.value} <= categories
        elif doc_id == "abn-contractor":
            ok = bool(abn and abn.strip())
        else:
            ok = bool(_DOCUMENT_ALIASES.get(doc_id, {doc_id}) & uploaded)
        if not ok:
            logger.debug("Compliance document %s missing", doc_id)
            return False

    relevant = [
        r
        for r in requirements
        if r.requirement_type in required_ids
        or r.requirement_type in _ALIAS_TYPES
        or _category_value(r.document_category)
        in (DocumentCategory.PRIMARY.value, DocumentCategory.SECONDARY.value)
    ]
    return bool(relevant) and all(_status_value(r.status) in _COUNTS_AS_DONE for r in relevant)


async def check_compliance_completion(session: AsyncSession, profile: WorkerProfile) -> bool:
    services = worker_service_strings(profile)
    if not services:
        return False

    _, grouped = await get_requirements_for_services(session, services)
    required_ids = {doc.id for doc in grouped.base_compliance}

    stmt = select(VerificationRequirement).where(
        VerificationRequirement.worker_profile_id == profile.id
    )
    result = await session.execute(stmt)
    requirements = list(result.scalars().all())
    return is_compliance_complete(required_ids, requirements, profile.abn)


def apply_section_completion(profile: WorkerProfile, section: str, completed: bool) -> dict[str, bool]:
    """Update progress and verification status on the profile in place."""
    progress = parse_setup_progress(profile.setup_progress)
    progress[section] = completed
    profile.setup_progress = progress

    if is_all_sections_completed(progress):
        profile.verification_status = VerificationStatus.PENDING_REVIEW
    elif profile.verification_status in (None, VerificationStatus.NOT_STARTED):
        profile.verification_status = VerificationStatus.IN_PROGRESS
    return progress


async def update_section_completion(
    session: AsyncSession,
    profile: WorkerProfile,
    section: str,
    completed: bool,
) -> dict[str, bool]:
    if section not in SECTIONS:
        raise ValueError(f"Unknown setup section: {section}")
    progress = apply_section_completion(profile, section, completed)
    await session.commit()
    await session.refresh(profile, ["setup_progress", "verification_status", "updated_at"])
    return progress


async def auto_update_compliance_completion(session: AsyncSession, profile: WorkerProfile) -> dict[str, bool]:
    """Recompute the compliance section; write only when it changed."""
    complete = await check_compliance_completion(session, profile)
    progress = parse_setup_progress(profile.setup_progress)
    if progress["compliance"] == complete:
        return progress
    return await update_section_completion(session, profile, "compliance", complete)


def progress_summary(profile: WorkerProfile) -> dict:
    progress = parse_setup_progress(profile.setup_progress)
    return {
        "progress": progress,
        "completion_percentage": get_completion_percentage(progress),
        "all_completed": is_all_sections_completed(progress),
        "verification_status": profile.verification_status,
        "account_details_complete": is_account_details_complete(profile),
    }
