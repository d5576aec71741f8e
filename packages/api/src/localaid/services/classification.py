# This project was developed with assistance from AI tools.
"""Requirement classifier for the admin compliance view.

Maps a verification requirement onto one of six display buckets using fixed
lookup tables, and computes the status counters shown beside each bucket.
Everything here is pure: no session, no I/O.
"""

from collections.abc import Iterable
from typing import Any

from db.enums import DocumentCategory, RequirementStatus

ESSENTIAL_CHECKS = "essentialChecks"
MODULES = "modules"
CERTIFICATIONS = "certifications"
IDENTITY = "identity"
INSURANCES = "insurances"
CONTRACTS = "contracts"

BUCKETS: tuple[str, ...] = (
    ESSENTIAL_CHECKS,
    MODULES,
    CERTIFICATIONS,
    IDENTITY,
    INSURANCES,
    CONTRACTS,
)

ESSENTIAL_CHECK_TYPES = frozenset({
    "police-check",
    "worker-screening-check",
    "ndis-screening-check",
    "working-with-children",
    "right-to-work",
})

MODULE_TYPES = frozenset({
    "ndis-training",
    "ndis-induction-module",
    "ndis-worker-orientation",
    "effective-communication",
    "safe-enjoyable-meals",
    "infection-control",
    "first-aid-cpr",
    "manual-handling",
    "medication-training",
    "behaviour-support",
})

INSURANCE_TYPES = frozenset({
    "car-insurance",
    "public-liability-10m",
    "professional-indemnity",
})

CONTRACT_TYPES = frozenset({
    "code-of-conduct",
    "code-of-conduct-part1",
    "code-of-conduct-part2",
    "contract-of-agreement",
})

_IDENTITY_CATEGORIES = frozenset({DocumentCategory.PRIMARY, DocumentCategory.SECONDARY})


def _as_category(document_category: DocumentCategory | str | None) -> DocumentCategory | None:
    if document_category is None or isinstance(document_category, DocumentCategory):
        return document_category
    try:
        return DocumentCategory(document_category)
    except ValueError:
        return None


def categorize_requirement(
    requirement_type: str,
    document_category: DocumentCategory | str | None = None,
) -> str:
    """Return the display bucket for a requirement.

    Rules are evaluated in order; the first match wins and anything that
    matches nothing falls through to certifications.
    """
    category = _as_category(document_category)

    if category in _IDENTITY_CATEGORIES:
        return IDENTITY

    # Service-scoped types look like "support-worker:public-liability-10m"
    if ":" in requirement_type:
        segment = requirement_type.split(":")[1]
        return INSURANCES if segment in INSURANCE_TYPES else CERTIFICATIONS

    if requirement_type in ESSENTIAL_CHECK_TYPES:
        return ESSENTIAL_CHECKS
    if requirement_type in MODULE_TYPES:
        return MODULES
    if requirement_type in INSURANCE_TYPES:
        return INSURANCES
    if requirement_type in CONTRACT_TYPES:
        return CONTRACTS
    return CERTIFICATIONS


def bucket_requirements(requirements: Iterable[Any]) -> dict[str, list[Any]]:
    """Group requirement rows by bucket. All six keys are always present."""
    buckets: dict[str, list[Any]] = {name: [] for name in BUCKETS}
    for req in requirements:
        bucket = categorize_requirement(req.requirement_type, req.document_category)
        buckets[bucket].append(req)
    return buckets


def _status_of(req: Any) -> RequirementStatus | None:
    status = req.status
    if status is None or isinstance(status, RequirementStatus):
        return status
    return RequirementStatus(status)


def compute_stats(requirements: Iterable[Any]) -> dict[str, int]:
    """Overall counters by status."""
    rows = list(requirements)
    statuses = [_status_of(r) for r in rows]
    return {
        "total": len(rows),
        "pending": statuses.count(RequirementStatus.PENDING),
        "submitted": statuses.count(RequirementStatus.SUBMITTED),
        "approved": statuses.count(RequirementStatus.APPROVED),
        "rejected": statuses.count(RequirementStatus.REJECTED),
        "expired": statuses.count(RequirementStatus.EXPIRED),
    }


def compute_category_stats(buckets: dict[str, list[Any]]) -> dict[str, dict[str, int]]:
    """Per-bucket total and approved counts."""
    return {
        name: {
            "total": len(rows),
            "approved": sum(1 for r in rows if _status_of(r) == RequirementStatus.APPROVED),
        }
        for name, rows in buckets.items()
    }
