# This project was developed with assistance from AI tools.
"""Shared test factory functions for creating mock objects.

Extracts common mock creation patterns from test files to eliminate duplication
and ensure consistency across test suites.
"""

from datetime import UTC, datetime
from unittest.mock import MagicMock

from db.enums import (
    CatalogCategory,
    DocumentCategory,
    RequirementLevel,
    RequirementStatus,
    VerificationStatus,
)

WORKER_ID = "worker-profile-001"
WORKER_USER_ID = "worker-user-001"

SUBMITTED_AT = datetime(2026, 3, 2, 9, 30, tzinfo=UTC)


def make_mock_requirement(
    id="req-001",
    requirement_type="police-check",
    status=RequirementStatus.SUBMITTED,
    document_category=None,
    worker_profile_id=WORKER_ID,
    requirement_name=None,
    submitted_at=SUBMITTED_AT,
    notes=None,
    expires_at=None,
    metadata=None,
):
    """Create a mock VerificationRequirement ORM object.

    Args:
        id: Requirement ID.
        requirement_type: Document kind, optionally ``service:type``.
        status: RequirementStatus value.
        document_category: DocumentCategory or None.
        worker_profile_id: Owning worker profile.
        requirement_name: Display name; defaults to the type.
        submitted_at: Submission timestamp.
        notes: Existing admin notes.
        expires_at: Expiry timestamp.
        metadata: JSON metadata.

    Returns:
        MagicMock configured as a VerificationRequirement instance.
    """
    r = MagicMock()
    r.id = id
    r.worker_profile_id = worker_profile_id
    r.requirement_type = requirement_type
    r.requirement_name = requirement_name or requirement_type
    r.document_category = document_category
    r.status = status
    r.is_required = True
    r.document_url = f"https://files.example.com/compliance-documents/{WORKER_USER_ID}/{requirement_type}.pdf"
    r.document_uploaded_at = submitted_at
    r.submitted_at = submitted_at
    r.reviewed_at = None
    r.reviewed_by = None
    r.approved_at = None
    r.rejected_at = None
    r.rejection_reason = None
    r.expires_at = expires_at
    r.notes = notes
    r.requirement_metadata = metadata
    r.created_at = submitted_at
    r.updated_at = submitted_at
    return r


def make_mock_worker_profile(
    id=WORKER_ID,
    user_id=WORKER_USER_ID,
    first_name="Priya",
    last_name="Nair",
    email="priya@example.com",
    is_published=False,
    verification_status=VerificationStatus.PENDING_REVIEW,
    services=None,
    setup_progress=None,
    abn=None,
):
    """Create a mock WorkerProfile ORM object with its User attached.

    Args:
        services: List of (category_name, subcategory_name or None) tuples.
    """
    p = MagicMock()
    p.id = id
    p.user_id = user_id
    p.first_name = first_name
    p.last_name = last_name
    p.mobile = "0400 000 000"
    p.photos = ["https://files.example.com/photo.jpg"]
    p.introduction = "Experienced support worker"
    p.city = "Parramatta"
    p.state = "NSW"
    p.postal_code = "2150"
    p.age = 34
    p.gender = "Female"
    p.abn = abn
    p.is_published = is_published
    p.verification_status = verification_status
    p.setup_progress = setup_progress
    p.updated_at = SUBMITTED_AT
    p.user = MagicMock()
    p.user.email = email
    p.services = [make_mock_worker_service(cat, sub) for cat, sub in (services or [])]
    return p


def make_mock_worker_service(category_name="Support Worker", subcategory_name=None):
    ws = MagicMock()
    ws.category_name = category_name
    ws.subcategory_name = subcategory_name
    ws.service_string = f"{category_name}:{subcategory_name}" if subcategory_name else category_name
    return ws


def make_mock_document(id="police-check", name="National Police Check", category=CatalogCategory.COMPLIANCE):
    """Create a mock catalog Document."""
    d = MagicMock()
    d.id = id
    d.name = name
    d.category = category
    d.description = None
    d.has_expiration = True
    return d


def make_mock_link(document, document_type=RequirementLevel.REQUIRED, condition_key=None, required_if_true=None):
    """Create a mock CategoryDocument / SubcategoryDocument link."""
    link = MagicMock()
    link.document = document
    link.document_type = document_type
    link.condition_key = condition_key
    link.required_if_true = required_if_true
    return link


def make_mock_category(id="support-worker", name="Support Worker", links=None, subcategories=None):
    """Create a mock ServiceCategory with document links and subcategories."""
    c = MagicMock()
    c.id = id
    c.name = name
    c.documents = links or []
    c.subcategories = subcategories or []
    return c


def make_mock_subcategory(id="personal-care", name="Personal care", links=None):
    s = MagicMock()
    s.id = id
    s.name = name
    s.documents = links or []
    return s


def make_identity_pair():
    """A PRIMARY and a SECONDARY identity document, both submitted."""
    return [
        make_mock_requirement(
            id="req-passport",
            requirement_type="passport",
            document_category=DocumentCategory.PRIMARY,
        ),
        make_mock_requirement(
            id="req-medicare",
            requirement_type="medicare-card",
            document_category=DocumentCategory.SECONDARY,
        ),
    ]
