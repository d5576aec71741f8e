# This project was developed with assistance from AI tools.
"""Admin compliance review schemas."""

from datetime import datetime

from db.enums import DocumentCategory, RequirementStatus, VerificationStatus
from pydantic import Field

from . import CamelModel


class RequirementItem(CamelModel):
    id: str
    requirement_type: str
    requirement_name: str
    document_category: DocumentCategory | None = None
    status: RequirementStatus
    is_required: bool = True
    document_url: str | None = None
    document_uploaded_at: datetime | None = None
    submitted_at: datetime | None = None
    reviewed_at: datetime | None = None
    reviewed_by: str | None = None
    approved_at: datetime | None = None
    rejected_at: datetime | None = None
    rejection_reason: str | None = None
    expires_at: datetime | None = None
    notes: str | None = None
    metadata: dict | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class WorkerSummary(CamelModel):
    id: str
    user_id: str
    first_name: str
    last_name: str
    email: str | None = None
    mobile: str | None = None
    city: str | None = None
    state: str | None = None
    is_published: bool
    verification_status: VerificationStatus
    updated_at: datetime | None = None


class RequirementStats(CamelModel):
    total: int = 0
    pending: int = 0
    submitted: int = 0
    approved: int = 0
    rejected: int = 0
    expired: int = 0


class CategoryStat(CamelModel):
    total: int = 0
    approved: int = 0


class CategorizedRequirements(CamelModel):
    essential_checks: list[RequirementItem] = Field(default_factory=list)
    modules: list[RequirementItem] = Field(default_factory=list)
    certifications: list[RequirementItem] = Field(default_factory=list)
    identity: list[RequirementItem] = Field(default_factory=list)
    insurances: list[RequirementItem] = Field(default_factory=list)
    contracts: list[RequirementItem] = Field(default_factory=list)


class WorkerComplianceResponse(CamelModel):
    success: bool = True
    worker: WorkerSummary
    documents: list[RequirementItem]
    categorized_documents: CategorizedRequirements
    stats: RequirementStats
    category_stats: dict[str, CategoryStat]


class RejectRequest(CamelModel):
    rejection_reason: str | None = None


class ExpiryUpdateRequest(CamelModel):
    expires_at: datetime | None = None


class RequirementActionResponse(CamelModel):
    success: bool = True
    message: str
    document: RequirementItem


class PublishResponse(CamelModel):
    success: bool = True
    message: str
    worker: WorkerSummary


class PendingWorker(CamelModel):
    worker: WorkerSummary
    submitted_count: int
    oldest_submission: datetime | None = None


class PendingWorkersResponse(CamelModel):
    success: bool = True
    workers: list[PendingWorker]
    total_workers: int
    total_pending_documents: int


class CompliantWorkersResponse(CamelModel):
    success: bool = True
    workers: list[WorkerSummary]
    total: int
