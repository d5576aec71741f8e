# This project was developed with assistance from AI tools.
"""Worker self-service schemas (documents and setup progress)."""

from db.enums import VerificationStatus

from . import CamelModel
from .compliance import RequirementItem


class DocumentUploadResponse(CamelModel):
    success: bool = True
    message: str = "Document uploaded successfully"
    document: RequirementItem


class DocumentListResponse(CamelModel):
    success: bool = True
    documents: list[RequirementItem]
    total: int


class SetupProgress(CamelModel):
    account_details: bool = False
    compliance: bool = False
    trainings: bool = False
    services: bool = False


class SetupProgressResponse(CamelModel):
    success: bool = True
    progress: SetupProgress
    completion_percentage: int
    all_completed: bool
    verification_status: VerificationStatus
    account_details_complete: bool


class SectionUpdateRequest(CamelModel):
    completed: bool = True


class DocumentMetadataRequest(CamelModel):
    """Body for PATCH /api/worker/compliance-documents."""

    document_type: str
    metadata: dict


class DocumentMetadataResponse(CamelModel):
    success: bool = True
    message: str
    document: RequirementItem
