# This project was developed with assistance from AI tools.
"""Pydantic response models for admin endpoints."""

from datetime import datetime

from . import CamelModel


class AuditEventItem(CamelModel):
    """Single audit event in a query response."""

    id: int
    timestamp: datetime
    event_type: str
    user_id: str | None = None
    user_role: str | None = None
    entity_type: str | None = None
    entity_id: str | None = None
    event_data: dict | str | None = None


class AuditEventsResponse(CamelModel):
    """Response for GET /api/admin/audit."""

    success: bool = True
    count: int
    events: list[AuditEventItem]


class SyncStats(CamelModel):
    total: int = 0
    synced: int = 0
    created: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0


class ContractorSyncResponse(CamelModel):
    """Response for POST /api/admin/zoho/sync-contractors."""

    success: bool = True
    message: str
    stats: SyncStats
    duration_ms: int
    error_messages: list[str] = []


class SyncedContractor(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: str
    city: str | None = None
    state: str | None = None
    last_synced_at: datetime | None = None


class ContractorSyncStatusResponse(CamelModel):
    """Response for GET /api/admin/zoho/sync-status."""

    success: bool = True
    total_contractors: int
    last_synced_at: datetime | None = None
    last_synced_contractor: str | None = None
    recent_syncs: list[SyncedContractor]
    last_run: dict | None = None


class CatalogSeedResponse(CamelModel):
    """Response for POST /api/admin/seed."""

    status: str
    documents: int
    categories: int
    subcategories: int
    category_documents: int
    subcategory_documents: int


class ZohoAuthorizeResponse(CamelModel):
    """Response for GET /api/admin/zoho/authorize."""

    success: bool = True
    authorization_url: str


class ZohoCallbackResponse(CamelModel):
    """Response for GET /api/admin/zoho/callback."""

    success: bool = True
    message: str
    refresh_token: str | None = None
    expires_in: int | None = None
    api_domain: str | None = None


class ContractorSubmission(CamelModel):
    """Registration form fields pushed to Zoho as a new contractor record."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    mobile: str | None = None
    location: str | None = None
    services: list[str] = []
    experience: str | None = None
    introduction: str | None = None
    qualifications: list[str] | str | None = None
    has_vehicle: bool = False
    photos: list[str] = []
    consent_profile_share: bool = False
    consent_marketing: bool = False


class ContractorSubmitResponse(CamelModel):
    """Response for POST /api/admin/zoho/submit-contractor."""

    success: bool = True
    message: str
    crm_record_id: str | None = None


class ZohoPassthroughResponse(CamelModel):
    """Raw Zoho payload for the module, field and search lookups."""

    success: bool = True
    data: dict | list
