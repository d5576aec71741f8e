# This project was developed with assistance from AI tools.
"""Admin endpoints: compliance review, contractor sync, catalog seeding and audit queries."""

import logging
from datetime import datetime

from db import get_db
from db.enums import UserRole
from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, require_roles
from ..schemas.admin import (
    AuditEventItem,
    AuditEventsResponse,
    CatalogSeedResponse,
    ContractorSubmission,
    ContractorSubmitResponse,
    ContractorSyncResponse,
    ContractorSyncStatusResponse,
    ZohoAuthorizeResponse,
    ZohoCallbackResponse,
    ZohoPassthroughResponse,
)
from ..schemas.compliance import (
    CompliantWorkersResponse,
    ExpiryUpdateRequest,
    PendingWorkersResponse,
    PublishResponse,
    RejectRequest,
    RequirementActionResponse,
    RequirementItem,
    WorkerComplianceResponse,
)
from ..services import compliance
from ..services.audit import get_audit_events
from ..services.contractor_sync import get_sync_status, sync_contractors
from ..services.seed.seeder import seed_catalog
from ..services.zoho import CONTRACTORS_MODULE, ZohoAPIError, get_zoho_client

logger = logging.getLogger(__name__)

router = APIRouter()

_ADMIN = [Depends(require_roles(UserRole.ADMIN))]


def _action_response(result: dict | None) -> RequirementActionResponse:
    """Map a compliance service result onto the response or an HTTP error."""
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    if "error" in result:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result["error"])
    return RequirementActionResponse(
        message=result["message"],
        document=RequirementItem(**result["requirement"]),
    )


# ---------------------------------------------------------------------------
# Compliance review
# ---------------------------------------------------------------------------


@router.get("/compliance/pending", response_model=PendingWorkersResponse, dependencies=_ADMIN)
async def pending_workers(
    session: AsyncSession = Depends(get_db),
) -> PendingWorkersResponse:
    """Unpublished workers with documents waiting for review."""
    result = await compliance.list_pending_workers(session)
    return PendingWorkersResponse(**result)


@router.get("/compliance/compliant", response_model=CompliantWorkersResponse, dependencies=_ADMIN)
async def compliant_workers(
    session: AsyncSession = Depends(get_db),
) -> CompliantWorkersResponse:
    """Published workers, most recently updated first."""
    workers = await compliance.list_compliant_workers(session)
    return CompliantWorkersResponse(workers=workers, total=len(workers))


@router.get("/compliance/{worker_id}", response_model=WorkerComplianceResponse, dependencies=_ADMIN)
async def worker_compliance(
    worker_id: str,
    session: AsyncSession = Depends(get_db),
) -> WorkerComplianceResponse:
    """A worker's requirements grouped into review buckets, with counts."""
    if not worker_id.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Worker ID is required")
    try:
        result = await compliance.get_worker_compliance(session, worker_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to fetch compliance documents for worker %s", worker_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Failed to fetch compliance documents", "details": str(exc)},
        ) from exc
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Worker not found")
    return WorkerComplianceResponse(**result)


@router.post(
    "/compliance/{worker_id}/documents/{document_id}/approve",
    response_model=RequirementActionResponse,
    dependencies=_ADMIN,
)
async def approve_document(
    worker_id: str,
    document_id: str,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> RequirementActionResponse:
    result = await compliance.approve_requirement(session, user, worker_id, document_id)
    return _action_response(result)


@router.post(
    "/compliance/{worker_id}/documents/{document_id}/reject",
    response_model=RequirementActionResponse,
    dependencies=_ADMIN,
)
async def reject_document(
    worker_id: str,
    document_id: str,
    user: CurrentUser,
    body: RejectRequest,
    session: AsyncSession = Depends(get_db),
) -> RequirementActionResponse:
    result = await compliance.reject_requirement(
        session, user, worker_id, document_id, body.rejection_reason,
    )
    return _action_response(result)


@router.post(
    "/compliance/{worker_id}/documents/{document_id}/reset",
    response_model=RequirementActionResponse,
    dependencies=_ADMIN,
)
async def reset_document(
    worker_id: str,
    document_id: str,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> RequirementActionResponse:
    """Send a reviewed document back to the review queue."""
    result = await compliance.reset_requirement(session, user, worker_id, document_id)
    return _action_response(result)


@router.patch(
    "/compliance/{worker_id}/documents/{document_id}/expiry",
    response_model=RequirementActionResponse,
    dependencies=_ADMIN,
)
async def update_document_expiry(
    worker_id: str,
    document_id: str,
    user: CurrentUser,
    body: ExpiryUpdateRequest,
    session: AsyncSession = Depends(get_db),
) -> RequirementActionResponse:
    """Set the expiry date, or clear it with ``{"expiresAt": null}``."""
    result = await compliance.update_requirement_expiry(
        session, user, worker_id, document_id, body.expires_at,
    )
    return _action_response(result)


@router.patch("/compliance/{worker_id}/publish", response_model=PublishResponse, dependencies=_ADMIN)
async def publish_worker(
    worker_id: str,
    user: CurrentUser,
    body: dict = Body(...),
    session: AsyncSession = Depends(get_db),
) -> PublishResponse:
    """Mark a worker as compliance verified (published) or withdraw it."""
    is_published = body.get("isPublished")
    if not isinstance(is_published, bool):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="isPublished must be a boolean",
        )
    result = await compliance.set_worker_published(session, user, worker_id, is_published)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Worker not found")
    return PublishResponse(**result)


# ---------------------------------------------------------------------------
# Zoho contractor sync
# ---------------------------------------------------------------------------


def _configured_zoho():
    zoho = get_zoho_client()
    if not zoho.is_configured:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Zoho CRM is not configured",
        )
    return zoho


def _bad_gateway(action: str, exc: ZohoAPIError) -> HTTPException:
    logger.error("Zoho %s failed: %s", action, exc)
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail={"error": f"Failed to {action}", "details": str(exc)},
    )


@router.post("/zoho/sync-contractors", response_model=ContractorSyncResponse, dependencies=_ADMIN)
async def sync_zoho_contractors(
    since: datetime | None = None,
    session: AsyncSession = Depends(get_db),
) -> ContractorSyncResponse:
    """Import contractors from Zoho CRM. Pass since= for an incremental pull."""
    zoho = _configured_zoho()
    try:
        result = await sync_contractors(session, zoho, since=since)
    except ZohoAPIError as exc:
        raise _bad_gateway("sync contractors", exc) from exc

    stats = result["stats"]
    return ContractorSyncResponse(
        message=f"Synced {stats['synced']} of {stats['total']} contractors",
        **result,
    )


@router.get("/zoho/sync-status", response_model=ContractorSyncStatusResponse, dependencies=_ADMIN)
async def zoho_sync_status(
    session: AsyncSession = Depends(get_db),
) -> ContractorSyncStatusResponse:
    result = await get_sync_status(session)
    return ContractorSyncStatusResponse(**result)


@router.get("/zoho/authorize", response_model=ZohoAuthorizeResponse, dependencies=_ADMIN)
async def zoho_authorize() -> ZohoAuthorizeResponse:
    """URL to visit once to grant the app offline access to Zoho CRM."""
    zoho = get_zoho_client()
    if not zoho.client_id:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Zoho client ID is not configured",
        )
    return ZohoAuthorizeResponse(authorization_url=zoho.get_authorization_url())


# Zoho redirects the admin's browser here, so no bearer token is present.
@router.get("/zoho/callback", response_model=ZohoCallbackResponse)
async def zoho_callback(
    code: str | None = None,
    error: str | None = None,
) -> ZohoCallbackResponse:
    if error:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "Authorization failed", "details": error},
        )
    if not code:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No authorization code received",
        )
    zoho = get_zoho_client()
    if not zoho.client_id or not zoho.client_secret:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Zoho client credentials are not configured",
        )
    try:
        tokens = await zoho.exchange_code(code)
    except ZohoAPIError as exc:
        raise _bad_gateway("exchange authorization code", exc) from exc
    return ZohoCallbackResponse(
        message="Authorization successful. Store the refresh token as ZOHO_REFRESH_TOKEN.",
        refresh_token=tokens.get("refresh_token"),
        expires_in=tokens.get("expires_in"),
        api_domain=tokens.get("api_domain"),
    )


@router.post(
    "/zoho/submit-contractor",
    response_model=ContractorSubmitResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=_ADMIN,
)
async def submit_contractor(body: ContractorSubmission) -> ContractorSubmitResponse:
    """Create a contractor record in Zoho from a registration form."""
    missing = [
        name
        for name, value in (
            ("firstName", body.first_name),
            ("lastName", body.last_name),
            ("email", body.email),
        )
        if not value
    ]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "Missing required fields", "details": missing},
        )
    zoho = _configured_zoho()
    try:
        result = await zoho.create_contractor(body.model_dump(by_alias=True))
    except ZohoAPIError as exc:
        raise _bad_gateway("submit contractor", exc) from exc

    record = (result.get("data") or [{}])[0]
    return ContractorSubmitResponse(
        message="Contractor submitted to Zoho CRM",
        crm_record_id=(record.get("details") or {}).get("id"),
    )


@router.get("/zoho/modules", response_model=ZohoPassthroughResponse, dependencies=_ADMIN)
async def zoho_modules() -> ZohoPassthroughResponse:
    zoho = _configured_zoho()
    try:
        data = await zoho.get_modules()
    except ZohoAPIError as exc:
        raise _bad_gateway("list modules", exc) from exc
    return ZohoPassthroughResponse(data=data)


@router.get("/zoho/fields/{module}", response_model=ZohoPassthroughResponse, dependencies=_ADMIN)
async def zoho_module_fields(module: str) -> ZohoPassthroughResponse:
    zoho = _configured_zoho()
    try:
        data = await zoho.get_module_fields(module)
    except ZohoAPIError as exc:
        raise _bad_gateway(f"list fields for {module}", exc) from exc
    return ZohoPassthroughResponse(data=data)


@router.get("/zoho/search", response_model=ZohoPassthroughResponse, dependencies=_ADMIN)
async def zoho_search(
    criteria: str = Query(..., min_length=1),
    module: str = CONTRACTORS_MODULE,
) -> ZohoPassthroughResponse:
    """Search a module with Zoho criteria syntax, e.g. ``(Email:equals:a@b.com)``."""
    zoho = _configured_zoho()
    try:
        data = await zoho.search_records(module, criteria)
    except ZohoAPIError as exc:
        raise _bad_gateway("search records", exc) from exc
    return ZohoPassthroughResponse(data=data)


@router.get("/zoho/records/{record_id}", response_model=ZohoPassthroughResponse, dependencies=_ADMIN)
async def zoho_record(
    record_id: str,
    module: str = CONTRACTORS_MODULE,
) -> ZohoPassthroughResponse:
    """Fetch one CRM record to check which fields a submission populated."""
    zoho = _configured_zoho()
    try:
        record = await zoho.get_contact_by_id(record_id, module)
    except ZohoAPIError as exc:
        raise _bad_gateway("fetch record", exc) from exc
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Record not found")
    return ZohoPassthroughResponse(data=record)


# ---------------------------------------------------------------------------
# Catalog and audit
# ---------------------------------------------------------------------------


@router.post("/seed", response_model=CatalogSeedResponse, dependencies=_ADMIN)
async def seed_data(
    force: bool = False,
    session: AsyncSession = Depends(get_db),
) -> CatalogSeedResponse:
    """Load the service catalog. Pass force=true to wipe and re-seed."""
    result = await seed_catalog(session, force=force)
    return CatalogSeedResponse(**result)


@router.get("/audit", response_model=AuditEventsResponse, dependencies=_ADMIN)
async def audit_events(
    entity_id: str | None = Query(default=None, alias="entityId"),
    event_type: str | None = Query(default=None, alias="eventType"),
    limit: int = Query(default=100, ge=1, le=500),
    session: AsyncSession = Depends(get_db),
) -> AuditEventsResponse:
    """Most recent audit events, optionally filtered."""
    events = await get_audit_events(
        session, entity_id=entity_id, event_type=event_type, limit=limit,
    )
    return AuditEventsResponse(
        count=len(events),
        events=[AuditEventItem.model_validate(e) for e in events],
    )
