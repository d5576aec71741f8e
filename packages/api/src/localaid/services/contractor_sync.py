# This project was developed with assistance from AI tools.
"""Import contractors from Zoho CRM into ``contractor_profiles``.

Records are upserted by Zoho contact id in batches. Each record runs in its
own savepoint so one bad record does not abort the batch. Profile photos are
copied from Zoho attachments into blob storage.
"""

import logging
import re
import time
from datetime import UTC, datetime

from db import ContractorProfile
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import AsyncRetrying, RetryError, stop_after_attempt, wait_exponential

from ..core.config import settings
from .storage import generate_file_name, get_storage_service
from .zoho import ZohoAPIError, ZohoClient

logger = logging.getLogger(__name__)

PHOTO_ATTEMPTS = 3
MAX_ERROR_MESSAGES = 10

_photo_wait = wait_exponential(multiplier=1, min=1, max=4)
_last_run: dict | None = None

_TRUE = {"yes", "true"}
_FALSE = {"no", "false"}


def _split_name(value: str) -> tuple[str, str]:
    if "," in value:
        last, _, first = value.partition(",")
        return first.strip(), last.strip()
    parts = value.split()
    return (parts[0] if parts else ""), " ".join(parts[1:])


def parse_name(contact: dict) -> tuple[str, str] | None:
    """First and last name from the contact, trying the alternate name fields.

    A missing half is filled with ``N/A``; None when neither half is found.
    """
    first = contact.get("First_Name") or contact.get("First_Name_1") or ""
    last = contact.get("Last_Name") or contact.get("Last_Name_1") or ""

    for field in ("Full_Name", "Name"):
        if not first and not last and contact.get(field):
            first, last = _split_name(contact[field])

    if "," in first and not last:
        first, _, last = first.partition(",")
        first, last = first.strip(), last.strip()

    if not first and last:
        first = "N/A"
    if first and not last:
        last = "N/A"
    if not first or not last:
        return None
    return first, last


def parse_boolean(value) -> bool | None:
    """Zoho picklists arrive as "Yes"/"No" or single-element lists."""
    if isinstance(value, bool):
        return value
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    return None


def parse_years(value) -> int | None:
    if value is None or value == "":
        return None
    match = re.match(r"\s*(\d+)", str(value))
    if match is None:
        return None
    years = int(match.group(1))
    return years if 0 <= years <= 100 else None


def parse_services(contact: dict) -> list[str]:
    services: list[str] = []
    for field in ("Primary_Service", "Secondary_Service_s", "MISC_service", "Services_Offered"):
        value = contact.get(field)
        if not value:
            continue
        items = value if isinstance(value, list) else str(value).split(",")
        for item in items:
            item = str(item).strip()
            if item and item not in services:
                services.append(item)
    return services


def transform_contact(contact: dict) -> dict | None:
    """Zoho contact -> ContractorProfile column values (without the photo)."""
    names = parse_name(contact)
    if names is None:
        logger.warning("Zoho contact %s has no usable name", contact.get("id"))
        return None
    first_name, last_name = names

    email = contact.get("Email") or contact.get("Email_Address")
    if not email:
        email = f"no-email-{contact['id']}-{int(time.time() * 1000)}@placeholder.local"

    return {
        "zoho_contact_id": str(contact["id"]),
        "first_name": first_name,
        "last_name": last_name,
        "email": email.strip().lower(),
        "phone": contact.get("Phone") or contact.get("Phone_1") or contact.get("Contact_Number"),
        "city": contact.get("City") or contact.get("City_1"),
        "state": (
            contact.get("State_Region_Province")
            or contact.get("State_Region_Province_1")
            or contact.get("State")
        ),
        "postcode": contact.get("Postal_Zip_Code") or contact.get("Postal_Zip_Code_1"),
        "services": parse_services(contact),
        "years_of_experience": parse_years(contact.get("Years_of_Experience")),
        "has_vehicle": bool(parse_boolean(contact.get("Do_you_drive_and_have_access_to_vehicle"))),
        "has_abn": bool(parse_boolean(contact.get("Do_you_have_an_ABN")) or contact.get("ABN")),
    }


def unique_email(email: str, contact_id: str) -> str:
    local, _, domain = email.partition("@")
    return f"{local}-{contact_id}@{domain}"


async def rehost_photo(zoho: ZohoClient, contact: dict) -> str | None:
    """Copy the first submitted photo into blob storage. None on any failure."""
    submissions = contact.get("Photo_Submission")
    if not isinstance(submissions, list) or not submissions:
        return None
    photo = submissions[0]
    attachment_id = photo.get("attachment_Id")
    if not attachment_id or not (photo.get("preview_Url") or photo.get("download_Url")):
        return None

    url = f"{zoho.api_url}/Contacts/{contact['id']}/Attachments/{attachment_id}"
    key = generate_file_name(str(contact["id"]), "profile", photo.get("file_Name") or "photo.jpg")
    storage = get_storage_service()
    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(PHOTO_ATTEMPTS), wait=_photo_wait
        ):
            with attempt:
                content, content_type = await zoho.download(url)
                return await storage.upload_file(content, f"contractors/{key}", content_type)
    except RetryError as exc:
        logger.error(
            "Photo upload for contact %s failed after %d attempts: %s",
            contact["id"],
            PHOTO_ATTEMPTS,
            exc.last_attempt.exception(),
        )
    return None


async def upsert_contractor(session: AsyncSession, zoho: ZohoClient, contact: dict) -> str:
    """Insert or update one contractor. Returns ``created`` or ``updated``.

    Raises ValueError when the contact cannot be transformed.
    """
    data = transform_contact(contact)
    if data is None:
        raise ValueError("Failed to transform contact data")

    result = await session.execute(
        select(ContractorProfile).where(ContractorProfile.zoho_contact_id == data["zoho_contact_id"])
    )
    existing = result.scalar_one_or_none()

    if existing is None:
        clash = await session.execute(
            select(ContractorProfile.zoho_contact_id).where(ContractorProfile.email == data["email"])
        )
        owner = clash.scalar_one_or_none()
        if owner is not None and owner != data["zoho_contact_id"]:
            data["email"] = unique_email(data["email"], data["zoho_contact_id"])

    data["photo_url"] = await rehost_photo(zoho, contact)
    data["last_synced_at"] = datetime.now(UTC)

    if existing is None:
        session.add(ContractorProfile(**data))
        return "created"

    if data["photo_url"] is None:
        data.pop("photo_url")
    for key, value in data.items():
        setattr(existing, key, value)
    return "updated"


async def sync_contractors(
    session: AsyncSession,
    zoho: ZohoClient,
    batch_size: int | None = None,
    since: datetime | None = None,
) -> dict:
    """Pull contractors from Zoho and upsert them locally.

    With ``since`` only records modified after that time are fetched.
    """
    global _last_run
    started = time.monotonic()
    batch_size = batch_size or settings.CONTRACTOR_SYNC_BATCH_SIZE

    if since is not None:
        contacts = await zoho.get_modified_since(since)
    else:
        contacts = await zoho.get_all_contractors()
    stats = {"total": len(contacts), "synced": 0, "created": 0, "updated": 0, "skipped": 0, "errors": 0}
    error_messages: list[str] = []

    for start in range(0, len(contacts), batch_size):
        batch = contacts[start : start + batch_size]
        logger.info(
            "Syncing contractor batch %d/%d",
            start // batch_size + 1,
            (len(contacts) + batch_size - 1) // batch_size,
        )
        for contact in batch:
            contact_id = contact.get("id")
            if not contact_id:
                stats["skipped"] += 1
                continue
            try:
                async with session.begin_nested():
                    action = await upsert_contractor(session, zoho, contact)
            except (ValueError, SQLAlchemyError, ZohoAPIError) as exc:
                stats["errors"] += 1
                error_messages.append(f"Contact {contact_id}: {exc}")
                logger.warning("Contractor %s not synced: %s", contact_id, exc)
                continue
            stats["synced"] += 1
            stats[action] += 1
        await session.commit()

    duration_ms = int((time.monotonic() - started) * 1000)
    logger.info(
        "Contractor sync finished in %dms: created=%d updated=%d errors=%d",
        duration_ms,
        stats["created"],
        stats["updated"],
        stats["errors"],
    )
    summary = {
        "stats": stats,
        "duration_ms": duration_ms,
        "error_messages": error_messages[:MAX_ERROR_MESSAGES],
    }
    _last_run = {**summary, "finished_at": datetime.now(UTC)}
    return summary


def _contractor_brief(profile: ContractorProfile) -> dict:
    return {
        "id": profile.id,
        "first_name": profile.first_name,
        "last_name": profile.last_name,
        "email": profile.email,
        "city": profile.city,
        "state": profile.state,
        "last_synced_at": profile.last_synced_at,
    }


async def get_sync_status(session: AsyncSession) -> dict:
    """Stored contractor count, the five most recently synced, and the last run."""
    count = await session.execute(select(func.count(ContractorProfile.id)))
    recent = await session.execute(
        select(ContractorProfile)
        .where(ContractorProfile.last_synced_at.is_not(None))
        .order_by(ContractorProfile.last_synced_at.desc())
        .limit(5)
    )
    recent_rows = list(recent.scalars().all())
    latest = recent_rows[0] if recent_rows else None
    return {
        "total_contractors": count.scalar() or 0,
        "last_synced_at": latest.last_synced_at if latest else None,
        "last_synced_contractor": f"{latest.first_name} {latest.last_name}" if latest else None,
        "recent_syncs": [_contractor_brief(p) for p in recent_rows],
        "last_run": _last_run,
    }
