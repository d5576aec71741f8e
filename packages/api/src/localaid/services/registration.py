# This project was developed with assistance from AI tools.
"""Account registration for workers and clients.

Worker registration runs inside a background job (see ``tasks.registration``)
so the HTTP request only validates and enqueues. Client registration is
synchronous. Both create the login, the profile and any dependent rows in a
single transaction.
"""

import logging
import re

from db import (
    ClientProfile,
    Participant,
    ServiceCategory,
    User,
    UserRole,
    UserStatus,
    VerificationStatus,
    WorkerProfile,
    WorkerService,
)
from db.enums import Relationship
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.auth import hash_password
from ..schemas.auth import UserContext
from ..schemas.registration import ClientRegistrationRequest
from .audit import write_audit_event

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL = "An account with this email already exists"

# "Parramatta, NSW 2150" / "Parramatta NSW 2150"
_LOCATION_RE = re.compile(
    r"^\s*(?P<city>[^,]+?)\s*,?\s+(?P<state>NSW|VIC|QLD|WA|SA|TAS|ACT|NT)\b\s*(?P<postcode>\d{4})?\s*$",
    re.IGNORECASE,
)


class RegistrationError(Exception):
    """Registration failed for a reason the caller should see."""


def normalize_email(email: str) -> str:
    return email.strip().lower()


def parse_location(location: str | None) -> dict:
    """Split a free-text Australian location into city, state and postcode."""
    parsed = {"city": None, "state": None, "postal_code": None}
    if not location or not location.strip():
        return parsed
    match = _LOCATION_RE.match(location)
    if match is None:
        parsed["city"] = location.strip()
        return parsed
    parsed["city"] = match.group("city").strip()
    parsed["state"] = match.group("state").upper()
    parsed["postal_code"] = match.group("postcode")
    return parsed


async def _email_taken(session: AsyncSession, email: str) -> bool:
    result = await session.execute(select(func.count(User.id)).where(User.email == email))
    return (result.scalar() or 0) > 0


async def build_worker_services(
    session: AsyncSession,
    service_names: list[str],
    subcategory_ids: list[str],
) -> list[WorkerService]:
    """WorkerService rows for the selected services.

    A selected category gets one row per selected subcategory that belongs to
    it, or a single category-only row when none of its subcategories were
    picked. Unknown category names are skipped.
    """
    names = [n.strip() for n in service_names if n and n.strip()]
    if not names:
        return []

    stmt = (
        select(ServiceCategory)
        .options(selectinload(ServiceCategory.subcategories))
        .where(ServiceCategory.name.in_(names))
    )
    result = await session.execute(stmt)
    categories = {c.name: c for c in result.unique().scalars().all()}

    selected = set(subcategory_ids)
    rows: list[WorkerService] = []
    for name in dict.fromkeys(names):
        category = categories.get(name)
        if category is None:
            logger.warning("Registration references unknown service %r", name)
            continue
        picked = [s for s in category.subcategories if s.id in selected]
        if not picked:
            rows.append(WorkerService(category_id=category.id, category_name=category.name))
            continue
        for sub in picked:
            rows.append(
                WorkerService(
                    category_id=category.id,
                    category_name=category.name,
                    subcategory_id=sub.id,
                    subcategory_name=sub.name,
                )
            )
    return rows


async def process_worker_registration(session: AsyncSession, payload: dict) -> dict:
    """Create a worker account from a queued registration payload.

    ``payload`` uses the camelCase keys the registration form posts, with
    either ``password`` or an already hashed ``passwordHash``. Returns
    ``{"success": True, "user_id": ...}`` or ``{"success": False, "error": ...}``;
    only unexpected failures raise, so the job runner can retry them.
    """
    email = (payload.get("email") or "").strip()
    password = payload.get("password") or ""
    password_hash = payload.get("passwordHash")
    if not email or not (password or password_hash):
        return {"success": False, "error": "Email and password are required"}

    first_name = (payload.get("firstName") or "").strip()
    last_name = (payload.get("lastName") or "").strip()
    mobile = (payload.get("mobile") or "").strip()
    if not first_name or not last_name or not mobile:
        return {"success": False, "error": "First name, last name, and mobile are required"}

    email = normalize_email(email)
    if await _email_taken(session, email):
        return {"success": False, "error": DUPLICATE_EMAIL}

    location = parse_location(payload.get("location"))
    user = User(
        email=email,
        password_hash=password_hash or hash_password(password),
        role=UserRole.WORKER,
        status=UserStatus.ACTIVE,
    )
    profile = WorkerProfile(
        user=user,
        first_name=first_name,
        last_name=last_name,
        mobile=mobile,
        photos=payload.get("photos") or [],
        introduction=payload.get("introduction"),
        age=payload.get("age"),
        gender=payload.get("gender"),
        city=location["city"],
        state=location["state"],
        postal_code=location["postal_code"],
        is_published=False,
        verification_status=VerificationStatus.NOT_STARTED,
        profile_completed=True,
    )
    profile.services = await build_worker_services(
        session,
        payload.get("services") or [],
        payload.get("supportWorkerCategories") or [],
    )
    session.add(user)
    session.add(profile)

    try:
        await session.flush()
        await write_audit_event(
            session,
            event_type="worker_registered",
            user_id=user.id,
            user_role=UserRole.WORKER.value,
            entity_type="worker_profile",
            entity_id=profile.id,
            event_data={"services": [ws.service_string for ws in profile.services]},
        )
        await session.commit()
    except IntegrityError:
        await session.rollback()
        logger.info("Duplicate worker registration for %s", email)
        return {"success": False, "error": DUPLICATE_EMAIL}

    logger.info("Worker %s registered with %d services", user.id, len(profile.services))
    return {"success": True, "user_id": user.id}


async def register_client(session: AsyncSession, data: ClientRegistrationRequest) -> dict:
    """Create a client login, its profile and the first participant.

    Raises RegistrationError when the email is taken.
    """
    email = normalize_email(data.email)
    if await _email_taken(session, email):
        raise RegistrationError(DUPLICATE_EMAIL)

    if data.is_self_managed:
        participant_first, participant_last = data.first_name, data.last_name
        relationship = Relationship.OTHER
    else:
        participant_first = data.client_first_name or data.first_name
        participant_last = data.client_last_name or data.last_name
        relationship = data.relationship_to_client or Relationship.OTHER

    location = parse_location(data.location)
    user = User(
        email=email,
        password_hash=hash_password(data.password),
        role=UserRole.CLIENT,
        status=UserStatus.ACTIVE,
    )
    profile = ClientProfile(
        user=user,
        first_name=data.first_name,
        last_name=data.last_name,
        mobile=data.mobile,
        is_self_managed=data.is_self_managed,
    )
    participant = Participant(
        client_profile=profile,
        first_name=participant_first,
        last_name=participant_last,
        relationship_to_client=relationship,
        funding_type=data.funding_type,
        services={k: v.model_dump(by_alias=True) for k, v in data.services_requested.items()},
        postal_code=location["postal_code"],
    )
    session.add_all([user, profile, participant])

    try:
        await session.flush()
        await write_audit_event(
            session,
            event_type="client_registered",
            user_id=user.id,
            user_role=UserRole.CLIENT.value,
            entity_type="client_profile",
            entity_id=profile.id,
            event_data={"is_self_managed": data.is_self_managed},
        )
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise RegistrationError(DUPLICATE_EMAIL) from exc

    logger.info("Client %s registered", user.id)
    return {"user_id": user.id, "participant_id": participant.id}


def participant_to_dict(participant: Participant) -> dict:
    return {
        "id": participant.id,
        "first_name": participant.first_name,
        "last_name": participant.last_name,
        "relationship_to_client": participant.relationship_to_client,
        "funding_type": participant.funding_type,
        "services": participant.services,
        "postal_code": participant.postal_code,
    }


async def get_client_participants(session: AsyncSession, user: UserContext) -> list[dict] | None:
    """The caller's participants, oldest first. None without a client profile."""
    stmt = (
        select(ClientProfile)
        .options(selectinload(ClientProfile.participants))
        .where(ClientProfile.user_id == user.user_id)
    )
    result = await session.execute(stmt)
    profile = result.unique().scalar_one_or_none()
    if profile is None:
        return None
    participants = sorted(
        profile.participants,
        key=lambda p: (p.created_at is None, p.created_at),
    )
    return [participant_to_dict(p) for p in participants]


async def _owned_participant(
    session: AsyncSession, user: UserContext, participant_id: str
) -> Participant | None:
    stmt = (
        select(Participant)
        .join(ClientProfile, Participant.client_profile_id == ClientProfile.id)
        .where(Participant.id == participant_id, ClientProfile.user_id == user.user_id)
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def get_client_participant(
    session: AsyncSession, user: UserContext, participant_id: str
) -> dict | None:
    """One of the caller's participants. None when missing or not theirs."""
    participant = await _owned_participant(session, user, participant_id)
    return participant_to_dict(participant) if participant else None


async def update_client_participant(
    session: AsyncSession,
    user: UserContext,
    participant_id: str,
    changes: dict,
) -> dict | None:
    """Apply a partial update to one of the caller's participants.

    Only keys present in ``changes`` are written. Names cannot be cleared.
    """
    for name, label in (("first_name", "First name"), ("last_name", "Last name")):
        if name in changes and not changes[name]:
            return {"error": f"{label} is required"}

    participant = await _owned_participant(session, user, participant_id)
    if participant is None:
        return None

    for key, value in changes.items():
        setattr(participant, key, value)
    await write_audit_event(
        session,
        event_type="participant_updated",
        user_id=user.user_id,
        user_role=user.role.value,
        entity_type="participant",
        entity_id=participant.id,
        event_data={"fields": sorted(changes)},
    )
    await session.commit()
    await session.refresh(participant)
    logger.info("Client %s updated participant %s", user.user_id, participant.id)
    return participant_to_dict(participant)
