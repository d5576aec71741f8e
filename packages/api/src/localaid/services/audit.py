# This project was developed with assistance from AI tools.
"""Audit log service.

Writes append-only audit trail entries for admin review actions,
registrations and sync runs, and serves the admin audit query endpoint.
"""

import logging

from db import AuditLog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


async def write_audit_event(
    session: AsyncSession,
    *,
    event_type: str,
    user_id: str | None = None,
    user_role: str | None = None,
    entity_type: str | None = None,
    entity_id: str | None = None,
    event_data: dict | None = None,
) -> AuditLog:
    """Add a single audit row to the session and flush it.

    The caller owns the transaction: the row is committed together with the
    change it describes.

    Args:
        session: Database session.
        event_type: Event category (e.g. 'requirement_approved').
        user_id: User who triggered the event.
        user_role: Role at the time of the event.
        entity_type: Kind of record affected (e.g. 'verification_requirement').
        entity_id: Primary key of the affected record.
        event_data: Arbitrary JSON-serializable event payload.
    """
    audit = AuditLog(
        event_type=event_type,
        user_id=user_id,
        user_role=user_role,
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else None,
        event_data=event_data,
    )
    session.add(audit)
    await session.flush()
    return audit


async def get_audit_events(
    session: AsyncSession,
    *,
    entity_id: str | None = None,
    event_type: str | None = None,
    limit: int = 100,
) -> list[AuditLog]:
    """Most recent audit rows, optionally filtered by entity or event type."""
    stmt = select(AuditLog)
    if entity_id is not None:
        stmt = stmt.where(AuditLog.entity_id == entity_id)
    if event_type is not None:
        stmt = stmt.where(AuditLog.event_type == event_type)
    stmt = stmt.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc()).limit(limit)
    result = await session.execute(stmt)
    return list(result.scalars().all())
