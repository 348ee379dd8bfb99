"""Audit trail for dashboard changes."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from folio.db.models import AuditLog

CREATE = "CREATE"
UPDATE = "UPDATE"
DELETE = "DELETE"
MOVE = "MOVE"
TOGGLE = "TOGGLE"
REORDER = "REORDER"


def stage_audit_log(
    db_session: AsyncSession,
    action: str,
    entity: str,
    entity_id: Any,
    user_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> AuditLog:
    """Add an audit row to the session without committing.

    The row is written by whichever transaction commits the change it
    describes, so a rolled back change leaves no audit trace.
    """
    entry = AuditLog(
        action=action,
        entity=entity,
        entity_id=str(entity_id),
        user_id=str(user_id) if user_id is not None else None,
        details=details or {},
    )
    db_session.add(entry)
    return entry


async def list_audit_logs(
    db_session: AsyncSession,
    entity: str | None = None,
    entity_id: Any = None,
    limit: int = 50,
) -> list[AuditLog]:
    """Most recent audit rows first, optionally for one entity."""
    query = select(AuditLog)
    if entity:
        query = query.where(AuditLog.entity == entity)
    if entity_id is not None:
        query = query.where(AuditLog.entity_id == str(entity_id))
    query = query.order_by(AuditLog.created_at.desc()).limit(limit)
    result = await db_session.execute(query)
    return list(result.scalars().all())
