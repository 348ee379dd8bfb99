"""Audit trail admin controller."""

from __future__ import annotations

from typing import Annotated

from litestar import Controller, Request, get
from litestar.params import Parameter
from litestar.response import Response
from sqlalchemy.ext.asyncio import AsyncSession

from folio.admin.helpers import respond
from folio.auth.guards import auth_guard
from folio.auth.roles import roles_with_permission
from folio.controllers.helpers import serialize_audit_log
from folio.db.services import audit_service


class AuditLogAdminController(Controller):
    """Read-only listing of recorded dashboard changes."""

    path = "/admin/audit-logs"
    guards = [auth_guard]

    @get("/")
    async def list_logs(
        self,
        request: Request,
        db_session: AsyncSession,
        entity: str | None = None,
        entity_id: str | None = None,
        limit: Annotated[int, Parameter(ge=1, le=200)] = 50,
    ) -> Response:
        """Most recent changes first, optionally for one entity."""

        async def operation():
            logs = await audit_service.list_audit_logs(db_session, entity=entity, entity_id=entity_id, limit=limit)
            return [serialize_audit_log(log) for log in logs]

        return await respond(request, operation, roles_with_permission("view-audit-log"))
