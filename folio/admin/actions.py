"""The boundary between dashboard requests and content services.

:func:`run_action` checks the actor's role before the operation touches the
database and turns every :class:`~folio.lib.exceptions.FolioError` into an
:class:`ActionResult`. Anything else propagates to the Litestar exception
handlers.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from litestar import Response
from litestar.status_codes import HTTP_200_OK

from folio.auth.guards import Actor, require_role
from folio.lib.exceptions import FolioError, StorageError, ValidationError, log_unexpected


@dataclass
class ActionResult:
    """Outcome of a dashboard action."""

    success: bool
    error: str | None = None
    field_errors: dict[str, str] = field(default_factory=dict)
    data: Any = None
    status_code: int = HTTP_200_OK

    @classmethod
    def ok(cls, data: Any = None) -> ActionResult:
        return cls(success=True, data=data)

    @classmethod
    def from_error(cls, exc: FolioError) -> ActionResult:
        return cls(
            success=False,
            error=exc.message,
            field_errors=dict(exc.field_errors) if isinstance(exc, ValidationError) else {},
            status_code=exc.status_code,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "error": self.error,
            "field_errors": self.field_errors,
            "data": self.data,
        }

    def to_response(self) -> Response:
        return Response(content=self.to_dict(), status_code=self.status_code, media_type="application/json")


async def run_action(
    actor: Actor,
    allowed_roles: Iterable[str],
    operation: Callable[[], Awaitable[Any]],
) -> ActionResult:
    """Run ``operation`` on behalf of ``actor``.

    Args:
        actor: The user performing the action
        allowed_roles: Roles permitted to run it
        operation: Zero-argument coroutine factory doing the work

    Returns:
        ``ActionResult.ok`` with the operation's return value, or a failed
        result carrying the error message, field errors and status code
    """
    try:
        require_role(actor, allowed_roles)
        data = await operation()
    except FolioError as exc:
        if isinstance(exc, StorageError):
            log_unexpected("Dashboard action failed for user {user_id}", user_id=actor.user_id)
        return ActionResult.from_error(exc)
    return ActionResult.ok(data)
