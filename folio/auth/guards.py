"""Session-derived identity and role checks."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from litestar.exceptions import NotAuthorizedException

from folio.auth.roles import get_role_definition
from folio.lib.exceptions import PermissionDenied

if TYPE_CHECKING:
    from litestar.connection import ASGIConnection
    from litestar.handlers.base import BaseRouteHandler

SESSION_USER_ID = "user_id"
SESSION_USER_ROLE = "role"


@dataclass(frozen=True)
class Actor:
    """The user performing a dashboard action."""

    user_id: str | None
    role: str | None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


ANONYMOUS = Actor(user_id=None, role=None)


def get_actor(connection: ASGIConnection) -> Actor:
    session = connection.scope.get("session") or {}
    user_id = session.get(SESSION_USER_ID)
    if not user_id:
        return ANONYMOUS
    role = session.get(SESSION_USER_ROLE)
    # Unknown roles carry no rights
    if role and get_role_definition(role) is None:
        role = None
    return Actor(user_id=str(user_id), role=role)


def require_role(actor: Actor, allowed_roles: Iterable[str]) -> None:
    """Raise PermissionDenied unless the actor holds one of ``allowed_roles``."""
    if actor.role is None or actor.role not in set(allowed_roles):
        raise PermissionDenied()


async def auth_guard(connection: ASGIConnection, _: BaseRouteHandler) -> None:
    """Reject requests without a logged-in session."""
    if not get_actor(connection).is_authenticated:
        raise NotAuthorizedException("Authentication required")
