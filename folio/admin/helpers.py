"""Shared helpers for admin controllers."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from litestar import Request, Response

from folio.admin.actions import run_action
from folio.auth.guards import Actor, get_actor


def current_actor(request: Request) -> Actor:
    return get_actor(request)


def manager_roles(request: Request) -> list[str]:
    """Roles allowed to manage content, from the ``content`` settings section."""
    return list(request.app.state.settings.content.manager_roles)


async def respond(
    request: Request,
    operation: Callable[[], Awaitable[Any]],
    allowed_roles: Iterable[str] | None = None,
) -> Response:
    """Run ``operation`` as the requesting user and render its ActionResult.

    ``allowed_roles`` defaults to the configured content manager roles.
    """
    if allowed_roles is None:
        allowed_roles = manager_roles(request)
    result = await run_action(current_actor(request), allowed_roles, operation)
    return result.to_response()
