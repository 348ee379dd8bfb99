"""Role definitions for dashboard users."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class RoleDefinition:
    """Definition of a role with its permissions."""

    name: str
    permissions: set[str] = field(default_factory=set)
    display_name: str | None = None
    description: str | None = None


def create_role(
    name: str,
    *permissions: str,
    display_name: str | None = None,
    description: str | None = None,
) -> RoleDefinition:
    """Create a role definition with the given permissions.

    Args:
        name: The unique identifier for the role
        *permissions: Permission strings granted by this role
        display_name: Human-readable name for the role
        description: Description of the role's purpose

    Returns:
        A RoleDefinition instance
    """
    return RoleDefinition(
        name=name,
        permissions=set(permissions),
        display_name=display_name or name.title(),
        description=description,
    )


ADMIN = create_role(
    "admin",
    "manage-content",
    "manage-users",
    "view-audit-log",
    display_name="Administrator",
    description="Full access to every content collection",
)

EDITOR = create_role(
    "editor",
    "manage-content",
    display_name="Editor",
    description="Can curate slides, albums and menus",
)

AUTHOR = create_role(
    "author",
    "write-posts",
    display_name="Author",
    description="Writes posts but cannot rearrange site content",
)

ROLE_DEFINITIONS: dict[str, RoleDefinition] = {role.name: role for role in [ADMIN, EDITOR, AUTHOR]}


def get_role_definition(name: str) -> RoleDefinition | None:
    """Get a role definition by name."""
    return ROLE_DEFINITIONS.get(name)


def roles_with_permission(permission: str) -> list[str]:
    """Names of the roles granting ``permission``."""
    return [role.name for role in ROLE_DEFINITIONS.values() if permission in role.permissions]
