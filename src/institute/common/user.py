"""Fundamental user data model for app.

Roles are a closed set; every permission check in the application goes
through :class:`Capabilities` so that route guards and the account payload
shown to the admin panel are derived from the same table.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Role(StrEnum):
    """Roles a user can hold, at most one at a time."""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    VIEWER = "viewer"

    @classmethod
    def parse(cls, value: object) -> Role | None:
        """Convert a stored role value to a Role.

        :param value: Raw role value, possibly None or unrecognized
        :return: The matching Role, or None if the value is not a known role
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class Capability(StrEnum):
    """Permissions derived from a role, never stored."""

    EDIT = "edit"
    DELETE = "delete"
    MANAGE_USERS = "manage_users"


_EDITORS = frozenset({Role.SUPER_ADMIN, Role.ADMIN})


@dataclass(frozen=True)
class Capabilities:
    """Boolean permissions held by a principal."""

    can_edit: bool = False
    can_delete: bool = False
    can_manage_users: bool = False

    @classmethod
    def for_role(cls, role: Role | str | None) -> Capabilities:
        """Derive capabilities from a role.

        Unknown and missing roles get no capabilities at all.

        :param role: The principal's role value
        :return: Capabilities for that role
        """
        parsed = Role.parse(role)
        if parsed is None:
            return cls()
        return cls(
            can_edit=parsed in _EDITORS,
            can_delete=parsed is Role.SUPER_ADMIN,
            can_manage_users=parsed is Role.SUPER_ADMIN,
        )

    def allows(self, capability: Capability) -> bool:
        """Check whether a single capability is granted."""
        if capability is Capability.EDIT:
            return self.can_edit
        if capability is Capability.DELETE:
            return self.can_delete
        if capability is Capability.MANAGE_USERS:
            return self.can_manage_users
        return False


@dataclass
class User:
    """An authenticated principal with its profile and role."""

    user_id: str
    email: str
    full_name: str = ""
    role: Role | None = None
    is_active: bool = True
    created_at: str | None = None

    @property
    def capabilities(self) -> Capabilities:
        """Capabilities granted by this user's role."""
        return Capabilities.for_role(self.role)

    @property
    def is_staff(self) -> bool:
        """Whether the user holds any role at all."""
        return self.role is not None
