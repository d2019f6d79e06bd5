"""Tests for roles and the capabilities they grant."""

import pytest

from institute.common import Capabilities, Capability, Role, User


@pytest.mark.parametrize(
    ("role", "can_edit", "can_delete", "can_manage_users"),
    [
        (Role.SUPER_ADMIN, True, True, True),
        (Role.ADMIN, True, False, False),
        (Role.VIEWER, False, False, False),
        (None, False, False, False),
    ],
)
def test_capabilities_for_role(
    role: Role | None,
    *,
    can_edit: bool,
    can_delete: bool,
    can_manage_users: bool,
) -> None:
    """Test the role to capability table."""
    capabilities = Capabilities.for_role(role)

    assert capabilities.can_edit is can_edit
    assert capabilities.can_delete is can_delete
    assert capabilities.can_manage_users is can_manage_users


@pytest.mark.parametrize("value", ["owner", "Admin", "", 3])
def test_unknown_role_grants_nothing(value: object) -> None:
    """Test that unrecognized role values fail closed."""
    assert Role.parse(value) is None
    assert Capabilities.for_role(value) == Capabilities()


def test_parse_accepts_stored_values() -> None:
    """Test that stored role strings map back to roles."""
    assert Role.parse("super_admin") is Role.SUPER_ADMIN
    assert Role.parse("viewer") is Role.VIEWER
    assert Role.parse(Role.ADMIN) is Role.ADMIN


def test_allows() -> None:
    """Test single-capability checks."""
    admin = Capabilities.for_role(Role.ADMIN)

    assert admin.allows(Capability.EDIT)
    assert not admin.allows(Capability.DELETE)
    assert not admin.allows(Capability.MANAGE_USERS)


def test_user_without_role_is_not_staff() -> None:
    """Test that a signed-in user with no role gets no admin access."""
    user = User("user-1", "someone@example.com")

    assert not user.is_staff
    assert user.capabilities == Capabilities()


def test_user_capabilities_follow_role() -> None:
    """Test that user capabilities are derived from the role."""
    user = User("user-1", "boss@example.com", role=Role.SUPER_ADMIN)

    assert user.is_staff
    assert user.capabilities.can_manage_users
