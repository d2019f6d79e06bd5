"""Models for auth and user-management requests and responses."""

from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field

from institute.common import Capabilities, Role, User


class CapabilitiesResponse(BaseModel):
    """Capabilities derived from the user's role.

    The admin panel gates its controls on these; the server enforces the
    same table on every route.
    """

    can_edit: bool
    can_delete: bool
    can_manage_users: bool

    @classmethod
    def from_capabilities(cls, capabilities: Capabilities) -> CapabilitiesResponse:
        return cls(
            can_edit=capabilities.can_edit,
            can_delete=capabilities.can_delete,
            can_manage_users=capabilities.can_manage_users,
        )


class UserResponse(BaseModel):
    """Data structure representing a user.

    :param user_id: The user id
    :param email: Login email
    :param full_name: Display name
    :param role: The role of the user, or None for no access
    :param is_active: Whether the account may sign in
    """

    user_id: str
    email: str
    full_name: str
    role: Role | None
    is_active: bool
    created_at: str | None = None
    capabilities: CapabilitiesResponse

    @classmethod
    def from_user(cls, user: User) -> UserResponse:
        """Create UserResponse from User.

        :param user: User instance
        :return: UserResponse instance
        """
        return cls(
            user_id=user.user_id,
            email=user.email,
            full_name=user.full_name,
            role=user.role,
            is_active=user.is_active,
            created_at=user.created_at,
            capabilities=CapabilitiesResponse.from_capabilities(user.capabilities),
        )


class LoginResponse(BaseModel):
    """Response model for login requests.

    :param access_token: The JWT access token
    :param user: The authenticated user information
    """

    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class CreateUserRequest(BaseModel):
    """Body for creating a user."""

    email: EmailStr
    password: str
    full_name: str = Field(min_length=1, max_length=100)
    role: Role | None = None


class UpdateUserRequest(BaseModel):
    """Body for updating a user; omitted fields are left unchanged."""

    email: EmailStr | None = None
    password: str | None = None
    full_name: str | None = Field(default=None, min_length=1, max_length=100)

    def is_empty(self) -> bool:
        return self.email is None and not self.password and self.full_name is None


class RoleRequest(BaseModel):
    role: Role


class StatusRequest(BaseModel):
    is_active: bool
