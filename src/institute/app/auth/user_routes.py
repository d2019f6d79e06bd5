"""Privileged user-lifecycle routes.

Every route here requires the caller to already hold ``super_admin``.
"""

import logging
from typing import TYPE_CHECKING, Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from institute.common import Capability, User

from .models import (
    CreateUserRequest,
    RoleRequest,
    StatusRequest,
    UpdateUserRequest,
    UserResponse,
)

if TYPE_CHECKING:
    from institute.app.activity import ActivityQueries

    from .queries import UserQueries
    from .validation import Validate

LOGGER = logging.getLogger(__name__)


async def _require_user(user_queries: "UserQueries", user_id: str) -> User:
    user = await user_queries.get_user(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user


def _refuse_self(user_id: str, admin: User, detail: str) -> None:
    if user_id == admin.user_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


async def _create_user(
    user_queries: "UserQueries",
    body: CreateUserRequest,
) -> User:
    user, error = await user_queries.create_user(
        body.email,
        body.password,
        body.full_name,
        body.role,
    )
    if error or user is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error or "Failed to create user",
        )
    return user


async def _update_user(
    user_queries: "UserQueries",
    user_id: str,
    body: UpdateUserRequest,
) -> User:
    if body.is_empty():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No update data provided",
        )
    await _require_user(user_queries, user_id)
    error = await user_queries.update_user(
        user_id,
        email=body.email,
        password=body.password or None,
        full_name=body.full_name,
    )
    if error:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)
    return await _require_user(user_queries, user_id)


def configure_user_router(
    router: APIRouter,
    user_queries: "UserQueries",
    activity: "ActivityQueries",
    validate: "Validate",
) -> APIRouter:
    """Configure the user-management router.

    :param router: The APIRouter to configure
    :param user_queries: The UserQueries instance for database operations
    :param activity: Activity log for recording changes
    :param validate: The Validate instance for authorization
    :return: The configured APIRouter
    """
    require_manager = validate.capability(Capability.MANAGE_USERS)

    @router.get("", response_model=list[UserResponse])
    async def list_users(
        _admin: Annotated[User, Depends(require_manager)],
    ) -> list[UserResponse]:
        return [UserResponse.from_user(user) for user in await user_queries.list_users()]

    @router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
    async def create_user(
        body: CreateUserRequest,
        admin: Annotated[User, Depends(require_manager)],
    ) -> UserResponse:
        user = await _create_user(user_queries, body)
        await activity.log(
            admin,
            "create_user",
            {"user_id": user.user_id, "email": user.email, "role": user.role},
        )
        return UserResponse.from_user(user)

    @router.patch("/{user_id}", response_model=UserResponse)
    async def update_user(
        user_id: str,
        body: UpdateUserRequest,
        admin: Annotated[User, Depends(require_manager)],
    ) -> UserResponse:
        user = await _update_user(user_queries, user_id, body)
        await activity.log(
            admin,
            "update_user",
            {
                "user_id": user_id,
                "fields": sorted(body.model_dump(exclude_none=True, exclude={"password"}))
                + (["password"] if body.password else []),
            },
        )
        return UserResponse.from_user(user)

    @router.delete("/{user_id}")
    async def delete_user(
        user_id: str,
        admin: Annotated[User, Depends(require_manager)],
    ) -> str:
        _refuse_self(user_id, admin, "Cannot delete own account")
        if not await user_queries.delete_user(user_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found",
            )
        await activity.log(admin, "delete_user", {"user_id": user_id})
        return "User deleted successfully"

    @router.put("/{user_id}/role", response_model=UserResponse)
    async def set_role(
        user_id: str,
        body: RoleRequest,
        admin: Annotated[User, Depends(require_manager)],
    ) -> UserResponse:
        _refuse_self(user_id, admin, "Cannot change own role")
        if not await user_queries.set_role(user_id, body.role):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found",
            )
        await activity.log(admin, "set_role", {"user_id": user_id, "role": body.role})
        return UserResponse.from_user(await _require_user(user_queries, user_id))

    @router.delete("/{user_id}/role", response_model=UserResponse)
    async def remove_role(
        user_id: str,
        admin: Annotated[User, Depends(require_manager)],
    ) -> UserResponse:
        _refuse_self(user_id, admin, "Cannot remove own role")
        await _require_user(user_queries, user_id)
        await user_queries.remove_role(user_id)
        await activity.log(admin, "remove_role", {"user_id": user_id})
        return UserResponse.from_user(await _require_user(user_queries, user_id))

    @router.patch("/{user_id}/status", response_model=UserResponse)
    async def set_status(
        user_id: str,
        body: StatusRequest,
        admin: Annotated[User, Depends(require_manager)],
    ) -> UserResponse:
        _refuse_self(user_id, admin, "Cannot change own status")
        if not await user_queries.set_active(user_id, is_active=body.is_active):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found",
            )
        await activity.log(
            admin,
            "set_status",
            {"user_id": user_id, "is_active": body.is_active},
        )
        return UserResponse.from_user(await _require_user(user_queries, user_id))

    return router
