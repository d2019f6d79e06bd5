"""Authentication routes for the FastAPI application.

Provides endpoints for login, logout, and the caller's own account.
"""

import logging
from typing import TYPE_CHECKING, Annotated

from fastapi import APIRouter, Depends, Form, HTTPException, status

from institute.common import User

from .models import LoginResponse, UserResponse

if TYPE_CHECKING:
    from .queries import UserQueries
    from .security_manager import SecurityManager
    from .validation import Validate

LOGGER = logging.getLogger(__name__)


async def _login(
    user_queries: "UserQueries",
    security_manager: "SecurityManager",
    email: str,
    password: str,
) -> LoginResponse:
    user = await user_queries.authenticate_user(email, password)

    if not user:
        LOGGER.info("Failed login attempt for %s", email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    access_token = security_manager.create_access_token(user)

    return LoginResponse(
        access_token=access_token,
        user=UserResponse.from_user(user),
    )


async def _change_password(
    user_queries: "UserQueries",
    new_password: str,
    user: User,
) -> str:
    error = await user_queries.update_user(user.user_id, password=new_password)

    if error:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error,
        )
    return "Password changed successfully"


def configure_auth_router(
    router: APIRouter,
    user_queries: "UserQueries",
    security_manager: "SecurityManager",
    validate: "Validate",
) -> APIRouter:
    """Configure the authentication router.

    :param router: The APIRouter to configure
    :param user_queries: The UserQueries instance for database operations
    :param security_manager: The SecurityManager instance for JWT operations
    :param validate: The Validate instance for authentication
    :return: The configured APIRouter
    """

    @router.post("/login", response_model=LoginResponse)
    async def login(
        email: Annotated[str, Form()],
        password: Annotated[str, Form()],
    ) -> LoginResponse:
        return await _login(user_queries, security_manager, email, password)

    @router.post("/logout")
    def logout() -> str:
        """With JWT, logout is handled client-side by discarding the token."""
        return "Success"

    @router.get("/account", response_model=UserResponse)
    def get_account_info(
        user: Annotated[User, Depends(validate.jwt_token)],
    ) -> UserResponse:
        return UserResponse.from_user(user)

    @router.patch("/account/password")
    async def change_password_route(
        new_password: Annotated[str, Form(...)],
        user: Annotated[User, Depends(validate.jwt_token)],
    ) -> str:
        return await _change_password(user_queries, new_password, user)

    return router
