"""FastAPI dependency validators for authentication and authorization."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from institute.common import User

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from institute.common import Capability

    from .queries import UserQueries
    from .security_manager import SecurityManager


bearer_scheme = HTTPBearer(auto_error=False)

LOGGER = logging.getLogger(__name__)


class Validate:
    """Holds validator dependencies for FastAPI authentication/authorization."""

    def __init__(
        self,
        user_queries: UserQueries,
        security_manager: SecurityManager,
    ) -> None:
        """Create a new validator instance.

        :param user_queries: User repository
        :param security_manager: JWT security manager
        """
        self.user_queries = user_queries
        self.security_manager = security_manager

    async def jwt_token(
        self,
        credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),  # noqa: B008
    ) -> User:
        """Validate the bearer token and load the current user."""
        if credentials is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="No authorization header",
                headers={"WWW-Authenticate": "Bearer"},
            )

        user_id = self.security_manager.verify_token(credentials.credentials)
        user = await self.user_queries.get_user(user_id) if user_id else None

        if user is None or not user.is_active:
            LOGGER.debug("Token validation failed for user id: %s", user_id)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token",
                headers={"WWW-Authenticate": "Bearer"},
            )

        return user

    def staff(self) -> Callable[..., Awaitable[User]]:
        """Return a dependency requiring any role."""

        async def validator(user: User = Depends(self.jwt_token)) -> User:  # noqa: B008
            if not user.is_staff:
                LOGGER.debug("Staff validation failed for user: %s", user.email)
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="You do not have access to the admin panel",
                )
            return user

        return validator

    def capability(self, capability: Capability) -> Callable[..., Awaitable[User]]:
        """Return a dependency requiring a single capability."""

        async def validator(user: User = Depends(self.jwt_token)) -> User:  # noqa: B008
            if not user.capabilities.allows(capability):
                LOGGER.debug(
                    "Capability %s denied for user: %s",
                    capability,
                    user.email,
                )
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail=f"Permission denied: requires {capability} access",
                )
            return user

        return validator
