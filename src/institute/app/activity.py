"""Audit trail of admin actions."""

import json
import logging
from typing import TYPE_CHECKING, Annotated, Any

import aiosqlite
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from institute.common import Capability, User

from .schema import new_id, utc_now

if TYPE_CHECKING:
    from aiosqlite import Connection

    from .auth import Validate

LOGGER = logging.getLogger(__name__)

_MAX_ENTRIES = 500


class ActivityEntry(BaseModel):
    id: str
    user_id: str
    action: str
    details: dict[str, Any] | None
    created_at: str


class ActivityQueries:
    """Repository for the user activity log."""

    INSERT = """
        INSERT INTO user_activity_log (id, user_id, action, details, created_at)
        VALUES (?, ?, ?, ?, ?);
        """

    LIST = """
        SELECT id, user_id, action, details, created_at
        FROM user_activity_log ORDER BY created_at DESC LIMIT ?;
        """

    def __init__(self, connection: "Connection") -> None:
        self.connection = connection

    async def log(
        self,
        user: User,
        action: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Record an action; failures are logged and never surface to the caller."""
        payload = json.dumps(details, default=str) if details is not None else None
        try:
            await self.connection.execute(
                ActivityQueries.INSERT,
                (new_id(), user.user_id, action, payload, utc_now()),
            )
            await self.connection.commit()
        except aiosqlite.Error:
            await self.connection.rollback()
            LOGGER.exception("Error logging activity %s for %s", action, user.user_id)

    async def recent(self, limit: int = 100) -> list[ActivityEntry]:
        async with self.connection.execute(ActivityQueries.LIST, (limit,)) as cursor:
            rows = await cursor.fetchall()
        return [
            ActivityEntry(
                id=row["id"],
                user_id=row["user_id"],
                action=row["action"],
                details=json.loads(row["details"]) if row["details"] else None,
                created_at=row["created_at"],
            )
            for row in rows
        ]


def configure_activity_router(
    router: APIRouter,
    activity: ActivityQueries,
    validate: "Validate",
) -> APIRouter:
    """Configure the activity log router.

    :param router: The APIRouter to configure
    :param activity: The activity repository
    :param validate: The Validate instance for authorization
    :return: The configured APIRouter
    """

    @router.get("")
    async def list_activity(
        _user: Annotated[User, Depends(validate.capability(Capability.MANAGE_USERS))],
        limit: Annotated[int, Query(ge=1, le=_MAX_ENTRIES)] = 100,
    ) -> list[ActivityEntry]:
        return await activity.recent(limit)

    return router
