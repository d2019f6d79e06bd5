"""User account, profile and role database queries.

Using the UserQueries class as a repository for authentication and
user-management queries.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import aiosqlite

from institute.app.schema import new_id, utc_now
from institute.common import Role, User

if TYPE_CHECKING:
    from aiosqlite import Connection

    from .security_manager import SecurityManager

LOGGER = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class UserQueries:
    """Repository for user-related queries."""

    COUNT_USERS = """SELECT COUNT(*) FROM users;"""

    SELECT_USER = """
        SELECT u.user_id, u.email, p.full_name, p.is_active, p.created_at, r.role
        FROM users u
        JOIN profiles p ON p.user_id = u.user_id
        LEFT JOIN user_roles r ON r.user_id = u.user_id
        """

    GET_USER_AUTH_INFO = """
        SELECT user_id, hashed_password FROM users WHERE email = ?;
        """

    GET_USER_ID_BY_EMAIL = """
        SELECT user_id FROM users WHERE email = ?;
        """

    ADD_USER = """
        INSERT INTO users (user_id, email, hashed_password, created_at)
        VALUES (?, ?, ?, ?);
        """

    ADD_PROFILE = """
        INSERT INTO profiles (id, user_id, full_name, email, is_active, created_at, updated_at)
        VALUES (?, ?, ?, ?, 1, ?, ?);
        """

    UPSERT_ROLE = """
        INSERT INTO user_roles (id, user_id, role) VALUES (?, ?, ?)
        ON CONFLICT (user_id) DO UPDATE SET role = excluded.role;
        """

    DELETE_ROLE = """DELETE FROM user_roles WHERE user_id = ?;"""

    UPDATE_STATUS = """
        UPDATE profiles SET is_active = ?, updated_at = ? WHERE user_id = ?;
        """

    DELETE_USER = """DELETE FROM users WHERE user_id = ?;"""

    ADMIN_EMAILS = """
        SELECT p.email
        FROM profiles p
        JOIN user_roles r ON r.user_id = p.user_id
        WHERE r.role IN ('admin', 'super_admin') AND p.is_active = 1
        ORDER BY p.created_at;
        """

    def __init__(self, connection: Connection, security_manager: SecurityManager) -> None:
        self.connection = connection
        self.security_manager = security_manager

    @staticmethod
    def _row_to_user(row: aiosqlite.Row) -> User:
        return User(
            user_id=row["user_id"],
            email=row["email"],
            full_name=row["full_name"],
            role=Role.parse(row["role"]),
            is_active=bool(row["is_active"]),
            created_at=row["created_at"],
        )

    async def count_users(self) -> int:
        """Return the number of users in the users table."""
        async with self.connection.execute(UserQueries.COUNT_USERS) as cursor:
            row = await cursor.fetchone()
        return row[0] if row else 0

    async def get_user(self, user_id: str) -> User | None:
        """Get a user with profile and role by id.

        :param user_id: The user id
        :return: The User, or None if no such user exists
        """
        async with self.connection.execute(
            UserQueries.SELECT_USER + " WHERE u.user_id = ?;",
            (user_id,),
        ) as cursor:
            row = await cursor.fetchone()
        return self._row_to_user(row) if row else None

    async def list_users(self) -> list[User]:
        """List every user with their role, newest first."""
        async with self.connection.execute(
            UserQueries.SELECT_USER + " ORDER BY p.created_at DESC;",
        ) as cursor:
            rows = await cursor.fetchall()
        return [self._row_to_user(row) for row in rows]

    async def authenticate_user(self, email: str, password: str) -> User | None:
        """Verify credentials and return the active user.

        :param email: The user's email
        :param password: The plaintext password to verify
        :return: The User if authentication succeeds and the user is active,
        None otherwise
        """
        async with self.connection.execute(
            UserQueries.GET_USER_AUTH_INFO,
            (_normalize_email(email),),
        ) as cursor:
            row = await cursor.fetchone()
        if row is None:
            return None
        if not self.security_manager.check_password(password, row["hashed_password"]):
            return None
        user = await self.get_user(row["user_id"])
        if user is None or not user.is_active:
            return None
        return user

    async def _email_taken(self, email: str, excluding_user_id: str | None = None) -> bool:
        async with self.connection.execute(
            UserQueries.GET_USER_ID_BY_EMAIL,
            (email,),
        ) as cursor:
            row = await cursor.fetchone()
        return row is not None and row["user_id"] != excluding_user_id

    async def create_user(
        self,
        email: str,
        password: str,
        full_name: str,
        role: Role | None,
    ) -> tuple[User | None, str | None]:
        """Create a user account with its profile and optional role.

        :param email: Login email
        :param password: The desired password
        :param full_name: Display name stored on the profile
        :param role: Role to assign, or None for no access
        :return: (user, None) on success, (None, error message) otherwise
        """
        error = self.security_manager.validate_password(password)
        if error:
            return None, error

        email = _normalize_email(email)
        if await self._email_taken(email):
            return None, "A user with this email already exists"

        user_id = new_id()
        now = utc_now()
        try:
            await self.connection.execute(
                UserQueries.ADD_USER,
                (user_id, email, self.security_manager.hash_password(password), now),
            )
            await self.connection.execute(
                UserQueries.ADD_PROFILE,
                (new_id(), user_id, full_name.strip(), email, now, now),
            )
            if role is not None:
                await self.connection.execute(
                    UserQueries.UPSERT_ROLE,
                    (new_id(), user_id, str(role)),
                )
            await self.connection.commit()
        except aiosqlite.Error:
            await self.connection.rollback()
            LOGGER.exception("Error creating user %s", email)
            return None, "Failed to create user"

        LOGGER.info("Created user %s with role %s", email, role)
        return await self.get_user(user_id), None

    async def update_user(
        self,
        user_id: str,
        *,
        email: str | None = None,
        password: str | None = None,
        full_name: str | None = None,
    ) -> str | None:
        """Update a user's email, password and/or full name.

        :param user_id: The user to update
        :param email: New email, or None to keep
        :param password: New password, or None to keep
        :param full_name: New full name, or None to keep
        :return: An error message if the update failed, None otherwise
        """
        if await self.get_user(user_id) is None:
            return "User does not exist"

        if password is not None:
            error = self.security_manager.validate_password(password)
            if error:
                return error

        if email is not None:
            email = _normalize_email(email)
            if await self._email_taken(email, excluding_user_id=user_id):
                return "A user with this email already exists"

        now = utc_now()
        try:
            if email is not None:
                await self.connection.execute(
                    "UPDATE users SET email = ? WHERE user_id = ?;",
                    (email, user_id),
                )
                await self.connection.execute(
                    "UPDATE profiles SET email = ?, updated_at = ? WHERE user_id = ?;",
                    (email, now, user_id),
                )
            if password is not None:
                await self.connection.execute(
                    "UPDATE users SET hashed_password = ? WHERE user_id = ?;",
                    (self.security_manager.hash_password(password), user_id),
                )
            if full_name is not None:
                await self.connection.execute(
                    "UPDATE profiles SET full_name = ?, updated_at = ? WHERE user_id = ?;",
                    (full_name.strip(), now, user_id),
                )
            await self.connection.commit()
        except aiosqlite.Error:
            await self.connection.rollback()
            LOGGER.exception("Error updating user %s", user_id)
            return "Failed to update user"
        return None

    async def set_role(self, user_id: str, role: Role) -> bool:
        """Assign a role, replacing any existing one.

        :return: True if the role was stored, False if the user does not exist
        """
        if await self.get_user(user_id) is None:
            return False
        try:
            await self.connection.execute(
                UserQueries.UPSERT_ROLE,
                (new_id(), user_id, str(role)),
            )
            await self.connection.commit()
        except aiosqlite.Error:
            await self.connection.rollback()
            LOGGER.exception("Error assigning role %s to %s", role, user_id)
            return False
        return True

    async def remove_role(self, user_id: str) -> int:
        """Remove a user's role, leaving them without access.

        :return: Number of rows deleted
        """
        try:
            cursor = await self.connection.execute(UserQueries.DELETE_ROLE, (user_id,))
            await self.connection.commit()
        except aiosqlite.Error:
            await self.connection.rollback()
            LOGGER.exception("Error removing role from %s", user_id)
            return 0
        return cursor.rowcount

    async def set_active(self, user_id: str, *, is_active: bool) -> int:
        """Activate or deactivate a user's profile.

        :return: Number of rows updated
        """
        try:
            cursor = await self.connection.execute(
                UserQueries.UPDATE_STATUS,
                (int(is_active), utc_now(), user_id),
            )
            await self.connection.commit()
        except aiosqlite.Error:
            await self.connection.rollback()
            LOGGER.exception("Error updating status of %s", user_id)
            return 0
        return cursor.rowcount

    async def delete_user(self, user_id: str) -> int:
        """Delete the user together with profile and role.

        :return: Number of user rows deleted
        """
        try:
            await self.connection.execute(UserQueries.DELETE_ROLE, (user_id,))
            await self.connection.execute(
                "DELETE FROM profiles WHERE user_id = ?;",
                (user_id,),
            )
            cursor = await self.connection.execute(UserQueries.DELETE_USER, (user_id,))
            await self.connection.commit()
        except aiosqlite.Error:
            await self.connection.rollback()
            LOGGER.exception("Error deleting user %s", user_id)
            return 0
        return cursor.rowcount

    async def list_admin_emails(self) -> list[str]:
        """Emails of every active admin and super admin."""
        async with self.connection.execute(UserQueries.ADMIN_EMAILS) as cursor:
            rows = await cursor.fetchall()
        return [row["email"] for row in rows]
