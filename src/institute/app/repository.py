"""Generic CRUD repository over a single table.

Writes are confirmed by reading the row back after commit, so callers
always see what was stored; a failed write is rolled back and leaves the
table unchanged.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, ClassVar

import aiosqlite

from .schema import new_id, utc_now

if TYPE_CHECKING:
    from collections.abc import Mapping

    from aiosqlite import Connection

LOGGER = logging.getLogger(__name__)


class TableQueries:
    """Repository for one table.

    Subclasses name the table, its writable columns and its default ordering.
    Table and column names are class constants, never caller input.
    """

    TABLE: ClassVar[str]
    COLUMNS: ClassVar[tuple[str, ...]]
    FILTERABLE: ClassVar[tuple[str, ...]] = ("is_active",)
    ORDER_BY: ClassVar[str] = "created_at DESC"
    HAS_UPDATED_AT: ClassVar[bool] = True

    def __init__(self, connection: Connection) -> None:
        self.connection = connection

    def _writable(self, values: Mapping[str, Any]) -> dict[str, Any]:
        unknown = set(values) - set(self.COLUMNS)
        if unknown:
            msg = f"Unknown columns for {self.TABLE}: {sorted(unknown)}"
            raise ValueError(msg)
        return dict(values)

    async def list_rows(
        self,
        *,
        active_only: bool = False,
        filters: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """List rows in the table's default order.

        :param active_only: Only return rows with ``is_active`` set
        :param filters: Equality filters on filterable columns
        :return: Rows as dictionaries
        :raises ValueError: If a filter names a column that cannot be filtered
        """
        conditions = []
        params: list[Any] = []

        if active_only:
            conditions.append("is_active = 1")

        for column, value in (filters or {}).items():
            if column not in self.FILTERABLE:
                msg = f"Cannot filter {self.TABLE} by {column}"
                raise ValueError(msg)
            conditions.append(f"{column} = ?")
            params.append(value)

        where_clause = " WHERE " + " AND ".join(conditions) if conditions else ""
        query = f"SELECT * FROM {self.TABLE}{where_clause} ORDER BY {self.ORDER_BY};"  # noqa: S608

        async with self.connection.execute(query, params) as cursor:
            rows = await cursor.fetchall()
        return [dict(row) for row in rows]

    async def get(self, record_id: str) -> dict[str, Any] | None:
        """Get a single row by id."""
        async with self.connection.execute(
            f"SELECT * FROM {self.TABLE} WHERE id = ?;",  # noqa: S608
            (record_id,),
        ) as cursor:
            row = await cursor.fetchone()
        return dict(row) if row else None

    async def insert(self, values: Mapping[str, Any]) -> dict[str, Any] | None:
        """Insert a row and return it as stored.

        :param values: Column values; id and timestamps are filled in
        :return: The stored row, or None if the insert failed
        """
        row = self._writable(values)
        row["id"] = new_id()
        row["created_at"] = utc_now()
        if self.HAS_UPDATED_AT:
            row["updated_at"] = row["created_at"]

        columns = ", ".join(row)
        placeholders = ", ".join("?" for _ in row)
        try:
            await self.connection.execute(
                f"INSERT INTO {self.TABLE} ({columns}) VALUES ({placeholders});",  # noqa: S608
                tuple(row.values()),
            )
            await self.connection.commit()
        except aiosqlite.Error:
            await self.connection.rollback()
            LOGGER.exception("Error inserting into %s", self.TABLE)
            return None

        return await self.get(row["id"])

    async def update(
        self,
        record_id: str,
        values: Mapping[str, Any],
    ) -> dict[str, Any] | None:
        """Apply a partial update and return the row as stored.

        Last write wins; there is no version check.

        :param record_id: The row to update
        :param values: Columns to change
        :return: The stored row, or None if it does not exist or the update failed
        """
        changes = self._writable(values)
        if self.HAS_UPDATED_AT:
            changes["updated_at"] = utc_now()
        if not changes:
            return await self.get(record_id)

        assignments = ", ".join(f"{column} = ?" for column in changes)
        try:
            cursor = await self.connection.execute(
                f"UPDATE {self.TABLE} SET {assignments} WHERE id = ?;",  # noqa: S608
                (*changes.values(), record_id),
            )
            await self.connection.commit()
        except aiosqlite.Error:
            await self.connection.rollback()
            LOGGER.exception("Error updating %s in %s", record_id, self.TABLE)
            return None

        if cursor.rowcount == 0:
            return None
        return await self.get(record_id)

    async def delete(self, record_id: str) -> int:
        """Delete a row.

        :return: Number of rows deleted
        """
        try:
            cursor = await self.connection.execute(
                f"DELETE FROM {self.TABLE} WHERE id = ?;",  # noqa: S608
                (record_id,),
            )
            await self.connection.commit()
        except aiosqlite.Error:
            await self.connection.rollback()
            LOGGER.exception("Error deleting %s from %s", record_id, self.TABLE)
            return 0
        return cursor.rowcount
