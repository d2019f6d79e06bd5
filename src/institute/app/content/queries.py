"""Repositories for the public site content tables."""

from typing import Any

from institute.app.repository import TableQueries


class CourseQueries(TableQueries):
    TABLE = "courses"
    COLUMNS = (
        "title",
        "description",
        "duration",
        "level",
        "image",
        "price",
        "is_active",
        "display_order",
    )
    FILTERABLE = ("is_active", "level")
    ORDER_BY = "display_order ASC, created_at DESC"


class FacultyQueries(TableQueries):
    TABLE = "faculty"
    COLUMNS = (
        "name",
        "designation",
        "qualification",
        "specialization",
        "image",
        "is_active",
        "display_order",
    )
    ORDER_BY = "display_order ASC, created_at DESC"


class FounderQueries(TableQueries):
    TABLE = "founder_message"
    COLUMNS = ("name", "designation", "message", "image", "is_active")


class NoticeQueries(TableQueries):
    """Notices and news items, including those shown as a popup."""

    TABLE = "notices"
    COLUMNS = (
        "title",
        "content",
        "type",
        "priority",
        "show_as_popup",
        "is_active",
    )
    FILTERABLE = ("is_active", "type", "priority", "show_as_popup")

    LIST_POPUP = """
        SELECT id, title, content, priority, created_at
        FROM notices
        WHERE show_as_popup = 1 AND is_active = 1
        ORDER BY
            CASE priority
                WHEN 'urgent' THEN 0
                WHEN 'important' THEN 1
                ELSE 2
            END,
            created_at DESC;
        """

    async def list_popup(self) -> list[dict[str, Any]]:
        """Active popup notices, most urgent first, then newest first."""
        async with self.connection.execute(NoticeQueries.LIST_POPUP) as cursor:
            rows = await cursor.fetchall()
        return [dict(row) for row in rows]
