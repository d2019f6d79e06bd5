"""Repository for contact form inquiries."""

from typing import Any

from institute.app.repository import TableQueries


class InquiryQueries(TableQueries):
    TABLE = "inquiries"
    COLUMNS = ("name", "email", "phone", "subject", "message", "is_read")
    FILTERABLE = ("is_read",)
    HAS_UPDATED_AT = False

    async def mark_read(self, record_id: str) -> dict[str, Any] | None:
        """Set the read flag and return the stored inquiry."""
        return await self.update(record_id, {"is_read": True})
