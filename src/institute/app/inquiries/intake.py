"""Contact form intake: validate, persist, then alert administrators.

The inquiry is committed before any alert is attempted, and nothing that
goes wrong while alerting undoes it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import aiosqlite

from .models import Inquiry
from .notifier import NotificationError
from .validation import validate_inquiry

if TYPE_CHECKING:
    from collections.abc import Mapping

    from institute.app.auth import UserQueries

    from .notifier import InquiryNotifier
    from .queries import InquiryQueries

LOGGER = logging.getLogger(__name__)


class InquiryStorageError(Exception):
    """Raised when a valid inquiry could not be saved."""


@dataclass
class IntakeResult:
    """Outcome of a submission.

    :param inquiry: The stored inquiry, or None if validation failed
    :param errors: Validation messages by field
    :param notified: Whether an alert was handed to the mail provider
    """

    inquiry: Inquiry | None = None
    errors: dict[str, str] = field(default_factory=dict)
    notified: bool = False

    @property
    def accepted(self) -> bool:
        return self.inquiry is not None


class InquiryIntake:
    """Accepts contact form submissions."""

    def __init__(
        self,
        inquiries: InquiryQueries,
        users: UserQueries,
        notifier: InquiryNotifier | None,
    ) -> None:
        """Create the intake.

        :param inquiries: Inquiry repository
        :param users: User repository, used to resolve alert recipients
        :param notifier: Alert sender, or None when mail is not configured
        """
        self.inquiries = inquiries
        self.users = users
        self.notifier = notifier

    async def submit(self, data: Mapping[str, Any]) -> IntakeResult:
        """Validate and store a submission, then alert administrators.

        :param data: Raw form fields
        :return: The result; ``errors`` is populated and nothing is stored when
        validation fails
        :raises InquiryStorageError: If a valid inquiry could not be saved
        """
        form, errors = validate_inquiry(data)
        if form is None:
            return IntakeResult(errors=errors)

        row = await self.inquiries.insert({**form.model_dump(), "is_read": False})
        if row is None:
            msg = "Failed to save inquiry"
            raise InquiryStorageError(msg)

        inquiry = Inquiry.model_validate(row)
        LOGGER.info("Inquiry %s saved", inquiry.id)

        return IntakeResult(inquiry=inquiry, notified=await self._notify(inquiry))

    async def _notify(self, inquiry: Inquiry) -> bool:
        if self.notifier is None:
            LOGGER.error("Email service not configured, no alert for inquiry %s", inquiry.id)
            return False

        try:
            recipients = await self.users.list_admin_emails()
        except aiosqlite.Error:
            LOGGER.exception("Error fetching admin emails for inquiry %s", inquiry.id)
            return False

        if not recipients:
            LOGGER.warning("No active administrators to alert for inquiry %s", inquiry.id)
            return False

        try:
            await self.notifier.send_inquiry_alert(inquiry, recipients)
        except NotificationError:
            LOGGER.exception("Alert for inquiry %s failed; inquiry kept", inquiry.id)
            return False
        return True
