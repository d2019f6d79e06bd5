"""Email alerts to administrators about new inquiries.

Mail is sent through the provider's HTTP API; the default endpoint follows
the Resend ``POST /emails`` contract (``from``, ``to``, ``subject``,
``html``, bearer token).
"""

from __future__ import annotations

import html
import logging
from typing import TYPE_CHECKING, Protocol

import httpx

if TYPE_CHECKING:
    from .models import Inquiry

LOGGER = logging.getLogger(__name__)


class NotificationError(Exception):
    """Raised when an alert could not be delivered to the mail provider."""


class InquiryNotifier(Protocol):
    """Anything able to alert administrators about an inquiry."""

    async def send_inquiry_alert(self, inquiry: Inquiry, recipients: list[str]) -> None:
        """Send one alert addressed to all recipients.

        :raises NotificationError: If the alert could not be sent
        """


def render_inquiry_email(inquiry: Inquiry, institute_name: str) -> str:
    """Render the HTML body of an inquiry alert; every value is escaped."""
    name = html.escape(inquiry.name)
    email = html.escape(inquiry.email)
    subject = html.escape(inquiry.subject)
    message = html.escape(inquiry.message).replace("\n", "<br>")
    if inquiry.phone:
        phone = html.escape(inquiry.phone)
        phone_cell = f'<a href="tel:{phone}" style="color: #667eea;">{phone}</a>'
    else:
        phone_cell = "Not provided"

    cell = "padding: 10px 0; border-bottom: 1px solid #e5e7eb;"
    label = f'style="{cell} font-weight: bold; color: #374151;"'
    value = f'style="{cell} color: #6b7280;"'
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <div style="background: #667eea; padding: 30px; text-align: center;">
    <h1 style="color: white; margin: 0;">New Inquiry Received</h1>
  </div>
  <div style="padding: 30px; background: #f9fafb;">
    <h2 style="color: #1f2937; margin-bottom: 20px;">Contact Details</h2>
    <table style="width: 100%; border-collapse: collapse;">
      <tr><td {label}>Name:</td><td {value}>{name}</td></tr>
      <tr><td {label}>Email:</td>
        <td {value}><a href="mailto:{email}" style="color: #667eea;">{email}</a></td></tr>
      <tr><td {label}>Phone:</td><td {value}>{phone_cell}</td></tr>
      <tr><td {label}>Subject:</td><td {value}>{subject}</td></tr>
    </table>
    <div style="margin-top: 20px;">
      <h3 style="color: #374151; margin-bottom: 10px;">Message:</h3>
      <div style="background: white; padding: 15px; border-radius: 8px; color: #6b7280;">
        {message}
      </div>
    </div>
  </div>
  <div style="padding: 20px; background: #1f2937; text-align: center;">
    <p style="color: #9ca3af; margin: 0; font-size: 14px;">
      {html.escape(institute_name)} - Admin Notification
    </p>
  </div>
</div>
"""


class EmailNotifier:
    """Sends inquiry alerts through an HTTP mail API using httpx."""

    def __init__(
        self,
        api_key: str,
        api_url: str,
        sender: str,
        institute_name: str,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Create a notifier.

        :param api_key: Mail provider API key
        :param api_url: Mail provider send endpoint
        :param sender: ``From`` address
        :param institute_name: Name shown in the email footer
        :param client: Optional shared client; a short-lived one is used otherwise
        """
        self.api_key = api_key
        self.api_url = api_url
        self.sender = sender
        self.institute_name = institute_name
        self.client = client

    async def _post(self, client: httpx.AsyncClient, payload: dict) -> httpx.Response:
        response = await client.post(
            self.api_url,
            json=payload,
            headers={"Authorization": f"Bearer {self.api_key}"},
        )
        response.raise_for_status()
        return response

    async def send_inquiry_alert(self, inquiry: Inquiry, recipients: list[str]) -> None:
        """Send one alert addressed to all recipients.

        :raises NotificationError: If the provider rejects the request or is unreachable
        """
        payload = {
            "from": self.sender,
            "to": recipients,
            "subject": f"New Inquiry from {inquiry.name}",
            "html": render_inquiry_email(inquiry, self.institute_name),
        }
        try:
            if self.client is not None:
                response = await self._post(self.client, payload)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._post(client, payload)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            msg = f"Failed to send inquiry alert: {e}"
            raise NotificationError(msg) from e

        LOGGER.info(
            "Inquiry alert for %s sent to %d recipient(s), status %s",
            inquiry.id,
            len(recipients),
            response.status_code,
        )
