"""Response models for inquiries."""

from pydantic import BaseModel, computed_field

from institute.common import to_nepali_date_time


class Inquiry(BaseModel):
    """A stored contact form submission."""

    id: str
    name: str
    email: str
    phone: str | None
    subject: str
    message: str
    is_read: bool
    created_at: str

    @computed_field
    @property
    def received_bs(self) -> str:
        """Time received, in the Bikram Sambat calendar."""
        return to_nepali_date_time(self.created_at)


class InquiryReceipt(BaseModel):
    """Response to a successful public submission."""

    success: bool = True
    inquiry: Inquiry
    notified: bool
