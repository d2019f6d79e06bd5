"""Contact form intake and inquiry management."""

from .intake import InquiryIntake, InquiryStorageError, IntakeResult
from .models import Inquiry, InquiryReceipt
from .notifier import EmailNotifier, InquiryNotifier, NotificationError
from .queries import InquiryQueries
from .routes import configure_inquiry_router
from .validation import InquiryForm, validate_inquiry

__all__ = [
    "EmailNotifier",
    "Inquiry",
    "InquiryForm",
    "InquiryIntake",
    "InquiryNotifier",
    "InquiryQueries",
    "InquiryReceipt",
    "InquiryStorageError",
    "IntakeResult",
    "NotificationError",
    "configure_inquiry_router",
    "validate_inquiry",
]
