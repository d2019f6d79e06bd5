"""Validation of contact form submissions.

Submissions come from an untrusted public form. Failures are reported as
a map of field name to message and are never treated as exceptional.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_SUBJECT = "General Inquiry"

_FIELD_MESSAGES = {
    "name": "Name must be between 2 and 100 characters",
    "email": "Please enter a valid email address",
    "phone": "Phone number must be between 10 and 20 characters",
    "subject": "Subject must be at most 200 characters",
    "message": "Message must be between 10 and 1000 characters",
}


class InquiryForm(BaseModel):
    """A contact form submission that passed validation."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: str = Field(min_length=2, max_length=100)
    email: str = Field(max_length=255)
    phone: str | None = Field(default=None, min_length=10, max_length=20)
    subject: str = Field(default=DEFAULT_SUBJECT, max_length=200)
    message: str = Field(min_length=10, max_length=1000)

    @field_validator("phone", mode="before")
    @classmethod
    def _blank_phone_is_absent(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("subject", mode="before")
    @classmethod
    def _blank_subject_is_default(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_SUBJECT
        return value

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value: str) -> str:
        try:
            return validate_email(value, check_deliverability=False).normalized
        except EmailNotValidError as e:
            raise ValueError(_FIELD_MESSAGES["email"]) from e


def _errors_by_field(error: ValidationError) -> dict[str, str]:
    errors: dict[str, str] = {}
    for detail in error.errors():
        field = str(detail["loc"][0]) if detail["loc"] else "form"
        if field in errors:
            continue
        errors[field] = _FIELD_MESSAGES.get(field, detail["msg"])
    return errors


def validate_inquiry(data: Mapping[str, Any]) -> tuple[InquiryForm | None, dict[str, str]]:
    """Validate a raw contact form submission.

    :param data: Submitted fields
    :return: (form, {}) when valid, (None, errors by field) otherwise
    """
    try:
        return InquiryForm.model_validate(dict(data)), {}
    except ValidationError as e:
        return None, _errors_by_field(e)
