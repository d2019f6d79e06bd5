"""Common data models and utilities for the application."""

from .nepali_date import (
    INVALID_DATE,
    current_nepali_date,
    to_nepali_date,
    to_nepali_date_relative,
    to_nepali_date_short,
    to_nepali_date_time,
)
from .user import Capabilities, Capability, Role, User

__all__ = [
    "INVALID_DATE",
    "Capabilities",
    "Capability",
    "Role",
    "User",
    "current_nepali_date",
    "to_nepali_date",
    "to_nepali_date_relative",
    "to_nepali_date_short",
    "to_nepali_date_time",
]
