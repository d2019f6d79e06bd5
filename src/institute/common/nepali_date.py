"""Bikram Sambat (Nepali calendar) rendering of Gregorian dates.

Format strings use the tokens ``YYYY``, ``MMMM`` (month name), ``MM`` and
``DD``; anything else is copied through unchanged. Timestamps carrying a
timezone, such as the stored UTC ones, are rendered in Nepal Time.
"""

import logging
import re
from datetime import date, datetime, timedelta, timezone

import nepali_datetime

LOGGER = logging.getLogger(__name__)

INVALID_DATE = "Invalid Date"
DEFAULT_FORMAT = "YYYY MMMM DD"
SHORT_FORMAT = "YYYY-MM-DD"

MONTH_NAMES = (
    "Baisakh",
    "Jestha",
    "Asar",
    "Shrawan",
    "Bhadra",
    "Aswin",
    "Kartik",
    "Mangsir",
    "Poush",
    "Magh",
    "Falgun",
    "Chaitra",
)

_TOKEN_PATTERN = re.compile(r"YYYY|MMMM|MM|DD")

# Nepal Time has no daylight saving
NEPAL_TZ = timezone(timedelta(hours=5, minutes=45), "NPT")


def _coerce(value: str | date) -> datetime | date | None:
    """Parse the input; timezone-aware values are shifted to Nepal Time."""
    if isinstance(value, date):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(value)
        except (TypeError, ValueError):
            return None
    if not isinstance(parsed, datetime):
        return parsed
    if parsed.tzinfo is not None:
        return parsed.astimezone(NEPAL_TZ)
    return parsed


def _format(bs_date: nepali_datetime.date, fmt: str) -> str:
    tokens = {
        "YYYY": f"{bs_date.year:04d}",
        "MMMM": MONTH_NAMES[bs_date.month - 1],
        "MM": f"{bs_date.month:02d}",
        "DD": f"{bs_date.day:02d}",
    }
    return _TOKEN_PATTERN.sub(lambda match: tokens[match.group(0)], fmt)


def _to_bs(value: datetime | date) -> nepali_datetime.date:
    ad_date = value.date() if isinstance(value, datetime) else value
    return nepali_datetime.date.from_datetime_date(ad_date)


def to_nepali_date(value: str | date, fmt: str = DEFAULT_FORMAT) -> str:
    """Render a Gregorian date or ISO timestamp as a Bikram Sambat date.

    :param value: ISO-8601 string, ``date`` or ``datetime``
    :param fmt: Format string
    :return: The formatted date, or ``"Invalid Date"`` if it cannot be converted
    """
    parsed = _coerce(value)
    if parsed is None:
        LOGGER.warning("Cannot parse date value: %r", value)
        return INVALID_DATE
    try:
        return _format(_to_bs(parsed), fmt)
    except (ValueError, OverflowError) as e:
        LOGGER.warning("Cannot convert %r to a Nepali date: %s", value, e)
        return INVALID_DATE


def to_nepali_date_short(value: str | date) -> str:
    """Render as ``YYYY-MM-DD`` in Bikram Sambat."""
    return to_nepali_date(value, SHORT_FORMAT)


def to_nepali_date_time(value: str | datetime) -> str:
    """Render the long Bikram Sambat date followed by a 12-hour clock time."""
    parsed = _coerce(value)
    if not isinstance(parsed, datetime):
        return INVALID_DATE
    long_date = to_nepali_date(parsed)
    if long_date == INVALID_DATE:
        return INVALID_DATE
    return f"{long_date} {parsed.strftime('%I:%M %p')}"


def to_nepali_date_relative(value: str | date, today: date | None = None) -> str:
    """Render as today/yesterday when applicable, otherwise the long date."""
    parsed = _coerce(value)
    if parsed is None:
        return INVALID_DATE
    day = parsed.date() if isinstance(parsed, datetime) else parsed
    today = today or date.today()  # noqa: DTZ011
    if day == today:
        return "आज (Today)"
    if day == today - timedelta(days=1):
        return "हिजो (Yesterday)"
    return to_nepali_date(parsed)


def current_nepali_date(fmt: str = DEFAULT_FORMAT) -> str:
    """Render today's date in Bikram Sambat."""
    return to_nepali_date(date.today(), fmt)  # noqa: DTZ011
