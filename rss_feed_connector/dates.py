"""Date parsing and formatting for RSS Feed Connector."""

import re
from datetime import datetime, time
from time import struct_time

from dateutil import tz
from dateutil.parser import isoparser

from .errors import ConnectorError, ErrorCode

_ISO_PARSER = isoparser(sep="T")

# Calendar date only, as produced by e.g. a workflow engine's today()
_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Extended date-time with a Z or +HH:MM offset, seconds and fraction optional
_OFFSET_DATE_TIME = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2}(\.\d{1,9})?)?(Z|[+-]\d{2}:\d{2})$"
)


def _strip_zone_annotation(value: str) -> str:
    """Drop a trailing zone-name annotation such as "[GMT]" or "[Europe/Rome]"."""
    if "[" in value:
        return value[: value.index("[")]
    return value


def _parse_offset_datetime(value: str) -> datetime | None:
    value = value.upper()
    if not _OFFSET_DATE_TIME.match(value):
        return None
    try:
        parsed = _ISO_PARSER.isoparse(value)
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is None:
        return None
    return parsed


def _parse_date_only(value: str) -> datetime | None:
    if not _DATE_ONLY.match(value):
        return None
    try:
        day = _ISO_PARSER.parse_isodate(value)
    except ValueError:
        return None
    return datetime.combine(day, time.min, tzinfo=tz.UTC)


def parse_request_date(value: str | None, field_name: str) -> datetime | None:
    """Parse a user-supplied date filter into an offset-aware datetime.

    Accepted forms, tried in order after removing a bracketed zone name:
    an ISO-8601 date-time with offset (2025-01-01T00:00:00Z) and an ISO-8601
    calendar date (2025-01-01), which is read as midnight UTC.

    Args:
        value: Raw date string, may be None or blank
        field_name: Request field name used in the error message

    Returns:
        Aware datetime, or None if no value was supplied

    Raises:
        ConnectorError: INVALID_DATE_FORMAT if no accepted form matches
    """
    if value is None or not value.strip():
        return None

    normalized = _strip_zone_annotation(value.strip())

    parsed = _parse_offset_datetime(normalized)
    if parsed is None:
        parsed = _parse_date_only(normalized)
    if parsed is None:
        raise ConnectorError(
            ErrorCode.INVALID_DATE_FORMAT,
            f"{field_name} must follow ISO8601 format. Supported formats: "
            "date (e.g., 2025-01-01), datetime (e.g., 2025-01-01T00:00:00Z). "
            f"Received: {value}",
        )
    return parsed


def parse_item_date(value: str | None) -> datetime | None:
    """Reparse a stored item timestamp; None if absent or unreadable."""
    if not value:
        return None
    return _parse_offset_datetime(value)


def format_timestamp(value: datetime) -> str:
    """Render a datetime as UTC ISO-8601, e.g. 2025-10-26T10:30:00Z."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=tz.UTC)
    value = value.astimezone(tz.UTC)
    rendered = value.strftime("%Y-%m-%dT%H:%M:%S")
    if value.microsecond:
        rendered += f".{value.microsecond:06d}".rstrip("0")
    return rendered + "Z"


def struct_time_to_datetime(value: struct_time | tuple | None) -> datetime | None:
    """Convert a feedparser UTC time tuple to an aware datetime."""
    if not value:
        return None
    try:
        return datetime(*value[:6], tzinfo=tz.UTC)
    except (TypeError, ValueError, OverflowError):
        return None
