"""Flexible date parsing and canonical timestamp formatting."""

from datetime import date, datetime, timezone
from typing import Any, Optional

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Tried in order after ISO 8601 parsing fails
FALLBACK_FORMATS = (
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M:%S",
    "%d.%m.%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_flexible_date(text: Any) -> Optional[datetime]:
    """
    Parse a date-like string.

    Accepts ISO 8601 dates and datetimes (``Z`` or offset suffixes are
    converted to UTC) plus a handful of common literal formats.

    Args:
        text: Raw value from a record (YAML input may already carry a date)

    Returns:
        Naive UTC datetime, or None if the value is empty or unparseable
    """
    if isinstance(text, datetime):
        return _to_naive_utc(text)
    if isinstance(text, date):
        return datetime(text.year, text.month, text.day)
    if not isinstance(text, str):
        return None
    text = text.strip()
    if not text:
        return None

    candidate = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        return _to_naive_utc(datetime.fromisoformat(candidate))
    except ValueError:
        pass

    for fmt in FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    return None


def utc_now() -> datetime:
    """Current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def format_canonical_timestamp(
    value: Optional[datetime], now: Optional[datetime] = None
) -> str:
    """
    Format a datetime as ``YYYY-MM-DD HH:MM:SS`` (UTC, no zone).

    Args:
        value: Datetime to format; None means "now"
        now: Override for "now" (used by tests)

    Returns:
        Timestamp string
    """
    if value is None:
        value = now if now is not None else utc_now()
    return _to_naive_utc(value).strftime(TIMESTAMP_FORMAT)
