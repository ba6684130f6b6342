"""Lenient date/datetime parsing used by coercion and type checks.

ISO 8601 is tried first (a trailing ``Z`` is normalized to ``+00:00``), then a
fixed list of common human-readable layouts. Anything else raises ValueError.
"""
from __future__ import annotations

from datetime import date, datetime, timezone

DATE_LAYOUTS: tuple[str, ...] = (
    "%Y/%m/%d",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%b %d %Y",
    "%a, %d %b %Y",
    "%Y%m%d",
)

DATETIME_LAYOUTS: tuple[str, ...] = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%a, %d %b %Y %H:%M:%S %z",
    "%a, %d %b %Y %H:%M:%S %Z",
    "%d %b %Y %H:%M:%S",
    "%b %d, %Y %H:%M:%S",
    *DATE_LAYOUTS,
)


def _normalize(text: str) -> str:
    text = text.strip()
    return text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text


def parse_datetime(text: str) -> datetime:
    """Parse a datetime string leniently."""
    normalized = _normalize(text)
    if not normalized:
        raise ValueError("Empty datetime string")
    try:
        return datetime.fromisoformat(normalized)
    except ValueError:
        pass
    for layout in DATETIME_LAYOUTS:
        try:
            return datetime.strptime(normalized, layout)
        except ValueError:
            continue
    raise ValueError(f"Unrecognized datetime: {text!r}")


def parse_date(text: str) -> date:
    """Parse a date string leniently; datetime strings yield their date part."""
    stripped = text.strip()
    if not stripped:
        raise ValueError("Empty date string")
    try:
        return date.fromisoformat(stripped)
    except ValueError:
        pass
    for layout in DATE_LAYOUTS:
        try:
            return datetime.strptime(stripped, layout).date()
        except ValueError:
            continue
    try:
        return parse_datetime(stripped).date()
    except ValueError:
        raise ValueError(f"Unrecognized date: {text!r}") from None


def is_parseable_date(text: str) -> bool:
    try:
        parse_date(text)
        return True
    except ValueError:
        return False


def is_parseable_datetime(text: str) -> bool:
    try:
        parse_datetime(text)
        return True
    except ValueError:
        return False


def from_timestamp(seconds: int) -> datetime:
    """Unix timestamp to an aware UTC datetime."""
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError) as e:
        raise ValueError(f"Timestamp {seconds} out of range") from e
