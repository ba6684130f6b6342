"""String format validators.

Each named format maps to a predicate and the message reported when a
string fails it. Unknown formats carry no check.
"""
from __future__ import annotations

import re
from ipaddress import IPv4Address, IPv6Address
from typing import Callable
from urllib.parse import urlparse

from .temporal import is_parseable_date, is_parseable_datetime

EMAIL_PATTERN = re.compile(r"^[\w+\-.]+@[a-z\d\-]+(\.[a-z\d\-]+)*\.[a-z]+$", re.IGNORECASE)
UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$", re.IGNORECASE
)


def is_email(value: str) -> bool:
    return EMAIL_PATTERN.fullmatch(value) is not None


def is_uuid(value: str) -> bool:
    return UUID_PATTERN.fullmatch(value) is not None


def is_uri(value: str) -> bool:
    if any(ch.isspace() or ord(ch) < 0x20 or ch == "\x7f" for ch in value):
        return False
    try:
        urlparse(value)
    except ValueError:
        return False
    return True


def is_ipv4(value: str) -> bool:
    try:
        IPv4Address(value)
        return True
    except ValueError:
        return False


def is_ipv6(value: str) -> bool:
    try:
        IPv6Address(value)
        return True
    except ValueError:
        return False


FORMAT_CHECKS: dict[str, tuple[Callable[[str], bool], str]] = {
    "email": (is_email, "Invalid email format"),
    "uri": (is_uri, "Invalid URI format"),
    "url": (is_uri, "Invalid URI format"),
    "uuid": (is_uuid, "Invalid UUID format"),
    "date": (is_parseable_date, "Invalid date format"),
    "datetime": (is_parseable_datetime, "Invalid datetime format"),
    "date-time": (is_parseable_datetime, "Invalid datetime format"),
    "ipv4": (is_ipv4, "Invalid IPv4 format"),
    "ipv6": (is_ipv6, "Invalid IPv6 format"),
}


def check_format(value: str, fmt: str) -> list[str]:
    """Return the format error for `value`, or nothing when it conforms or `fmt` is unknown."""
    if (entry := FORMAT_CHECKS.get(str(fmt))) is None:
        return []
    predicate, message = entry
    return [] if predicate(value) else [message]
