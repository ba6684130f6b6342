"""Date and DateTime types.

Validation honours an explicit ``format`` (``iso8601``/``rfc3339`` via strict
regexes, anything else as a ``strptime`` layout). Coercion parses
leniently and does not enforce ``format``; a custom layout is only tried
when lenient parsing fails.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any

from .base import BaseType, check_text
from .errors import CoercionError
from .temporal import from_timestamp, is_parseable_date, is_parseable_datetime, parse_date, parse_datetime

ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")
ISO_DATETIME = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:Z|[+-]\d{2}:\d{2})")

STRICT_DATETIME_FORMATS = {
    "iso8601": "DateTime must be in ISO8601 format",
    "rfc3339": "DateTime must be in RFC3339 format",
}


def _matches_layout(value: str, layout: str) -> bool:
    try:
        datetime.strptime(value, layout)
        return True
    except ValueError:
        return False


def _custom_layout(fmt: str | None) -> str | None:
    return None if fmt in (None, "iso8601", *STRICT_DATETIME_FORMATS) else fmt


@dataclass(frozen=True, slots=True, kw_only=True)
class DateType(BaseType):
    format: str | None = None

    json_type = "string"
    constraint_names = ("format",)

    def __post_init__(self):
        BaseType.__post_init__(self)
        check_text("format", self.format)

    def _parseable(self, value: str) -> bool:
        layout = _custom_layout(self.format)
        return is_parseable_date(value) or (layout is not None and _matches_layout(value, layout))

    def validate_type(self, value: Any) -> list[str]:
        if isinstance(value, date) or (isinstance(value, str) and self._parseable(value)):
            return []
        return [f"Expected date or date string, got {type(value).__name__}"]

    def validate_constraints(self, value: Any) -> list[str]:
        if self.format is None or not isinstance(value, str):
            return []
        if self.format == "iso8601":
            return [] if ISO_DATE.fullmatch(value) else ["Date must be in ISO8601 format (YYYY-MM-DD)"]
        return [] if _matches_layout(value, self.format) else [f"Date does not match format {self.format}"]

    def coerce_value(self, value: Any) -> date:
        match value:
            case datetime():
                return value.date()
            case date():
                return value
            case str():
                try:
                    return parse_date(value)
                except ValueError as e:
                    if (layout := _custom_layout(self.format)) and _matches_layout(value, layout):
                        return datetime.strptime(value, layout).date()
                    raise CoercionError(value, self.type_name, str(e)) from e
            case bool():
                pass
            case int():
                return from_timestamp(value).date()
        raise CoercionError(value, self.type_name, "Value cannot be converted to Date")

    def apply_constraints_to_schema(self, schema: dict[str, Any]) -> None:
        schema["format"] = "date" if self.format in (None, "iso8601") else self.format


@dataclass(frozen=True, slots=True, kw_only=True)
class DateTimeType(BaseType):
    format: str | None = None

    json_type = "string"
    constraint_names = ("format",)

    def __post_init__(self):
        BaseType.__post_init__(self)
        check_text("format", self.format)

    def _parseable(self, value: str) -> bool:
        layout = _custom_layout(self.format)
        return is_parseable_datetime(value) or (layout is not None and _matches_layout(value, layout))

    def validate_type(self, value: Any) -> list[str]:
        if isinstance(value, datetime) or (isinstance(value, str) and self._parseable(value)):
            return []
        return [f"Expected datetime or datetime string, got {type(value).__name__}"]

    def validate_constraints(self, value: Any) -> list[str]:
        if self.format is None or not isinstance(value, str):
            return []
        if (message := STRICT_DATETIME_FORMATS.get(self.format)) is not None:
            return [] if ISO_DATETIME.fullmatch(value) else [message]
        return [] if _matches_layout(value, self.format) else [f"DateTime does not match format {self.format}"]

    def coerce_value(self, value: Any) -> datetime:
        match value:
            case datetime():
                return value
            case date():
                return datetime.combine(value, time.min)
            case str():
                try:
                    return parse_datetime(value)
                except ValueError as e:
                    if (layout := _custom_layout(self.format)) and _matches_layout(value, layout):
                        return datetime.strptime(value, layout)
                    raise CoercionError(value, self.type_name, str(e)) from e
            case bool():
                pass
            case int():
                return from_timestamp(value)
        raise CoercionError(value, self.type_name, "Value cannot be converted to DateTime")

    def apply_constraints_to_schema(self, schema: dict[str, Any]) -> None:
        schema["format"] = "date-time" if self.format in (None, *STRICT_DATETIME_FORMATS) else self.format
