"""String type with length, pattern and named-format constraints."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .base import BaseType, check_count, check_text
from .errors import CoercionError, SchemaDefinitionError
from .formats import check_format


@dataclass(frozen=True, slots=True, kw_only=True)
class StringType(BaseType):
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | re.Pattern | None = None
    format: str | None = None
    _regex: re.Pattern | None = field(default=None, init=False, repr=False, compare=False)

    json_type = "string"
    constraint_names = ("min_length", "max_length", "pattern", "format")

    def __post_init__(self):
        BaseType.__post_init__(self)
        check_count("min_length", self.min_length)
        check_count("max_length", self.max_length)
        check_text("format", self.format)
        if self.pattern is None:
            return
        try:
            regex = self.pattern if isinstance(self.pattern, re.Pattern) else re.compile(self.pattern)
        except (re.error, TypeError) as e:
            raise SchemaDefinitionError(f"Invalid pattern {self.pattern!r}: {e}") from e
        object.__setattr__(self, "_regex", regex)

    def validate_type(self, value: Any) -> list[str]:
        return [] if isinstance(value, str) else [f"Expected string, got {type(value).__name__}"]

    def validate_constraints(self, value: Any) -> list[str]:
        if not isinstance(value, str):
            return []
        return self._length_errors(value) + self._pattern_errors(value) + self._format_errors(value)

    def _length_errors(self, value: str) -> list[str]:
        errors = []
        length = len(value)
        if self.min_length is not None and length < self.min_length:
            errors.append(f"String length {length} is below minimum {self.min_length}")
        if self.max_length is not None and length > self.max_length:
            errors.append(f"String length {length} exceeds maximum {self.max_length}")
        return errors

    def _pattern_errors(self, value: str) -> list[str]:
        if self._regex is None or self._regex.search(value):
            return []
        return [f"String '{value}' does not match pattern /{self._regex.pattern}/"]

    def _format_errors(self, value: str) -> list[str]:
        return check_format(value, self.format) if self.format is not None else []

    def coerce_value(self, value: Any) -> Any:
        match value:
            case str():
                return value
            case bool():
                return "true" if value else "false"
            case bytes() | bytearray():
                return bytes(value).decode("utf-8")
            case Enum():
                return str(value.value)
        try:
            return str(value)
        except Exception as e:
            raise CoercionError(value, self.type_name, "Value does not support string conversion") from e

    def apply_constraints_to_schema(self, schema: dict[str, Any]) -> None:
        if self.min_length is not None:
            schema["minLength"] = self.min_length
        if self.max_length is not None:
            schema["maxLength"] = self.max_length
        if self._regex is not None:
            schema["pattern"] = self._regex.pattern
        if self.format is not None:
            schema["format"] = self.format
