"""Email and UUID: string types with a fixed pattern and format.

Both check their pattern in the type phase, so a malformed address or UUID
is reported as a type error (E2004) rather than a constraint violation. The
constraint phase only adds the length bounds.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from .formats import EMAIL_PATTERN, UUID_PATTERN, is_email, is_uuid
from .strings import StringType


@dataclass(frozen=True, slots=True, kw_only=True)
class EmailType(StringType):
    pattern: str | re.Pattern | None = field(default=EMAIL_PATTERN, init=False)
    format: str | None = field(default="email", init=False)

    def validate_type(self, value: Any) -> list[str]:
        if not isinstance(value, str):
            return [f"Expected string, got {type(value).__name__}"]
        return [] if is_email(value) else ["Invalid email format"]

    def validate_constraints(self, value: Any) -> list[str]:
        return self._length_errors(value) if isinstance(value, str) else []


@dataclass(frozen=True, slots=True, kw_only=True)
class UUIDType(StringType):
    pattern: str | re.Pattern | None = field(default=UUID_PATTERN, init=False)
    format: str | None = field(default="uuid", init=False)

    def validate_type(self, value: Any) -> list[str]:
        if not isinstance(value, str):
            return [f"Expected string, got {type(value).__name__}"]
        return [] if is_uuid(value) else ["Invalid UUID format"]

    def validate_constraints(self, value: Any) -> list[str]:
        return self._length_errors(value) if isinstance(value, str) else []
