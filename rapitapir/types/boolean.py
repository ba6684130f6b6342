from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .base import BaseType
from .errors import CoercionError

TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})
FALSE_STRINGS = frozenset({"false", "no", "off", "0"})


@dataclass(frozen=True, slots=True, kw_only=True)
class BooleanType(BaseType):
    json_type = "boolean"

    def validate_type(self, value: Any) -> list[str]:
        return [] if isinstance(value, bool) else [f"Expected boolean (true or false), got {type(value).__name__}"]

    def coerce_value(self, value: Any) -> bool:
        match value:
            case bool():
                return value
            case str():
                normalized = value.strip().lower()
                if normalized in TRUE_STRINGS:
                    return True
                if normalized in FALSE_STRINGS:
                    return False
                raise CoercionError(value, self.type_name, f"Cannot convert '{value}' to boolean")
            case int() | float() if value in (0, 1):
                return value == 1
        if self.strict:
            raise CoercionError(value, self.type_name, f"Cannot convert {type(value).__name__} to boolean")
        # lenient: generic truthiness
        return bool(value)
