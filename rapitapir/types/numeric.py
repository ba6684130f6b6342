"""Integer and Float types sharing range and multiple-of constraints."""
from __future__ import annotations

import math
import numbers
import operator
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import Any

from .base import BaseType, check_number
from .errors import CoercionError, SchemaDefinitionError

MULTIPLE_TOLERANCE = 1e-9
JSON_KEYWORDS = {
    "minimum": "minimum",
    "maximum": "maximum",
    "exclusive_minimum": "exclusiveMinimum",
    "exclusive_maximum": "exclusiveMaximum",
    "multiple_of": "multipleOf",
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True, slots=True, kw_only=True)
class NumericType(BaseType):
    """Shared bounds for Integer and Float. Each bound is checked independently."""
    minimum: int | float | None = None
    maximum: int | float | None = None
    exclusive_minimum: int | float | None = None
    exclusive_maximum: int | float | None = None
    multiple_of: int | float | None = None

    constraint_names = ("minimum", "maximum", "exclusive_minimum", "exclusive_maximum", "multiple_of")

    def __post_init__(self):
        BaseType.__post_init__(self)
        for name in self.constraint_names:
            check_number(name, getattr(self, name))
        if self.multiple_of is not None and not self.multiple_of > 0:
            raise SchemaDefinitionError(f"multiple_of must be positive, got {self.multiple_of!r}")

    def _display(self, value: int | float) -> int | float:
        return value

    def validate_constraints(self, value: Any) -> list[str]:
        if not _is_number(value):
            return []
        failures = []
        if self.minimum is not None and value < self.minimum:
            failures.append(f"is below minimum {self.minimum}")
        if self.maximum is not None and value > self.maximum:
            failures.append(f"exceeds maximum {self.maximum}")
        if self.exclusive_minimum is not None and value <= self.exclusive_minimum:
            failures.append(f"must be greater than {self.exclusive_minimum}")
        if self.exclusive_maximum is not None and value >= self.exclusive_maximum:
            failures.append(f"must be less than {self.exclusive_maximum}")
        if self.multiple_of is not None and not self._is_multiple(value):
            failures.append(f"is not a multiple of {self.multiple_of}")
        if not failures:
            return []
        shown = self._display(value)
        return [f"Value {shown} {failure}" for failure in failures]

    def _is_multiple(self, value: int | float) -> bool:
        if isinstance(value, int) and isinstance(self.multiple_of, int):
            return value % self.multiple_of == 0
        if isinstance(value, float) and not math.isfinite(value):
            return False
        try:
            return abs(math.remainder(float(value), float(self.multiple_of))) <= MULTIPLE_TOLERANCE
        except OverflowError:
            # ints beyond float range: exact rational arithmetic
            return Fraction(value) % Fraction(self.multiple_of) == 0

    def apply_constraints_to_schema(self, schema: dict[str, Any]) -> None:
        for name, keyword in JSON_KEYWORDS.items():
            if (bound := getattr(self, name)) is not None:
                schema[keyword] = bound


@dataclass(frozen=True, slots=True, kw_only=True)
class IntegerType(NumericType):
    json_type = "integer"

    def validate_type(self, value: Any) -> list[str]:
        if isinstance(value, int) and not isinstance(value, bool):
            return []
        return [f"Expected integer, got {type(value).__name__}"]

    def coerce_value(self, value: Any) -> int:
        match value:
            case bool():
                return int(value)
            case int():
                return value
            case str():
                try:
                    return int(value.strip())
                except ValueError:
                    raise CoercionError(value, self.type_name, f"Invalid integer string {value!r}") from None
            case float() | Decimal():
                return self._truncate(value)
            case numbers.Real():
                return self._truncate(value)
        if hasattr(type(value), "__index__"):
            return operator.index(value)
        raise CoercionError(value, self.type_name, f"Cannot convert {type(value).__name__} to integer")

    def _truncate(self, value: float | Decimal | numbers.Real) -> int:
        """Truncate toward zero; strict policy only accepts integral values."""
        try:
            integral = int(value)
        except (ValueError, OverflowError) as e:
            raise CoercionError(value, self.type_name, str(e)) from e
        if self.strict and integral != value:
            raise CoercionError(value, self.type_name, "Value has a fractional part")
        return integral


@dataclass(frozen=True, slots=True, kw_only=True)
class FloatType(NumericType):
    """Accepts integers as well as floats; an integer is valid wherever a float is."""
    json_type = "number"

    def _display(self, value: int | float) -> int | float:
        try:
            return float(value)
        except OverflowError:
            return value

    def validate_type(self, value: Any) -> list[str]:
        if _is_number(value):
            return []
        return [f"Expected number (float or integer), got {type(value).__name__}"]

    def coerce_value(self, value: Any) -> float:
        match value:
            case bool():
                return 1.0 if value else 0.0
            case float():
                return value
            case int():
                return float(value)
            case str():
                try:
                    result = float(value.strip())
                except ValueError:
                    raise CoercionError(value, self.type_name, f"Invalid number string {value!r}") from None
                if not math.isfinite(result):
                    raise CoercionError(value, self.type_name, "Non-finite number")
                return result
            case Decimal() | numbers.Real():
                return float(value)
        raise CoercionError(value, self.type_name, f"Cannot convert {type(value).__name__} to float")
