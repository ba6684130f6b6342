"""Base Type Contract

Every type is a frozen, slotted dataclass. Subclasses supply four override
points and inherit the orchestration:

- `validate_type`: shape check ("is this a string?")
- `validate_constraints`: constraint checks (length, bounds, items, fields)
- `coerce_value`: conversion into the native shape
- `apply_constraints_to_schema`: JSON-Schema keywords for the constraints

`validate` runs both phases and reports all problems in one pass;
`coerce` aborts on the first failure with a CoercionError.

Slotted dataclasses break zero-argument `super()`, so overrides call the
parent implementation explicitly (``StringType.validate_type(self, value)``).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from decimal import Decimal
import numbers
from types import MappingProxyType
from typing import Any, ClassVar, Mapping

from rapitapir.core.errors import AppError, ErrorCode, Ok, Result, coercion_failed
from rapitapir.core.logging import types_logger

from .coercion import CoercionPolicy, resolve_policy
from .errors import CoercionError, SchemaDefinitionError, ValidationResult

NIL_ERROR = "Value is required but got None"


def check_count(name: str, value: Any) -> None:
    """Length and item bounds are non-negative integers."""
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise SchemaDefinitionError(f"{name} must be a non-negative integer, got {value!r}")


def check_number(name: str, value: Any) -> None:
    """Numeric bounds are real, non-NaN numbers; bools do not count."""
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, (numbers.Real, Decimal)) or value != value:
        raise SchemaDefinitionError(f"{name} must be a number, got {value!r}")


def check_flag(name: str, value: Any) -> None:
    if not isinstance(value, bool):
        raise SchemaDefinitionError(f"{name} must be a boolean, got {value!r}")


def check_text(name: str, value: Any) -> None:
    if value is not None and not isinstance(value, str):
        raise SchemaDefinitionError(f"{name} must be a string, got {value!r}")


def _render(value: Any) -> str:
    if (source := getattr(value, "pattern", None)) is not None and not isinstance(value, str):
        return f"/{source}/"
    return str(value)


@dataclass(frozen=True, slots=True, kw_only=True)
class BaseType(ABC):
    optional: bool = False
    metadata: Mapping[str, Any] = field(default_factory=dict)
    coercion: CoercionPolicy | None = None

    json_type: ClassVar[str] = "object"
    constraint_names: ClassVar[tuple[str, ...]] = ()

    def __post_init__(self):
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    # ========================================================================
    # Flags & introspection
    # ========================================================================

    @property
    def required(self) -> bool:
        return not self.optional

    @property
    def is_optional(self) -> bool:
        return self.optional

    @property
    def constraints(self) -> Mapping[str, Any]:
        """Constraint values that are set, plus the optional flag."""
        values: dict[str, Any] = {"optional": self.optional}
        for name in self.constraint_names:
            if (value := getattr(self, name)) is not None:
                values[name] = value
        return MappingProxyType(values)

    @property
    def policy(self) -> CoercionPolicy:
        return resolve_policy(self.coercion)

    @property
    def strict(self) -> bool:
        return self.policy is CoercionPolicy.STRICT

    @property
    def description(self) -> str | None:
        return self.metadata.get("description")

    @property
    def example(self) -> Any:
        return self.metadata.get("example")

    # ========================================================================
    # Metadata (copy-on-write)
    # ========================================================================

    def with_metadata(self, **meta: Any) -> BaseType:
        """Return a copy carrying the merged metadata."""
        return replace(self, metadata={**self.metadata, **meta})

    def describe(self, text: str) -> BaseType:
        return self.with_metadata(description=text)

    def with_example(self, value: Any) -> BaseType:
        return self.with_metadata(example=value)

    # ========================================================================
    # Validation
    # ========================================================================

    def validate(self, value: Any) -> ValidationResult:
        if value is None:
            if self.optional:
                return ValidationResult.success()
            return ValidationResult.from_phases(value, self, [(ErrorCode.E2001_REQUIRED_FIELD_MISSING, [NIL_ERROR])])
        return ValidationResult.from_phases(value, self, [
            (ErrorCode.E2004_INVALID_TYPE, self.validate_type(value)),
            (ErrorCode.E2005_CONSTRAINT_VIOLATION, self.validate_constraints(value)),
        ])

    @abstractmethod
    def validate_type(self, value: Any) -> list[str]:
        """Shape errors for a non-None value."""

    def validate_constraints(self, value: Any) -> list[str]:
        return []

    # ========================================================================
    # Coercion
    # ========================================================================

    def coerce(self, value: Any) -> Any:
        if value is None:
            if self.optional:
                return None
            raise CoercionError(value, self.type_name, "Required value cannot be None")
        try:
            return self.coerce_value(value)
        except (ValueError, TypeError, OverflowError) as e:
            raise CoercionError(value, self.type_name, str(e)) from e

    def try_coerce(self, value: Any) -> Result[Any, AppError]:
        """Coerce without raising: Ok(value) or Err(AppError E2030)."""
        try:
            return Ok(self.coerce(value))
        except CoercionError as e:
            types_logger().debug("coercion_failed", target=e.target_type, reason=e.reason)
            return coercion_failed(e.value, e.target_type, e.reason, origin=type(self).__name__, cause=e)

    @abstractmethod
    def coerce_value(self, value: Any) -> Any:
        """Convert a non-None value; raise CoercionError when impossible."""

    @property
    def type_name(self) -> str:
        return type(self).__name__.removesuffix("Type")

    # ========================================================================
    # JSON Schema
    # ========================================================================

    def to_json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": self.json_type}
        self.apply_constraints_to_schema(schema)
        if self.description is not None:
            schema["description"] = self.description
        if "example" in self.metadata:
            schema["example"] = self.example
        return schema

    def apply_constraints_to_schema(self, schema: dict[str, Any]) -> None:
        pass

    def __str__(self) -> str:
        shown = {k: v for k, v in self.constraints.items() if k != "optional" or v}
        if not shown:
            return type(self).__name__
        return f"{type(self).__name__}({', '.join(f'{k}: {_render(v)}' for k, v in shown.items())})"
