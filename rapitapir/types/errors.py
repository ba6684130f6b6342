"""Validation and Coercion Error System

Two channels:
- Validation problems are data. `ValidationResult` carries every
  human-readable message plus per-phase `ValidationError` objects tagged
  with an `ErrorCode`, so callers can branch on category (required, type,
  constraint) without parsing strings.
- Coercion failures are exceptional. `CoercionError` aborts on the first
  unconvertible value and carries the value, target type and reason.

Schema construction problems raise `SchemaDefinitionError` immediately.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Sequence

from rapitapir.core.errors import AppError, ErrorCode, coercion_failed, validation_error

if TYPE_CHECKING:
    from .base import BaseType


def _type_label(type_: Any) -> str:
    return type_ if isinstance(type_, str) else str(type_)


class ValidationError(Exception):
    """Structured validation failure for a value against a type.

    Raised by `validate_or_raise`; also embedded in `ValidationResult.value_errors`
    where it is used as data, not thrown.
    """

    def __init__(
        self,
        value: Any,
        type_: BaseType | str,
        errors: Sequence[str],
        code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC,
    ):
        self.value, self.type, self.errors, self.code = value, type_, tuple(errors), code
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        lines = [f"Validation failed for value {self.value!r} against type {_type_label(self.type)}:"]
        lines.extend(f"  - {error}" for error in self.errors)
        return "\n".join(lines)

    @property
    def category(self) -> str:
        return {
            ErrorCode.E2001_REQUIRED_FIELD_MISSING: "required",
            ErrorCode.E2004_INVALID_TYPE: "type",
            ErrorCode.E2005_CONSTRAINT_VIOLATION: "constraint",
        }.get(self.code, self.code.category)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code.name, "category": self.category, "type": _type_label(self.type),
            "errors": list(self.errors)}

    def __repr__(self) -> str:
        return f"ValidationError(code={self.code.name}, errors={list(self.errors)!r})"


class CoercionError(Exception):
    """Raised when a value cannot be converted to a type's native shape."""

    def __init__(self, value: Any, target_type: BaseType | str, reason: str):
        self.value, self.target_type, self.reason = value, _type_label(target_type), reason
        super().__init__(f"Cannot coerce {value!r} to {self.target_type}: {reason}")

    def to_app_error(self, origin: str = "") -> AppError:
        return coercion_failed(self.value, self.target_type, self.reason, origin=origin, cause=self).error


class SchemaDefinitionError(ValueError):
    """Raised at build time for definitions or derivation sources that cannot become a type."""


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of `BaseType.validate`.

    `errors` is the flat, ordered list of messages; `value_errors` groups the
    same messages by validation phase.
    """
    valid: bool
    errors: tuple[str, ...] = ()
    value_errors: tuple[ValidationError, ...] = field(default=(), compare=False)

    @classmethod
    def success(cls) -> ValidationResult:
        return cls(valid=True)

    @classmethod
    def from_phases(cls, value: Any, type_: BaseType, phases: Sequence[tuple[ErrorCode, Sequence[str]]]) -> ValidationResult:
        """Build a result from (code, messages) pairs, one per validation phase."""
        errors: list[str] = []
        value_errors: list[ValidationError] = []
        for code, messages in phases:
            if not messages:
                continue
            errors.extend(messages)
            value_errors.append(ValidationError(value, type_, messages, code))
        if not errors:
            return cls.success()
        return cls(valid=False, errors=tuple(errors), value_errors=tuple(value_errors))

    def __bool__(self) -> bool:
        return self.valid

    @property
    def codes(self) -> tuple[ErrorCode, ...]:
        return tuple(e.code for e in self.value_errors)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses."""
        if self.valid:
            return {"valid": True, "errors": []}
        return {
            "valid": False,
            "errors": list(self.errors),
            "details": [e.to_dict() for e in self.value_errors],
        }

    def to_app_error(self, origin: str = "") -> AppError:
        """Convert to AppError for error handling system."""
        count = len(self.errors)
        return validation_error(
            f"Validation failed: {count} error{'s' if count != 1 else ''}",
            errors=self.errors,
            origin=origin,
            error_count=count,
            categories=sorted({e.category for e in self.value_errors}),
        ).error
