from __future__ import annotations

from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any

from .base import BaseType
from .errors import SchemaDefinitionError, ValidationResult


@dataclass(frozen=True, slots=True)
class OptionalType(BaseType):
    """Accepts None; any other value gets the inner type's full validation and coercion.

    The JSON Schema is the inner schema unchanged. Nullability shows up only
    as the field's absence from a parent object's ``required`` list.
    """
    inner: BaseType

    def __post_init__(self):
        BaseType.__post_init__(self)
        if not isinstance(self.inner, BaseType):
            raise SchemaDefinitionError(f"OptionalType wraps a type instance, got {self.inner!r}")
        object.__setattr__(self, "optional", True)

    @property
    def constraints(self):
        return MappingProxyType({"optional": True})

    def validate(self, value: Any) -> ValidationResult:
        return ValidationResult.success() if value is None else self.inner.validate(value)

    def validate_type(self, value: Any) -> list[str]:
        return self.inner.validate_type(value)

    def validate_constraints(self, value: Any) -> list[str]:
        return self.inner.validate_constraints(value)

    def coerce(self, value: Any) -> Any:
        return None if value is None else self.inner.coerce(value)

    def coerce_value(self, value: Any) -> Any:
        return self.inner.coerce_value(value)

    @property
    def description(self) -> str | None:
        return self.inner.description

    @property
    def example(self) -> Any:
        return self.inner.example

    def with_metadata(self, **meta: Any) -> OptionalType:
        """Metadata lands on the inner type; the wrapper is kept."""
        return replace(self, inner=self.inner.with_metadata(**meta))

    def to_json_schema(self) -> dict[str, Any]:
        return self.inner.to_json_schema()

    def __str__(self) -> str:
        return f"OptionalType[{self.inner}]"
