"""Schema Definition Helpers

Shorthand for building types without spelling out every constructor, plus
module-level validate/coerce entry points.

    from rapitapir import schema

    user = schema.from_definition({"name": "string", "tags": ["string"], "born": date})

    @schema.define
    def Signup(s):
        s.required_field("email", "email")
        s.optional_field("age", "integer", description="Age in years")
"""
from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from datetime import date, datetime
from typing import Any
from uuid import UUID as StdUUID

from rapitapir.core.errors import AppError, Ok, Result, collect_results, invalid_definition

from .types import (
    ArrayType,
    BaseType,
    BooleanType,
    DateTimeType,
    DateType,
    EmailType,
    FloatType,
    IntegerType,
    ObjectType,
    SchemaDefinitionError,
    SchemaType,
    StringType,
    UUIDType,
    ValidationError,
    ValidationResult,
)

PRIMITIVES: dict[str, type[BaseType]] = {
    "string": StringType,
    "integer": IntegerType,
    "float": FloatType,
    "boolean": BooleanType,
    "date": DateType,
    "datetime": DateTimeType,
    "uuid": UUIDType,
    "email": EmailType,
}

BUILTINS: dict[type, type[BaseType]] = {
    bool: BooleanType,
    str: StringType,
    int: IntegerType,
    float: FloatType,
    datetime: DateTimeType,
    date: DateType,
    StdUUID: UUIDType,
}

Definition = Any


def from_definition(definition: Definition) -> SchemaType | BaseType:
    """Build a type from shorthand.

    Accepts primitive names (``"string"``), builtin Python types (``int``),
    ``{"type": "<name>"}``, dicts of field definitions (an ObjectType with
    every field required), one-element lists (an ArrayType), type instances
    and argument-free type classes.
    """
    match definition:
        case BaseType():
            return definition
        case type() if issubclass(definition, BaseType):
            try:
                return definition()
            except TypeError as e:
                raise SchemaDefinitionError(f"{definition.__name__} needs arguments: {e}") from e
        case type() if definition in BUILTINS:
            return BUILTINS[definition]()
        case str():
            if (factory := PRIMITIVES.get(definition)) is None:
                raise SchemaDefinitionError(f"Unknown primitive type: {definition}")
            return factory()
        case {"type": str() as name} if len(definition) == 1:
            return from_definition(name)
        case Mapping():
            return ObjectType({str(name): from_definition(field) for name, field in definition.items()})
        case [item]:
            return ArrayType(from_definition(item))
        case list() | tuple():
            raise SchemaDefinitionError("Array definitions take exactly one item type")
        case _:
            raise SchemaDefinitionError(f"Unsupported schema definition: {definition!r}")


def try_from_definition(definition: Definition) -> Result[BaseType, AppError]:
    try:
        return Ok(from_definition(definition))
    except SchemaDefinitionError as e:
        return invalid_definition(definition, str(e), origin="schema")


class SchemaBuilder:
    """Accumulates fields for `define`; each call returns the builder for chaining."""

    def __init__(self):
        self._object = ObjectType()

    def field(self, name: str, definition: Definition, *, required: bool = True, **metadata: Any) -> SchemaBuilder:
        self._object = self._object.field(name, from_definition(definition), required=required, **metadata)
        return self

    def required_field(self, name: str, definition: Definition, **metadata: Any) -> SchemaBuilder:
        return self.field(name, definition, required=True, **metadata)

    def optional_field(self, name: str, definition: Definition, **metadata: Any) -> SchemaBuilder:
        return self.field(name, definition, required=False, **metadata)

    def build(self) -> ObjectType:
        return self._object


def define(build: Callable[[SchemaBuilder], Any]) -> ObjectType:
    """Run `build` against a fresh builder and return the resulting ObjectType. Usable as a decorator."""
    builder = SchemaBuilder()
    build(builder)
    return builder.build()


# ============================================================================
# Entry points
# ============================================================================

def validate(value: Any, type_: Definition) -> ValidationResult:
    return from_definition(type_).validate(value)


def validate_or_raise(value: Any, type_: Definition) -> Any:
    """Return `value` unchanged when valid, else raise ValidationError listing every problem."""
    schema_type = from_definition(type_)
    result = schema_type.validate(value)
    if not result.valid:
        raise ValidationError(value, schema_type, result.errors)
    return value


def coerce(value: Any, type_: Definition) -> Any:
    return from_definition(type_).coerce(value)


def coerce_all(values: Iterable[Any], type_: Definition) -> Result[list[Any], list[AppError]]:
    """Coerce every value, collecting all failures instead of stopping at the first."""
    schema_type = from_definition(type_)
    return collect_results([schema_type.try_coerce(value) for value in values])


__all__ = [
    "PRIMITIVES",
    "BUILTINS",
    "SchemaBuilder",
    "from_definition",
    "try_from_definition",
    "define",
    "validate",
    "validate_or_raise",
    "coerce",
    "coerce_all",
]
