"""Composite Types

Recursive validation and coercion over element and field types.

- Validation walks every element/field and prefixes each nested message with
  its location (``Item at index 2: ...``, ``Field 'age': ...``), so one pass
  reports all problems.
- Coercion is transactional: the first element/field that cannot be
  converted aborts with a CoercionError whose reason carries the location.
- String input is parsed as JSON before coercion.
"""
from __future__ import annotations

import dataclasses
import json
from collections.abc import Mapping
from dataclasses import KW_ONLY, dataclass, replace
from types import MappingProxyType
from typing import Any

from .base import BaseType, check_count, check_flag
from .errors import CoercionError, SchemaDefinitionError
from .optional import OptionalType


def _parse_json(value: str, target: str, expected: type, label: str) -> Any:
    try:
        parsed = json.loads(value)
    except (json.JSONDecodeError, RecursionError) as e:
        raise CoercionError(value, target, f"Invalid JSON: {e}") from e
    if not isinstance(parsed, expected):
        raise CoercionError(value, target, f"JSON string did not parse to {label}")
    return parsed


def _by_name(value: Mapping) -> dict[str, Any]:
    """Key a mapping by `str(key)`; a str key wins over a non-str key with the same text."""
    named = {str(key): raw for key, raw in value.items() if not isinstance(key, str)}
    named.update((key, raw) for key, raw in value.items() if isinstance(key, str))
    return named


def _unique_key(item: Any) -> tuple:
    """Type-aware identity for duplicate detection (1, 1.0 and True stay distinct)."""
    key = (type(item), item)
    try:
        hash(key)
        return key
    except TypeError:
        pass
    try:
        return (type(item), json.dumps(item, sort_keys=True, default=repr))
    except (TypeError, ValueError):
        return (type(item), repr(item))


def _has_duplicates(items: list | tuple) -> bool:
    seen: set = set()
    for item in items:
        key = _unique_key(item)
        if key in seen:
            return True
        seen.add(key)
    return False


# ============================================================================
# Array
# ============================================================================

@dataclass(frozen=True, slots=True)
class ArrayType(BaseType):
    item_type: BaseType
    _: KW_ONLY
    min_items: int | None = None
    max_items: int | None = None
    unique_items: bool = False

    json_type = "array"
    constraint_names = ("min_items", "max_items", "unique_items")

    def __post_init__(self):
        BaseType.__post_init__(self)
        if not isinstance(self.item_type, BaseType):
            raise SchemaDefinitionError(f"ArrayType item type must be a type instance, got {self.item_type!r}")
        check_count("min_items", self.min_items)
        check_count("max_items", self.max_items)
        check_flag("unique_items", self.unique_items)

    def validate_type(self, value: Any) -> list[str]:
        return [] if isinstance(value, (list, tuple)) else [f"Expected array, got {type(value).__name__}"]

    def validate_constraints(self, value: Any) -> list[str]:
        if not isinstance(value, (list, tuple)):
            return []
        errors = []
        count = len(value)
        if self.min_items is not None and count < self.min_items:
            errors.append(f"Array length {count} is below minimum {self.min_items}")
        if self.max_items is not None and count > self.max_items:
            errors.append(f"Array length {count} exceeds maximum {self.max_items}")
        if self.unique_items and _has_duplicates(value):
            errors.append("Array contains duplicate items but must be unique")
        for index, item in enumerate(value):
            errors.extend(f"Item at index {index}: {e}" for e in self.item_type.validate(item).errors)
        return errors

    def coerce_value(self, value: Any) -> list:
        match value:
            case list() | tuple():
                items = value
            case str():
                items = _parse_json(value, self.type_name, list, "array")
            case _ if self.strict:
                raise CoercionError(value, self.type_name, f"Cannot convert {type(value).__name__} to array")
            case _:
                # lenient: box a bare value
                items = [value]
        coerced = []
        for index, item in enumerate(items):
            try:
                coerced.append(self.item_type.coerce(item))
            except CoercionError as e:
                raise CoercionError(value, self.type_name, f"Item at index {index}: {e.reason}") from e
        return coerced

    def apply_constraints_to_schema(self, schema: dict[str, Any]) -> None:
        schema["items"] = self.item_type.to_json_schema()
        if self.min_items is not None:
            schema["minItems"] = self.min_items
        if self.max_items is not None:
            schema["maxItems"] = self.max_items
        if self.unique_items:
            schema["uniqueItems"] = True

    def __str__(self) -> str:
        return f"{type(self).__name__}[{self.item_type}]"


# ============================================================================
# Hash / Object
# ============================================================================

@dataclass(frozen=True, slots=True)
class HashType(BaseType):
    """Field-map-driven object type.

    Undeclared keys are tolerated and passed through coercion unless
    ``additional_properties=False``, in which case validation reports them.
    """
    fields: Mapping[str, BaseType] = dataclasses.field(default_factory=dict)
    _: KW_ONLY
    additional_properties: bool = True

    json_type = "object"
    constraint_names = ("additional_properties",)

    def __post_init__(self):
        BaseType.__post_init__(self)
        normalized = {str(name): field_type for name, field_type in dict(self.fields).items()}
        for name, field_type in normalized.items():
            if not isinstance(field_type, BaseType):
                raise SchemaDefinitionError(f"Field '{name}' must be a type instance, got {field_type!r}")
        check_flag("additional_properties", self.additional_properties)
        object.__setattr__(self, "fields", MappingProxyType(normalized))

    def validate_type(self, value: Any) -> list[str]:
        return [] if isinstance(value, Mapping) else [f"Expected hash/object, got {type(value).__name__}"]

    def validate_constraints(self, value: Any) -> list[str]:
        if not isinstance(value, Mapping):
            return []
        return self._field_errors(value) + self._unexpected_field_errors(value)

    def _field_errors(self, value: Mapping) -> list[str]:
        named = _by_name(value)
        errors = []
        for name, field_type in self.fields.items():
            errors.extend(f"Field '{name}': {e}" for e in field_type.validate(named.get(name)).errors)
        return errors

    def _unexpected_field_errors(self, value: Mapping) -> list[str]:
        if self.additional_properties:
            return []
        unexpected = [str(key) for key in value if str(key) not in self.fields]
        return [f"Unexpected fields: {', '.join(unexpected)}"] if unexpected else []

    def coerce_value(self, value: Any) -> dict:
        match value:
            case Mapping():
                source = value
            case str():
                source = _parse_json(value, self.type_name, dict, "hash")
            case _:
                raise CoercionError(value, self.type_name, "Value cannot be converted to hash")
        named = _by_name(source)
        result: dict[str, Any] = {}
        for name, field_type in self.fields.items():
            raw = named.get(name)
            # optional fields that are absent stay absent
            if raw is None and not field_type.required:
                continue
            try:
                result[name] = field_type.coerce(raw)
            except CoercionError as e:
                raise CoercionError(value, self.type_name, f"Field '{name}': {e.reason}") from e
        if self.additional_properties:
            result.update((key, raw) for key, raw in source.items() if str(key) not in self.fields)
        return result

    @property
    def required_fields(self) -> list[str]:
        return [name for name, field_type in self.fields.items() if field_type.required]

    def apply_constraints_to_schema(self, schema: dict[str, Any]) -> None:
        if self.fields:
            schema["properties"] = {name: field_type.to_json_schema() for name, field_type in self.fields.items()}
        if required := self.required_fields:
            schema["required"] = required
        schema["additionalProperties"] = self.additional_properties

    def __str__(self) -> str:
        body = ", ".join(f"{name}: {field_type}" for name, field_type in self.fields.items())
        return f"{type(self).__name__}{{{body}}}"


@dataclass(frozen=True, slots=True)
class ObjectType(HashType):
    """Builder-style object type; fields are declared fluently.

    Coercion keeps only declared fields and the JSON Schema forbids additional
    properties. Undeclared keys are not reported during validation.

        user = (ObjectType()
            .required_field("name", StringType(min_length=1))
            .optional_field("age", IntegerType(minimum=0), description="Age in years"))
    """
    additional_properties: bool = dataclasses.field(default=False, init=False)

    def _unexpected_field_errors(self, value: Mapping) -> list[str]:
        return []

    def field(self, name: str, type_: BaseType, *, required: bool = True, **metadata: Any) -> ObjectType:
        field_type = type_ if required else OptionalType(type_)
        if metadata:
            field_type = field_type.with_metadata(**metadata)
        return replace(self, fields={**self.fields, str(name): field_type})

    def required_field(self, name: str, type_: BaseType, **metadata: Any) -> ObjectType:
        return self.field(name, type_, required=True, **metadata)

    def optional_field(self, name: str, type_: BaseType, **metadata: Any) -> ObjectType:
        return self.field(name, type_, required=False, **metadata)
