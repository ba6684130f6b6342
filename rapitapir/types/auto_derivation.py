"""Schema Auto-Derivation

Infer a `HashType` from something that already describes the data:

- `from_mapping`: example values (``{"id": 1, "tags": ["a"]}``)
- `from_json_schema`: a JSON-Schema object document, honouring ``required``
  and string ``format`` hints
- `from_object`: attribute objects (SimpleNamespace, dataclass instances,
  pydantic model instances, plain objects)
- `from_model`: pydantic model classes, read through ``model_fields`` and
  their annotations and constraint metadata

Every entry point accepts ``only``/``exclude`` field-name filters, applied
before inference. Unsupported sources raise SchemaDefinitionError at once;
no partial schema is returned.
"""
from __future__ import annotations

import dataclasses
import json
import types as pytypes
from collections.abc import Iterable, Iterator, Mapping, Sequence
from datetime import date, datetime
from enum import Enum
from typing import Any, Union, get_args, get_origin
from uuid import UUID as StdUUID

from pydantic import BaseModel

from rapitapir.core.logging import derivation_logger

from .base import BaseType
from .boolean import BooleanType
from .composite import ArrayType, HashType
from .dates import DateTimeType, DateType
from .errors import SchemaDefinitionError
from .numeric import FloatType, IntegerType
from .optional import OptionalType
from .specialized import EmailType, UUIDType
from .strings import StringType

Names = Iterable[str] | None

JSON_STRING_FORMATS: dict[str, type[BaseType]] = {
    "email": EmailType,
    "uuid": UUIDType,
    "date": DateType,
    "date-time": DateTimeType,
}

# JSON-Schema keyword -> constructor option, per derived type
JSON_CONSTRAINTS: dict[type[BaseType], dict[str, str]] = {
    StringType: {"minLength": "min_length", "maxLength": "max_length", "pattern": "pattern"},
    IntegerType: {"minimum": "minimum", "maximum": "maximum", "exclusiveMinimum": "exclusive_minimum",
        "exclusiveMaximum": "exclusive_maximum", "multipleOf": "multiple_of"},
    ArrayType: {"minItems": "min_items", "maxItems": "max_items", "uniqueItems": "unique_items"},
}
JSON_CONSTRAINTS[FloatType] = JSON_CONSTRAINTS[IntegerType]

# annotated-types / pydantic metadata attribute -> constructor option
MODEL_CONSTRAINTS: dict[str, str] = {
    "ge": "minimum",
    "le": "maximum",
    "gt": "exclusive_minimum",
    "lt": "exclusive_maximum",
    "multiple_of": "multiple_of",
    "min_length": "min_length",
    "max_length": "max_length",
    "pattern": "pattern",
}
ARRAY_LENGTHS = {"min_length": "min_items", "max_length": "max_items"}


# ============================================================================
# Helpers
# ============================================================================

def _reject(source: str, reason: str) -> SchemaDefinitionError:
    derivation_logger().warning("derivation_rejected", source=source, reason=reason)
    return SchemaDefinitionError(reason)


def _derived(schema: HashType, source: str) -> HashType:
    derivation_logger().debug("schema_derived", source=source, fields=list(schema.fields))
    return schema


def _select(items: Iterable[tuple[Any, Any]], only: Names, exclude: Names) -> Iterator[tuple[str, Any]]:
    """Apply only/exclude filters to (name, value) pairs."""
    kept = {str(n) for n in only} if only is not None else None
    dropped = {str(n) for n in exclude or ()}
    for name, value in items:
        name = str(name)
        if (kept is not None and name not in kept) or name in dropped:
            continue
        yield name, value


def _with_options(field_type: BaseType, options: Mapping[str, Any]) -> BaseType:
    """Rebuild `field_type` with the options its constructor accepts."""
    if isinstance(field_type, OptionalType):
        return OptionalType(_with_options(field_type.inner, options))
    accepted = {f.name for f in dataclasses.fields(field_type) if f.init} & set(type(field_type).constraint_names)
    applicable = {k: v for k, v in options.items() if k in accepted}
    return dataclasses.replace(field_type, **applicable) if applicable else field_type


# ============================================================================
# Inference from values
# ============================================================================

def infer_type(value: Any) -> BaseType:
    """Map an example value to a type; unknown shapes become strings."""
    match value:
        case bool():
            return BooleanType()
        case int():
            return IntegerType()
        case float():
            return FloatType()
        case datetime():
            return DateTimeType()
        case date():
            return DateType()
        case list() | tuple():
            return ArrayType(infer_type(value[0]) if value else StringType())
        case Mapping():
            return HashType({})
        case _:
            return StringType()


def from_mapping(data: Mapping[str, Any], only: Names = None, exclude: Names = None) -> HashType:
    if not isinstance(data, Mapping):
        raise _reject("mapping", f"Expected a mapping, got {type(data).__name__}")
    fields = {name: infer_type(value) for name, value in _select(data.items(), only, exclude)}
    return _derived(HashType(fields), "mapping")


def _attribute_items(obj: Any) -> Iterable[tuple[str, Any]]:
    if isinstance(obj, BaseModel):
        return ((name, getattr(obj, name)) for name in type(obj).model_fields)
    if dataclasses.is_dataclass(obj):
        return ((f.name, getattr(obj, f.name)) for f in dataclasses.fields(obj))
    return ((name, value) for name, value in vars(obj).items() if not name.startswith("_"))


def from_object(obj: Any, only: Names = None, exclude: Names = None) -> HashType:
    """Derive from an attribute object's current values."""
    if isinstance(obj, (type, Mapping)) or not (
        isinstance(obj, BaseModel) or dataclasses.is_dataclass(obj) or hasattr(obj, "__dict__")
    ):
        raise _reject("object", f"Expected an attribute object, got {type(obj).__name__}")
    fields = {name: infer_type(value) for name, value in _select(_attribute_items(obj), only, exclude)}
    return _derived(HashType(fields), "object")


# ============================================================================
# JSON Schema
# ============================================================================

def _from_json_property(prop: Any) -> BaseType:
    if not isinstance(prop, Mapping):
        raise _reject("json_schema", f"Property definition must be an object, got {type(prop).__name__}")
    match prop.get("type"):
        case "string":
            fmt = prop.get("format")
            if fmt in JSON_STRING_FORMATS:
                field_type = JSON_STRING_FORMATS[fmt]()
            else:
                field_type = StringType(format=fmt) if isinstance(fmt, str) else StringType()
        case "integer":
            field_type = IntegerType()
        case "number":
            field_type = FloatType()
        case "boolean":
            field_type = BooleanType()
        case "array":
            items = prop.get("items")
            field_type = ArrayType(_from_json_property(items) if isinstance(items, Mapping) else StringType())
        case "object":
            field_type = HashType({})
        case _:
            field_type = StringType()
    keywords = next((kw for cls, kw in JSON_CONSTRAINTS.items() if isinstance(field_type, cls)), {})
    options = {option: prop[keyword] for keyword, option in keywords.items() if keyword in prop}
    field_type = _with_options(field_type, options)
    if isinstance(description := prop.get("description"), str):
        field_type = field_type.describe(description)
    return field_type


def from_json_schema(document: Mapping[str, Any] | str | bytes, only: Names = None, exclude: Names = None) -> HashType:
    """Derive from a JSON-Schema object document (mapping or JSON text).

    Properties missing from ``required`` are wrapped in OptionalType.
    """
    if isinstance(document, (str, bytes)):
        try:
            document = json.loads(document)
        except (json.JSONDecodeError, RecursionError) as e:
            raise _reject("json_schema", f"Invalid JSON: {e}") from e
    if not isinstance(document, Mapping) or document.get("type") != "object":
        raise _reject("json_schema", "JSON Schema must be an object type")
    properties = document.get("properties") or {}
    if not isinstance(properties, Mapping):
        raise _reject("json_schema", "JSON Schema 'properties' must be an object")
    required = {str(name) for name in document.get("required") or ()}

    fields: dict[str, BaseType] = {}
    for name, prop in _select(properties.items(), only, exclude):
        field_type = _from_json_property(prop)
        fields[name] = field_type if name in required else OptionalType(field_type)
    additional = document.get("additionalProperties", True)
    return _derived(HashType(fields, additional_properties=additional is not False), "json_schema")


# ============================================================================
# Pydantic models
# ============================================================================

def _from_annotation(annotation: Any) -> BaseType:
    origin, args = get_origin(annotation), get_args(annotation)

    if origin in (Union, pytypes.UnionType):
        present = [a for a in args if a is not type(None)]
        inner = _from_annotation(present[0]) if present else StringType()
        return OptionalType(inner) if len(present) < len(args) else inner
    if origin in (list, tuple, set, frozenset, Sequence):
        return ArrayType(_from_annotation(args[0]) if args else StringType())
    if origin in (dict, Mapping):
        return HashType({})
    if not isinstance(annotation, type):
        return StringType()

    match annotation:
        case _ if issubclass(annotation, bool):
            return BooleanType()
        case _ if issubclass(annotation, Enum):
            return StringType()
        case _ if issubclass(annotation, int):
            return IntegerType()
        case _ if issubclass(annotation, float):
            return FloatType()
        case _ if issubclass(annotation, datetime):
            return DateTimeType()
        case _ if issubclass(annotation, date):
            return DateType()
        case _ if issubclass(annotation, StdUUID):
            return UUIDType()
        case _ if issubclass(annotation, BaseModel):
            return from_model(annotation)
        case _ if issubclass(annotation, (list, tuple, set, frozenset)):
            return ArrayType(StringType())
        case _ if issubclass(annotation, dict):
            return HashType({})
        case _:
            return StringType()


def _model_constraints(field_type: BaseType, metadata: Sequence[Any]) -> dict[str, Any]:
    target = field_type.inner if isinstance(field_type, OptionalType) else field_type
    renames = {**MODEL_CONSTRAINTS, **ARRAY_LENGTHS} if isinstance(target, ArrayType) else MODEL_CONSTRAINTS
    options: dict[str, Any] = {}
    for meta in metadata:
        for attr, option in renames.items():
            if (value := getattr(meta, attr, None)) is not None:
                options[option] = value
    return options


def from_model(model: type[BaseModel], only: Names = None, exclude: Names = None) -> HashType:
    """Derive from a pydantic model class.

    Field constraints declared with ``Field(ge=..., max_length=..., pattern=...)``
    carry over; fields that are not required become optional.
    """
    if not (isinstance(model, type) and issubclass(model, BaseModel)):
        raise _reject("model", f"Expected a pydantic model class, got {model!r}")

    fields: dict[str, BaseType] = {}
    for name, info in _select(model.model_fields.items(), only, exclude):
        field_type = _from_annotation(info.annotation)
        field_type = _with_options(field_type, _model_constraints(field_type, info.metadata))
        if info.description:
            field_type = field_type.describe(info.description)
        if not info.is_required() and not isinstance(field_type, OptionalType):
            field_type = OptionalType(field_type)
        fields[name] = field_type
    return _derived(HashType(fields), f"model:{model.__name__}")
