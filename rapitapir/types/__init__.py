"""Runtime Type System

Composable type schemas with two-phase validation, safe coercion and
JSON-Schema emission.

Usage:
    from rapitapir.types import HashType, StringType, IntegerType, OptionalType

    user = HashType({
        "name": StringType(min_length=1),
        "age": OptionalType(IntegerType(minimum=0)),
    })

    user.validate({"name": "", "age": -5}).errors
    # ["Field 'name': String length 0 is below minimum 1",
    #  "Field 'age': Value -5 is below minimum 0"]
    user.coerce({"name": "Ana", "age": "30"})   # {"name": "Ana", "age": 30}
    user.to_json_schema()
"""
from typing import Union

from .base import BaseType
from .boolean import BooleanType
from .coercion import CoercionPolicy
from .composite import ArrayType, HashType, ObjectType
from .dates import DateTimeType, DateType
from .errors import CoercionError, SchemaDefinitionError, ValidationError, ValidationResult
from .formats import EMAIL_PATTERN, UUID_PATTERN
from .numeric import FloatType, IntegerType, NumericType
from .optional import OptionalType
from .specialized import EmailType, UUIDType
from .strings import StringType
from . import auto_derivation
from .auto_derivation import from_json_schema, from_mapping, from_model, from_object, infer_type

# Closed set of concrete type kinds
SchemaType = Union[
    StringType, IntegerType, FloatType, BooleanType, DateType, DateTimeType,
    ArrayType, HashType, ObjectType, OptionalType, EmailType, UUIDType,
]

__all__ = [
    "BaseType",
    "SchemaType",
    "StringType",
    "IntegerType",
    "FloatType",
    "NumericType",
    "BooleanType",
    "DateType",
    "DateTimeType",
    "EmailType",
    "UUIDType",
    "ArrayType",
    "HashType",
    "ObjectType",
    "OptionalType",
    "CoercionPolicy",
    "ValidationResult",
    "ValidationError",
    "CoercionError",
    "SchemaDefinitionError",
    "EMAIL_PATTERN",
    "UUID_PATTERN",
    "auto_derivation",
    "infer_type",
    "from_mapping",
    "from_json_schema",
    "from_object",
    "from_model",
]
