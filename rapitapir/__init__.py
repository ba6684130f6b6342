"""RapiTapir runtime types: composable validation, coercion and JSON-Schema emission."""
__version__ = "0.1.0"

from .core import configure_logging, get_settings
from .types import (
    ArrayType,
    BaseType,
    BooleanType,
    CoercionError,
    CoercionPolicy,
    DateTimeType,
    DateType,
    EmailType,
    FloatType,
    HashType,
    IntegerType,
    ObjectType,
    OptionalType,
    SchemaDefinitionError,
    SchemaType,
    StringType,
    UUIDType,
    ValidationError,
    ValidationResult,
    auto_derivation,
)
from . import schema
from .schema import define, from_definition, validate_or_raise

__all__ = [
    "__version__",
    "configure_logging",
    "get_settings",
    "BaseType",
    "SchemaType",
    "StringType",
    "IntegerType",
    "FloatType",
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
    "auto_derivation",
    "schema",
    "define",
    "from_definition",
    "validate_or_raise",
]
