"""Shortcuts that build an `Err(AppError)` for the three failure kinds the
type system reports: a value that fails validation, a value that cannot be
coerced and a schema definition that cannot be built.
"""
from typing import Any

from .types import AppError, Err, ErrorCode, ErrorContext


def _err(code: ErrorCode, message: str, origin: str, metadata: dict[str, Any], cause: Exception | None = None) -> Err[AppError]:
    return Err(AppError(code, message, ErrorContext(origin=origin), metadata, cause))


def validation_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC,
    errors: list[str] | tuple[str, ...] | None = None,
    origin: str = "",
    **details: Any,
) -> Err[AppError]:
    """Validation failure; `errors` and any extra details land in metadata, None values dropped."""
    if errors is not None:
        details = {"errors": list(errors), **details}
    return _err(code, message, origin, {k: v for k, v in details.items() if v is not None})


def coercion_failed(
    value: Any,
    target: str,
    reason: str,
    *,
    origin: str = "",
    cause: Exception | None = None,
) -> Err[AppError]:
    return _err(
        ErrorCode.E2030_COERCION_FAILED,
        f"Cannot coerce {value!r} to {target}: {reason}",
        origin,
        {"value": repr(value), "target": target, "reason": reason},
        cause,
    )


def invalid_definition(definition: Any, reason: str, origin: str = "") -> Err[AppError]:
    return _err(
        ErrorCode.E2040_INVALID_SCHEMA_DEFINITION,
        f"Invalid schema definition {definition!r}: {reason}",
        origin,
        {"definition": repr(definition)},
    )
