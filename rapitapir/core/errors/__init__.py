"""Error taxonomy and Result types shared by the type system.

`Ok`/`Err` are plain frozen dataclasses, so callers branch with `match`:

    from rapitapir.core.errors import Ok, Err

    match schema.try_coerce(payload):
        case Ok(value):
            handle(value)
        case Err(error):
            respond(error.code.http_status, error.to_dict())
"""
from .types import AppError, Err, ErrorCode, ErrorContext, Ok, Result, collect_results
from .builders import coercion_failed, invalid_definition, validation_error

__all__ = [
    "AppError",
    "Err",
    "ErrorCode",
    "ErrorContext",
    "Ok",
    "Result",
    "coercion_failed",
    "collect_results",
    "invalid_definition",
    "validation_error",
]
