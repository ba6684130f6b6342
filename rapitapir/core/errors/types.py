"""Result types and the error taxonomy.

`try_coerce`, `try_from_definition` and `coerce_all` report failure as
`Err(AppError)` rather than raising, so a caller can match on the outcome:

    match schema.try_coerce(raw):
        case Ok(value): ...
        case Err(error): ...
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Generic, Iterable, Iterator, NoReturn, TypeVar, Union, final
from uuid import uuid4

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")


class ErrorCode(Enum):
    """Error codes raised by the type system, all in the E2xxx block.

    2000-2029 describe a value that failed validation, 2030 a value that could
    not be coerced and 2040 a schema that could not be built.
    """
    E2000_VALIDATION_GENERIC = 2000
    E2001_REQUIRED_FIELD_MISSING = 2001
    E2004_INVALID_TYPE = 2004
    E2005_CONSTRAINT_VIOLATION = 2005
    E2030_COERCION_FAILED = 2030
    E2040_INVALID_SCHEMA_DEFINITION = 2040

    @property
    def http_status(self) -> int:
        # a bad schema is the server's fault, everything else is the client's
        return 500 if self is ErrorCode.E2040_INVALID_SCHEMA_DEFINITION else 400

    @property
    def category(self) -> str:
        match self.value:
            case 2030:
                return "coercion"
            case 2040:
                return "schema"
            case _:
                return "validation"


def _short_id() -> str:
    return uuid4().hex[:8]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Where and when an error was produced."""
    correlation_id: str = field(default_factory=_short_id)
    timestamp: datetime = field(default_factory=_utcnow)
    origin: str = ""

    def with_origin(self, origin: str) -> ErrorContext:
        return replace(self, origin=origin)


@dataclass(frozen=True, slots=True)
class AppError:
    """Transport-neutral failure carried by `Err`.

    `metadata` holds the structured detail a caller may want to surface
    (offending value, target type, per-field messages); `cause` keeps the
    exception the error was translated from.
    """
    code: ErrorCode
    message: str
    context: ErrorContext = field(default_factory=ErrorContext)
    metadata: dict[str, Any] = field(default_factory=dict)
    cause: Exception | None = None

    @property
    def error_id(self) -> str:
        return f"{self.code.name}:{self.context.correlation_id}"

    def with_metadata(self, **extra: Any) -> AppError:
        return replace(self, metadata=self.metadata | extra)

    def chain(self, cause: Exception) -> AppError:
        return replace(self, cause=cause)

    def to_dict(self) -> dict[str, Any]:
        """Response body for an adapter; the cause is never exposed."""
        body = {
            "code": self.code.name,
            "code_num": self.code.value,
            "message": self.message,
            "category": self.code.category,
            "correlation_id": self.context.correlation_id,
            "timestamp": self.context.timestamp.isoformat(),
            "metadata": self.metadata,
        }
        if self.context.origin:
            body["origin"] = self.context.origin
        return {"error": body}

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message} (correlation_id={self.context.correlation_id})"


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Ok[U]:
        return Ok(f(self.value))

    def and_then(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        return f(self.value)

    def __iter__(self) -> Iterator[T]:
        yield self.value


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure variant; `error` is usually an AppError, or a list of them from `collect_results`."""
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_err(self) -> E:
        return self.error

    def map(self, f: Callable[[Any], Any]) -> Err[E]:
        return self

    def and_then(self, f: Callable[[Any], Any]) -> Err[E]:
        return self

    def __iter__(self) -> Iterator[Any]:
        yield from ()


Result = Union[Ok[T], Err[E]]


def collect_results(results: Iterable[Result[T, AppError]]) -> Result[list[T], list[AppError]]:
    """Turn a sequence of results into one: every value, or every error."""
    results = list(results)
    errors = [r.error for r in results if isinstance(r, Err)]
    if errors:
        return Err(errors)
    return Ok([r.value for r in results])
