"""Structured logging for the type system.

The library only emits events (`coercion_failed`, `schema_derived`,
`derivation_rejected`). Until an application calls `configure_logging` (or
configures structlog itself) those events go through plain stdlib loggers, so
the host's logging levels decide whether anything is written.

Events carry payload fragments, so the processor chain redacts sensitive keys
and clips long values before rendering.
"""
import logging
import sys
from typing import IO

import structlog
from structlog.types import EventDict, Processor

from rapitapir import __version__

SENSITIVE_KEYS = frozenset({"password", "token", "secret", "authorization", "cookie", "api_key"})
MAX_VALUE_LENGTH = 200
MAX_REDACT_DEPTH = 5


def _redact(obj, depth: int = 0):
    if depth > MAX_REDACT_DEPTH:
        return obj
    match obj:
        case dict():
            return {k: "[REDACTED]" if str(k).lower() in SENSITIVE_KEYS else _redact(v, depth + 1) for k, v in obj.items()}
        case list() | tuple():
            return [_redact(item, depth + 1) for item in obj]
        case _:
            return obj


def _censor_sensitive_keys(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    return _redact(event_dict)


def _clip_long_values(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Shorten oversized string values (offending payloads end up in `reason`/`value`)."""
    for key, value in event_dict.items():
        if isinstance(value, str) and len(value) > MAX_VALUE_LENGTH:
            event_dict[key] = f"{value[:MAX_VALUE_LENGTH]}... [{len(value)} chars]"
    return event_dict


def _add_library_info(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", "rapitapir")
    event_dict.setdefault("version", __version__)
    return event_dict


def get_shared_processors() -> list[Processor]:
    """Processors applied to structlog events and foreign stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_library_info,
        _censor_sensitive_keys,
        _clip_long_values,
    ]


def _renderer(json_logs: bool) -> Processor:
    if json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True, exception_formatter=structlog.dev.plain_traceback)


def configure_logging(level: str | None = None, json_logs: bool | None = None, *, stream: IO[str] | None = None) -> None:
    """Route structlog through stdlib logging with one root handler.

    Args:
        level: Log level name. Defaults to RAPITAPIR_LOG_LEVEL; unknown names fall back to INFO.
        json_logs: JSON lines when True, colored console output when False. Defaults to RAPITAPIR_LOG_JSON.
        stream: Where the handler writes. Defaults to stdout.
    """
    from .config import get_settings

    settings = get_settings()
    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)
    shared = get_shared_processors()

    structlog.configure(
        processors=[*shared, structlog.processors.format_exc_info, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(settings.LOG_JSON if json_logs is None else json_logs),
        ],
    ))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)
    LoggerRegistry.reset()


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    if structlog.is_configured():
        return structlog.get_logger(name)
    # structlog's default config prints everything; defer to the stdlib logger's level
    return structlog.wrap_logger(logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger)


def bind_context(**kwargs) -> None:
    """Attach key-value pairs (e.g. a request id) to every event on this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


class LoggerRegistry:
    """One lazily created logger per library domain, named ``rapitapir.<domain>``."""

    _loggers: dict[str, structlog.stdlib.BoundLogger] = {}

    @classmethod
    def get(cls, domain: str) -> structlog.stdlib.BoundLogger:
        if domain not in cls._loggers:
            cls._loggers[domain] = get_logger(f"rapitapir.{domain}")
        return cls._loggers[domain]

    @classmethod
    def reset(cls) -> None:
        """Forget cached loggers so they pick up a new structlog configuration."""
        cls._loggers.clear()


def types_logger() -> structlog.stdlib.BoundLogger:
    return LoggerRegistry.get("types")


def derivation_logger() -> structlog.stdlib.BoundLogger:
    return LoggerRegistry.get("derivation")
