"""
Global pytest configuration and fixtures.
"""

import logging

import pytest
import structlog

from rapitapir.core.config import get_settings
from rapitapir.core.logging import LoggerRegistry, clear_context
from rapitapir.types import ArrayType, HashType, IntegerType, OptionalType, StringType


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Start every test from default settings, unaffected by the caller's environment."""
    for name in ("RAPITAPIR_COERCION_MODE", "RAPITAPIR_LOG_LEVEL", "RAPITAPIR_LOG_JSON"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def fresh_logging():
    """Undo any structlog/stdlib configuration a test installed.

    Cached loggers in the registry would otherwise keep the configuration
    they were first bound with.
    """
    root = logging.getLogger()
    handlers, level = set(root.handlers), root.level
    yield
    structlog.reset_defaults()
    clear_context()
    LoggerRegistry.reset()
    for handler in [h for h in root.handlers if h not in handlers]:
        root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def strict_mode(monkeypatch):
    """Switch the process-wide coercion policy to strict."""
    monkeypatch.setenv("RAPITAPIR_COERCION_MODE", "strict")
    get_settings.cache_clear()


@pytest.fixture
def user_schema() -> HashType:
    return HashType({
        "name": StringType(min_length=1),
        "age": OptionalType(IntegerType(minimum=0)),
        "tags": OptionalType(ArrayType(StringType())),
    })
