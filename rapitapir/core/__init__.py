"""Ambient infrastructure shared by the type system: settings, logging, errors."""
from .config import Settings, get_settings
from .logging import configure_logging, get_logger, types_logger, derivation_logger

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "types_logger",
    "derivation_logger",
]
