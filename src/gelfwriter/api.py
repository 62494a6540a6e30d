"""Public API surface for gelfwriter."""

from __future__ import annotations

import logging
from typing import Any, Dict

from .config.loader import load_configuration
from .core.errors import ConfigurationError
from .core.manager import GLOBAL_MANAGER
from .core.writer import Writer

_CONFIGURED = False


def configure(overrides: Dict[str, Any] | None = None) -> Writer:
    """Configure gelfwriter using the provided overrides and return the writer.

    When the new configuration fails, the previously configured writer (if
    any) stays active.
    """

    global _CONFIGURED
    try:
        config = load_configuration(overrides or {})
        GLOBAL_MANAGER.configure(config)
    finally:
        _CONFIGURED = GLOBAL_MANAGER.writer is not None
    return get_writer()


def _ensure_configured() -> None:
    if not _CONFIGURED:
        configure({})


def get_writer() -> Writer:
    """Return the configured writer, configuring from defaults on first use."""

    _ensure_configured()
    writer = GLOBAL_MANAGER.writer
    if writer is None:
        raise ConfigurationError("gelfwriter has no active writer; call configure() first")
    return writer


def get_logger(name: str) -> logging.Logger:
    """Return a logger with the given name."""

    _ensure_configured()
    return GLOBAL_MANAGER.get_logger(name)


def shutdown() -> None:
    """Close the writer and detach its handler."""

    global _CONFIGURED
    GLOBAL_MANAGER.shutdown()
    _CONFIGURED = False
