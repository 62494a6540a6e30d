"""gelfwriter public API."""

from .api import configure, get_logger, get_writer, shutdown
from .core.compression import CompressionType
from .core.errors import (
    ConfigurationError,
    DecodingError,
    EncodingError,
    GELFError,
    OversizeError,
    RandomSourceError,
    TransmissionError,
)
from .core.levels import Severity
from .core.message import Message
from .core.writer import Writer
from .handlers.gelf import GELFHandler
from .version import __version__

__all__ = [
    "configure",
    "get_logger",
    "get_writer",
    "shutdown",
    "CompressionType",
    "Message",
    "Severity",
    "Writer",
    "GELFHandler",
    "GELFError",
    "ConfigurationError",
    "DecodingError",
    "EncodingError",
    "OversizeError",
    "RandomSourceError",
    "TransmissionError",
    "__version__",
]
