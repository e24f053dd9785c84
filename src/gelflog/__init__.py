"""gelflog public API."""

from .api import configure, get_client, get_logger, log, shutdown
from .core.client import Graylog
from .core.levels import LEVELS, Level, SeverityLevel, resolve_level
from .core.normalizer import NormalizationContext, normalize
from .core.validation import ConfigurationError
from .core.values import UNDEFINED
from .handlers.gelf_udp import GELFHandler
from .transport.udp import ChunkedTransport
from .version import __version__

__all__ = [
    "configure",
    "get_client",
    "get_logger",
    "log",
    "shutdown",
    "Graylog",
    "GELFHandler",
    "ChunkedTransport",
    "ConfigurationError",
    "Level",
    "LEVELS",
    "SeverityLevel",
    "NormalizationContext",
    "UNDEFINED",
    "normalize",
    "resolve_level",
    "__version__",
]
