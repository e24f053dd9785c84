"""Public API surface for gelflog."""

from __future__ import annotations

import logging
from typing import Any, Dict

from .config.loader import load_configuration
from .core.client import Graylog
from .handlers.gelf_udp import GELFHandler

_CLIENT: Graylog | None = None
_HANDLER: GELFHandler | None = None


def configure(overrides: Dict[str, Any] | None = None) -> Graylog:
    """(Re)build the shared client from configuration plus ``overrides``."""

    global _CLIENT, _HANDLER
    config = load_configuration(overrides or {})
    client = Graylog.from_config(config)
    shutdown()
    _CLIENT = client
    _HANDLER = GELFHandler(client)
    return client


def get_client() -> Graylog:
    """Return the shared client, configuring it on first use."""

    if _CLIENT is None:
        return configure({})
    return _CLIENT


def get_logger(name: str, level: int | str = logging.NOTSET) -> logging.Logger:
    """Return a stdlib logger whose records are shipped by the shared client."""

    handler = _HANDLER
    if handler is None:
        configure({})
        handler = _HANDLER
    logger = logging.getLogger(name)
    if handler is not None and handler not in logger.handlers:
        logger.addHandler(handler)
    if level:
        logger.setLevel(level)
    return logger


def log(value: Any, level: Any = None, background: bool | None = None) -> Graylog:
    """Shortcut for ``get_client().log(...)``."""

    return get_client().log(value, level, background)


def shutdown() -> None:
    """Detach the shared handler and stop the shared client."""

    global _CLIENT, _HANDLER
    if _HANDLER is not None:
        manager = logging.getLogger().manager
        loggers = [logging.getLogger()] + [
            item for item in manager.loggerDict.values() if isinstance(item, logging.Logger)
        ]
        for logger in loggers:
            if _HANDLER in logger.handlers:
                logger.removeHandler(_HANDLER)
        _HANDLER.close()
    if _CLIENT is not None:
        _CLIENT.close()
    _CLIENT = None
    _HANDLER = None
