"""Graylog client facade."""

from __future__ import annotations

import logging
from typing import Any

from ..config.schema import GraylogConfig, IdentityConfig, ServerConfig
from ..handlers.queue_async import BackgroundDispatcher, DispatchConfig
from ..transport.udp import ChunkedTransport, SocketFactory, TransportConfig
from .levels import Level
from .normalizer import GELF_VERSION, NormalizationContext, normalize
from .validation import validate_configuration
from .values import UNDEFINED

__all__ = ["Graylog"]

logger = logging.getLogger(__name__)


class Graylog:
    """Send log values of any shape to a Graylog server over UDP.

    ``log`` never raises. In background mode (the default) the call only
    queues the value; normalization and sending happen on a worker thread.
    """

    level = Level

    def __init__(
        self,
        port: int = 12201,
        address: str = "localhost",
        host: str | None = None,
        node: str = "node",
        default_level: Any = None,
        *,
        chunk_size: int = 1100,
        compression: str = "none",
        background: bool = True,
        queue_maxsize: int = 0,
        config: GraylogConfig | None = None,
        socket_factory: SocketFactory | None = None,
    ) -> None:
        if config is None:
            config = GraylogConfig(
                server=ServerConfig(address=address, port=port),
                identity=IdentityConfig(host=host, node=node),
                transport=TransportConfig(chunk_size=chunk_size, compression=compression),
                dispatch=DispatchConfig(background=background, queue_maxsize=queue_maxsize),
                default_level=default_level if default_level is not None else Level.INFO,
                version=GELF_VERSION,
            )
        validate_configuration(config)
        self.config = config
        self._context = NormalizationContext(
            node=config.identity.node,
            host=config.identity.host,
            version=config.version,
            default_level=config.default_level,
        )
        self._transport = ChunkedTransport(
            config.server.address,
            config.server.port,
            config.transport,
            socket_factory=socket_factory,
        )
        self._dispatcher = BackgroundDispatcher(self.send, config=config.dispatch)

    @classmethod
    def from_config(cls, config: GraylogConfig, *, socket_factory: SocketFactory | None = None) -> "Graylog":
        return cls(config=config, socket_factory=socket_factory)

    # ------------------------------------------------------------------
    @property
    def address(self) -> str:
        return self.config.server.address

    @property
    def port(self) -> int:
        return self.config.server.port

    @property
    def host(self) -> str | None:
        return self.config.identity.host

    @property
    def node(self) -> str:
        return self.config.identity.node

    @property
    def default_level(self) -> Any:
        return self.config.default_level

    @property
    def transport(self) -> ChunkedTransport:
        return self._transport

    def __repr__(self) -> str:
        return f"<Graylog(address={self.address!r}, port={self.port}, node={self.node!r})>"

    # ------------------------------------------------------------------
    def log(self, value: Any = UNDEFINED, level: Any = None, background: bool | None = None) -> "Graylog":
        """Ship ``value`` with an optional per-call ``level``."""

        if background is None:
            background = self.config.dispatch.background
        try:
            if background:
                self._dispatcher.submit(value, level)
            else:
                self.send(value, level)
        except Exception:
            logger.exception("Unable to schedule log call")
        return self

    def send(self, value: Any = UNDEFINED, level: Any = None) -> "Graylog":
        """Normalize and send ``value`` on the calling thread."""

        try:
            document = normalize(value, level, self._context)
            if document is not None:
                self._transport.send(document)
        except Exception:
            logger.exception("Unable to ship log value to %s:%s", self.address, self.port)
        return self

    def emergency(self, value: Any = UNDEFINED, background: bool | None = None) -> "Graylog":
        return self.log(value, Level.EMERGENCY, background)

    def alert(self, value: Any = UNDEFINED, background: bool | None = None) -> "Graylog":
        return self.log(value, Level.ALERT, background)

    def critical(self, value: Any = UNDEFINED, background: bool | None = None) -> "Graylog":
        return self.log(value, Level.CRITICAL, background)

    def error(self, value: Any = UNDEFINED, background: bool | None = None) -> "Graylog":
        return self.log(value, Level.ERROR, background)

    def warning(self, value: Any = UNDEFINED, background: bool | None = None) -> "Graylog":
        return self.log(value, Level.WARNING, background)

    def notice(self, value: Any = UNDEFINED, background: bool | None = None) -> "Graylog":
        return self.log(value, Level.NOTICE, background)

    def info(self, value: Any = UNDEFINED, background: bool | None = None) -> "Graylog":
        return self.log(value, Level.INFO, background)

    def debug(self, value: Any = UNDEFINED, background: bool | None = None) -> "Graylog":
        return self.log(value, Level.DEBUG, background)

    # ------------------------------------------------------------------
    def flush(self, timeout: float | None = None) -> bool:
        """Block until queued background calls have been sent."""

        return self._dispatcher.flush(timeout)

    def close(self) -> None:
        self._dispatcher.stop()

    def __enter__(self) -> "Graylog":
        return self

    def __exit__(self, exc_type, exc: BaseException | None, tb) -> None:  # type: ignore[override]
        self.close()
