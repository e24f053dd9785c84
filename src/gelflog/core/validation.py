"""Configuration validation helpers."""

from __future__ import annotations

from ..config.schema import GraylogConfig
from ..transport.udp import CHUNK_HEADER_SIZE, COMPRESSION_KINDS, MAX_DATAGRAM_SIZE


class ConfigurationError(ValueError):
    """Raised when configuration validation fails."""


def validate_configuration(config: GraylogConfig) -> None:
    """Reject settings the client cannot work with."""

    server = config.server
    if not server.address:
        raise ConfigurationError("Server address must not be empty")
    if not 0 < server.port < 65536:
        raise ConfigurationError(f"Server port {server.port} is outside 1..65535")

    if not config.identity.node:
        raise ConfigurationError("Node name must not be empty")

    transport = config.transport
    max_chunk = MAX_DATAGRAM_SIZE - CHUNK_HEADER_SIZE
    if not 0 < transport.chunk_size <= max_chunk:
        raise ConfigurationError(f"Chunk size {transport.chunk_size} is outside 1..{max_chunk}")
    if transport.compression not in COMPRESSION_KINDS:
        raise ConfigurationError(
            f"Unknown compression '{transport.compression}', expected one of: {', '.join(COMPRESSION_KINDS)}"
        )

    dispatch = config.dispatch
    if dispatch.queue_maxsize < 0:
        raise ConfigurationError("Queue size must not be negative")
    if dispatch.graceful_shutdown_timeout_s < 0:
        raise ConfigurationError("Shutdown timeout must not be negative")
