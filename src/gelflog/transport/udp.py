"""Chunked GELF delivery over UDP."""

from __future__ import annotations

import gzip
import logging
import math
import os
import socket
import zlib
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping

from ..utils.serialization import dumps_compact

__all__ = [
    "CHUNK_MAGIC",
    "CHUNK_HEADER_SIZE",
    "MAX_CHUNKS",
    "MAX_DATAGRAM_SIZE",
    "COMPRESSION_KINDS",
    "TransportConfig",
    "ChunkedTransport",
    "chunk_count",
]

logger = logging.getLogger(__name__)

CHUNK_MAGIC = b"\x1e\x0f"
CHUNK_HEADER_SIZE = 12
MAX_CHUNKS = 128
MAX_DATAGRAM_SIZE = 65507
COMPRESSION_KINDS = ("none", "zlib", "gzip")

SocketFactory = Callable[[], Any]


@dataclass(slots=True)
class TransportConfig:
    chunk_size: int = 1100
    compression: str = "none"


def _udp_socket() -> socket.socket:
    return socket.socket(socket.AF_INET, socket.SOCK_DGRAM)


def chunk_count(length: int, chunk_size: int) -> int:
    return math.ceil(length / chunk_size)


class ChunkedTransport:
    """Fire-and-forget GELF sender.

    Payloads up to ``chunk_size`` bytes go out as a single datagram. Larger
    payloads are split into GELF chunks sharing a random 8 byte message id.
    Every datagram uses its own short-lived socket and send failures are
    logged, never raised.
    """

    def __init__(
        self,
        address: str = "localhost",
        port: int = 12201,
        config: TransportConfig | None = None,
        *,
        socket_factory: SocketFactory | None = None,
    ) -> None:
        self.address = address
        self.port = port
        self.config = config or TransportConfig()
        self._socket_factory = socket_factory or _udp_socket

    @property
    def chunk_size(self) -> int:
        return self.config.chunk_size

    def encode(self, document: Mapping[str, Any]) -> bytes:
        payload = dumps_compact(document).encode("utf-8", errors="replace")
        if self.config.compression == "zlib":
            return zlib.compress(payload)
        if self.config.compression == "gzip":
            return gzip.compress(payload)
        return payload

    def build_datagrams(self, payload: bytes) -> List[bytes]:
        """Split ``payload`` into the datagrams that carry it.

        A payload that would need more than ``MAX_CHUNKS`` chunks yields no
        datagrams at all.
        """

        size = self.chunk_size
        length = len(payload)
        if length <= size:
            return [payload]

        total = chunk_count(length, size)
        if total > MAX_CHUNKS:
            logger.warning(
                "Dropping GELF message of %d bytes: %d chunks exceed the limit of %d",
                length,
                total,
                MAX_CHUNKS,
            )
            return []

        message_id = os.urandom(8)
        datagrams: List[bytes] = []
        for sequence in range(total):
            start = size * sequence
            end = min(start + size, length)
            header = CHUNK_MAGIC + message_id + bytes((sequence, total))
            datagrams.append(header + payload[start:end])
        return datagrams

    def send(self, document: Mapping[str, Any]) -> None:
        payload = self.encode(document)
        for index, datagram in enumerate(self.build_datagrams(payload)):
            self._send_datagram(datagram, index)

    def _send_datagram(self, datagram: bytes, index: int) -> None:
        try:
            sock = self._socket_factory()
        except OSError as exc:
            logger.error("Unable to open UDP socket for %s:%s: %s", self.address, self.port, exc)
            return
        try:
            sock.sendto(datagram, (self.address, self.port))
        except OSError as exc:
            logger.error(
                "Failed to send GELF datagram %d (%d bytes) to %s:%s: %s",
                index,
                len(datagram),
                self.address,
                self.port,
                exc,
            )
        finally:
            sock.close()
