from __future__ import annotations

import json
import socket
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Tuple

import pytest

import gelflog.api as gelflog_api


@pytest.fixture(autouse=True)
def reset_gelflog() -> Iterator[None]:
    yield
    gelflog_api.shutdown()


class FakeSocket:
    def __init__(self, recorder: "SocketRecorder") -> None:
        self.recorder = recorder
        self.closed = False

    def sendto(self, data: bytes, address: Tuple[str, int]) -> int:
        if self.recorder.error is not None:
            raise self.recorder.error
        self.recorder.sent.append((data, address))
        return len(data)

    def close(self) -> None:
        self.closed = True


@dataclass
class SocketRecorder:
    """Socket factory that records datagrams instead of sending them."""

    sent: List[Tuple[bytes, Tuple[str, int]]] = field(default_factory=list)
    sockets: List[FakeSocket] = field(default_factory=list)
    error: OSError | None = None

    def __call__(self) -> FakeSocket:
        sock = FakeSocket(self)
        self.sockets.append(sock)
        return sock

    @property
    def datagrams(self) -> List[bytes]:
        return [data for data, _ in self.sent]

    def documents(self) -> List[Dict[str, Any]]:
        return [json.loads(data.decode("utf-8")) for data in self.datagrams]


@pytest.fixture
def recorder() -> SocketRecorder:
    return SocketRecorder()


@pytest.fixture
def udp_receiver() -> Iterator[socket.socket]:
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(5.0)
    yield sock
    sock.close()
