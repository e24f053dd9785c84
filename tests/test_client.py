from __future__ import annotations

import json
import logging
import socket
from typing import Any, Dict

import pytest

from gelflog import ConfigurationError, Graylog, Level
from gelflog.config.loader import load_configuration

from conftest import SocketRecorder


def _client(recorder: SocketRecorder, **kwargs: Any) -> Graylog:
    return Graylog(socket_factory=recorder, **kwargs)


def _only_document(recorder: SocketRecorder) -> Dict[str, Any]:
    (document,) = recorder.documents()
    return document


def test_defaults() -> None:
    client = Graylog()
    assert client.address == "localhost"
    assert client.port == 12201
    assert client.host is None
    assert client.node == "node"
    assert client.default_level is Level.INFO
    assert client.level.DEBUG is Level.DEBUG


def test_end_to_end_object(recorder: SocketRecorder) -> None:
    client = _client(recorder, host="my-web-project.com", node="dev.log.test")

    result = client.log({"code": 1245, "label": "label"}, background=False)

    assert result is client
    document = _only_document(recorder)
    assert document["level"] == 6
    assert document["levelName"] == "info"
    assert document["code"] == 1245
    assert document["label"] == "label"
    assert document["message"] == '{"code":1245,"label":"label"}'
    assert document["host"] == "my-web-project.com"
    assert document["node"] == "dev.log.test"
    assert document["version"] == "1.1"
    assert isinstance(document["timestamp"], float)
    assert recorder.sent[0][1] == ("localhost", 12201)


@pytest.mark.parametrize(
    ("method", "code"),
    [
        ("emergency", 0),
        ("alert", 1),
        ("critical", 2),
        ("error", 3),
        ("warning", 4),
        ("notice", 5),
        ("info", 6),
        ("debug", 7),
    ],
)
def test_shortcuts_preset_level(recorder: SocketRecorder, method: str, code: int) -> None:
    client = _client(recorder)
    getattr(client, method)(method, background=False)
    document = _only_document(recorder)
    assert document["level"] == code
    assert document["levelName"] == method
    assert document["message"] == method


def test_default_level_is_configurable(recorder: SocketRecorder) -> None:
    client = _client(recorder, default_level="warning")
    client.log("careful", background=False)
    assert _only_document(recorder)["level"] == 4


def test_dropped_values_send_nothing(recorder: SocketRecorder) -> None:
    client = _client(recorder)
    cyclic: Dict[str, Any] = {}
    cyclic["self"] = cyclic

    client.log(None, background=False)
    client.log(cyclic, background=False)

    assert recorder.sent == []


def test_exception_is_shipped(recorder: SocketRecorder) -> None:
    client = _client(recorder)
    try:
        raise RuntimeError("test error")
    except RuntimeError as exc:
        client.error(exc, background=False)

    document = _only_document(recorder)
    assert document["level"] == 3
    assert document["message"] == "RuntimeError: test error"
    assert document["messageError"] == "test error"
    assert document["error"]["message"] == "test error"
    assert document["stack"]


def test_large_value_is_chunked(recorder: SocketRecorder) -> None:
    client = _client(recorder, chunk_size=500)
    client.log({"message": "m", "payload": "p" * 2000}, background=False)

    datagrams = recorder.datagrams
    assert len(datagrams) > 1
    payload = b"".join(datagram[12:] for datagram in sorted(datagrams, key=lambda d: d[10]))
    assert json.loads(payload)["payload"] == "p" * 2000


def test_log_never_raises(recorder: SocketRecorder, caplog: pytest.LogCaptureFixture) -> None:
    class Unprintable:
        def __str__(self) -> str:
            raise RuntimeError("cannot render")

    recorder.error = OSError("host is down")
    client = _client(recorder)

    with caplog.at_level(logging.ERROR, logger="gelflog"):
        assert client.log(Unprintable(), background=False) is client
        assert client.log("fine", background=False) is client

    assert "cannot render" in caplog.text
    assert "host is down" in caplog.text


def test_background_log_is_sent_after_flush(recorder: SocketRecorder) -> None:
    with _client(recorder) as client:
        client.info("later")
        client.debug({"step": 2})
        assert client.flush(timeout=5.0)

    messages = sorted(document["message"] for document in recorder.documents())
    assert messages == ["later", '{"step":2}']


def test_background_can_be_disabled_by_default(recorder: SocketRecorder) -> None:
    client = _client(recorder, background=False)
    client.notice("now")
    assert _only_document(recorder)["levelName"] == "notice"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"port": 0},
        {"port": 70000},
        {"address": ""},
        {"node": ""},
        {"chunk_size": 0},
        {"chunk_size": 65500},
        {"compression": "brotli"},
        {"queue_maxsize": -1},
    ],
)
def test_invalid_configuration_is_rejected(kwargs: Dict[str, Any]) -> None:
    with pytest.raises(ConfigurationError):
        Graylog(**kwargs)


def test_from_config(recorder: SocketRecorder, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    config = load_configuration(
        {
            "server": {"address": "graylog.internal", "port": 5555},
            "identity": {"host": "api-1", "node": "api"},
            "levels": {"default": "notice"},
            "dispatch": {"background": False},
        }
    )
    client = Graylog.from_config(config, socket_factory=recorder)

    client.log("configured")

    document = _only_document(recorder)
    assert recorder.sent[0][1] == ("graylog.internal", 5555)
    assert document["host"] == "api-1"
    assert document["node"] == "api"
    assert document["levelName"] == "notice"


def test_real_udp_delivery(udp_receiver: socket.socket) -> None:
    port = udp_receiver.getsockname()[1]
    client = Graylog(address="127.0.0.1", port=port, node="loopback")

    client.warning({"message": "over the wire", "_request_id": "r-1"})
    client.flush(timeout=5.0)

    data, _ = udp_receiver.recvfrom(65535)
    document = json.loads(data)
    assert document["message"] == "over the wire"
    assert document["_request_id"] == "r-1"
    assert document["level"] == 4
    assert document["node"] == "loopback"
    client.close()


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def test_non_finite_numbers_are_sent_as_null(recorder: SocketRecorder) -> None:
    client = _client(recorder)

    client.log({"message": "m", "ratio": float("nan"), "peak": float("-inf")}, background=False)

    (datagram,) = recorder.datagrams
    document = json.loads(datagram, parse_constant=_reject_constant)
    assert document["message"] == "m"
    assert document["ratio"] is None
    assert document["peak"] is None


def test_undecodable_text_is_still_sent(recorder: SocketRecorder) -> None:
    client = _client(recorder)

    client.log("file \udcff.txt", background=False)

    assert _only_document(recorder)["message"] == "file ?.txt"
