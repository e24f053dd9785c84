"""Configuration schema definition for gelflog."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from ..handlers.queue_async import DispatchConfig
from ..transport.udp import TransportConfig

DEFAULT_CONFIG: Dict[str, Any] = {
    "server": {
        "address": "localhost",
        "port": 12201,
    },
    "identity": {
        "host": None,
        "node": "node",
    },
    "levels": {
        "default": "info",
    },
    "transport": {
        "chunk_size": 1100,
        "compression": "none",
        "version": "1.1",
    },
    "dispatch": {
        "background": True,
        "queue_maxsize": 0,
        "graceful_shutdown_timeout_s": 5.0,
    },
}


def default_config() -> Dict[str, Any]:
    """Return a deep copy of the default configuration mapping."""

    return deepcopy(DEFAULT_CONFIG)


@dataclass(slots=True)
class ServerConfig:
    address: str = "localhost"
    port: int = 12201


@dataclass(slots=True)
class IdentityConfig:
    host: str | None = None
    node: str = "node"


@dataclass(slots=True)
class GraylogConfig:
    server: ServerConfig
    identity: IdentityConfig
    transport: TransportConfig
    dispatch: DispatchConfig
    default_level: Any = "info"
    version: str = "1.1"
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = data.get(name, {})
    return value if isinstance(value, Mapping) else {}


def _to_server(data: Mapping[str, Any]) -> ServerConfig:
    return ServerConfig(
        address=str(data.get("address", "localhost")),
        port=int(data.get("port", 12201)),
    )


def _to_identity(data: Mapping[str, Any]) -> IdentityConfig:
    host = data.get("host")
    return IdentityConfig(
        host=str(host) if host else None,
        node=str(data.get("node", "node")),
    )


def _to_transport(data: Mapping[str, Any]) -> TransportConfig:
    return TransportConfig(
        chunk_size=int(data.get("chunk_size", 1100)),
        compression=str(data.get("compression", "none")).lower(),
    )


def _to_dispatch(data: Mapping[str, Any]) -> DispatchConfig:
    return DispatchConfig(
        background=bool(data.get("background", True)),
        queue_maxsize=int(data.get("queue_maxsize", 0)),
        graceful_shutdown_timeout_s=float(data.get("graceful_shutdown_timeout_s", 5.0)),
    )


def build_config(data: Mapping[str, Any]) -> GraylogConfig:
    levels = _section(data, "levels")
    transport = _section(data, "transport")
    return GraylogConfig(
        server=_to_server(_section(data, "server")),
        identity=_to_identity(_section(data, "identity")),
        transport=_to_transport(transport),
        dispatch=_to_dispatch(_section(data, "dispatch")),
        default_level=levels.get("default", "info"),
        version=str(transport.get("version", "1.1")),
        raw=deepcopy({k: v for k, v in data.items()}),
    )
