"""Turn arbitrary log values into GELF documents."""

from __future__ import annotations

import logging
import traceback
from dataclasses import dataclass
from typing import Any, Callable, Dict

from ..utils.serialization import dumps_compact, dumps_pretty, is_serializable
from ..utils.time import epoch_seconds
from .levels import Level, resolve_level
from .values import UNDEFINED, ValueKind, as_mapping, classify, to_text

__all__ = [
    "GELF_VERSION",
    "RESERVED_FIELDS",
    "NormalizationContext",
    "normalize",
    "exception_fields",
    "describe_exception",
]

logger = logging.getLogger(__name__)

GELF_VERSION = "1.1"

RESERVED_FIELDS = frozenset({"message", "version", "timestamp", "node", "host", "level", "levelName"})

# Snapshot produced for a bare exception, whose encoded form has no attributes.
_EMPTY_ERROR_SNAPSHOT = dumps_compact({"error": {}})


@dataclass(frozen=True, slots=True)
class NormalizationContext:
    """Client identity captured once and applied to every document."""

    node: str = "node"
    host: str | None = None
    version: str = GELF_VERSION
    default_level: Any = Level.INFO


def format_stack(exc: BaseException) -> str:
    lines = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return "".join(lines).rstrip("\n")


def describe_exception(exc: BaseException) -> str:
    """``ValueError: boom`` style one-liner."""

    return traceback.format_exception_only(type(exc), exc)[-1].strip()


def exception_fields(exc: BaseException) -> Dict[str, Any]:
    """Plain mapping of an exception including its custom attributes."""

    fields: Dict[str, Any] = {
        "name": type(exc).__name__,
        "message": str(exc),
        "stack": format_stack(exc),
    }
    fields.update(vars(exc))
    return fields


def _build_document(value: Any, kind: ValueKind) -> Dict[str, Any]:
    if kind is ValueKind.EXCEPTION:
        return {"error": value}
    if kind is ValueKind.ARRAY:
        return {"message": dumps_compact(list(value))}
    return as_mapping(value)


def _apply_level(document: Dict[str, Any], level: Any, context: NormalizationContext) -> None:
    if level is not None and level is not UNDEFINED:
        document["level"] = level

    resolved = resolve_level(document.pop("level", None), context.default_level)
    if resolved.code is not None:
        document["level"] = resolved.code
    if resolved.name is not None:
        document["levelName"] = resolved.name


def _coerce_fields(document: Dict[str, Any]) -> None:
    keys = [key for key in document if key not in RESERVED_FIELDS]
    for key in keys:
        value = document[key]
        kind = classify(value)
        if kind in (ValueKind.STRING, ValueKind.NUMBER):
            continue
        if kind is ValueKind.NULL:
            document[key] = "null"
        elif kind is ValueKind.UNDEFINED:
            document[key] = "undefined"
        elif kind is ValueKind.EXCEPTION:
            document["messageError"] = str(value)
            document["stack"] = format_stack(value)
            document[key] = exception_fields(value)
            if document.get("message") == _EMPTY_ERROR_SNAPSHOT:
                document["message"] = describe_exception(value)
        elif kind in (ValueKind.ARRAY, ValueKind.MAPPING):
            document[key] = dumps_pretty(value)
        else:
            document[key] = to_text(value)


def normalize(
    value: Any,
    level: Any = None,
    context: NormalizationContext | None = None,
    *,
    clock: Callable[[], float] = epoch_seconds,
) -> Dict[str, Any] | None:
    """Build the GELF document for ``value``.

    Returns ``None`` when the value must be dropped: it is ``None`` or it
    cannot be encoded as JSON (for example because it contains a reference
    cycle). Mappings are copied, so the caller's object is left untouched.

    ``message`` defaults to the compact JSON of the input as given, before
    ``version``, ``timestamp``, ``node``, ``host`` and ``level`` are merged in.
    """

    ctx = context or NormalizationContext()
    kind = classify(value)
    if not kind.is_structured:
        value = {"message": to_text(value)}
        kind = ValueKind.MAPPING

    if kind is ValueKind.NULL:
        logger.debug("Dropping null log value")
        return None
    if not is_serializable(value):
        logger.debug("Dropping log value that cannot be encoded as JSON")
        return None

    document = _build_document(value, kind)

    if not document.get("message"):
        document["message"] = dumps_compact(document)

    document["version"] = document.get("version") or ctx.version
    document["timestamp"] = document.get("timestamp") or clock()
    document["node"] = document.get("node") or ctx.node
    host = document.get("host") or ctx.host
    if host:
        document["host"] = host
    else:
        document.pop("host", None)

    _apply_level(document, level, ctx)
    _coerce_fields(document)
    return document
