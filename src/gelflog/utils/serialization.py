"""JSON helpers shared by normalization and transport."""

from __future__ import annotations

import dataclasses
import json
import math
from collections.abc import Mapping
from typing import Any, Set

__all__ = ["json_default", "finite", "dumps_compact", "dumps_pretty", "is_serializable"]


def finite(value: Any, _active: Set[int] | None = None) -> Any:
    """Copy of ``value`` with non-finite floats replaced by ``None``.

    Raises ``ValueError`` on a reference cycle.
    """

    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if not isinstance(value, (Mapping, list, tuple)):
        return value

    active = _active if _active is not None else set()
    marker = id(value)
    if marker in active:
        raise ValueError("Circular reference detected")
    active.add(marker)
    try:
        if isinstance(value, Mapping):
            return {key: finite(item, active) for key, item in value.items()}
        return [finite(item, active) for item in value]
    finally:
        active.discard(marker)


def json_default(value: Any) -> Any:
    """Fallback encoder for values ``json`` does not know about."""

    if isinstance(value, BaseException):
        return finite(dict(vars(value)))
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return finite({field.name: getattr(value, field.name) for field in dataclasses.fields(value)})
    if isinstance(value, (set, frozenset)):
        return finite(list(value))
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def dumps_compact(value: Any) -> str:
    return json.dumps(
        finite(value),
        ensure_ascii=False,
        allow_nan=False,
        separators=(",", ":"),
        default=json_default,
    )


def dumps_pretty(value: Any) -> str:
    return json.dumps(finite(value), ensure_ascii=False, allow_nan=False, indent=2, default=json_default)


def is_serializable(value: Any) -> bool:
    """Return ``True`` when ``value`` encodes to strict JSON (no reference cycles)."""

    try:
        dumps_compact(value)
    except (TypeError, ValueError, RecursionError):
        return False
    return True
