"""Classification of arbitrary log values."""

from __future__ import annotations

import dataclasses
import enum
from collections.abc import Mapping
from numbers import Number
from typing import Any, Dict

__all__ = ["UNDEFINED", "ValueKind", "classify", "as_mapping", "to_text"]


class _Undefined:
    """Marker for a value that was never supplied."""

    _instance: "_Undefined | None" = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __str__(self) -> str:
        return "undefined"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()


class ValueKind(enum.Enum):
    NULL = "null"
    UNDEFINED = "undefined"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    EXCEPTION = "exception"
    ARRAY = "array"
    MAPPING = "mapping"
    OTHER = "other"

    @property
    def is_structured(self) -> bool:
        return self in _STRUCTURED


_STRUCTURED = {ValueKind.NULL, ValueKind.EXCEPTION, ValueKind.ARRAY, ValueKind.MAPPING}


def classify(value: Any) -> ValueKind:
    """Return the kind of ``value``; bools are never numbers."""

    if value is None:
        return ValueKind.NULL
    if value is UNDEFINED:
        return ValueKind.UNDEFINED
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, Number):
        return ValueKind.NUMBER
    if isinstance(value, BaseException):
        return ValueKind.EXCEPTION
    if isinstance(value, (list, tuple)):
        return ValueKind.ARRAY
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return ValueKind.MAPPING
    return ValueKind.OTHER


def as_mapping(value: Any) -> Dict[str, Any]:
    """Shallow copy of a mapping-like value with string keys."""

    if isinstance(value, Mapping):
        return {str(key): item for key, item in value.items()}
    return {field.name: getattr(value, field.name) for field in dataclasses.fields(value)}


def to_text(value: Any) -> str:
    """Render a scalar the way it reads in a JSON document."""

    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return "null"
    return str(value)
