"""Syslog severity levels and resolution helpers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from numbers import Number
from collections.abc import Mapping
from typing import Any

from .values import UNDEFINED

__all__ = [
    "SeverityLevel",
    "ResolvedLevel",
    "Level",
    "LEVELS",
    "resolve_level",
    "from_logging_level",
]


@dataclass(frozen=True, slots=True)
class SeverityLevel:
    code: int
    name: str
    description: str


@dataclass(frozen=True, slots=True)
class ResolvedLevel:
    """Outcome of level resolution; either part may be missing."""

    code: int | None = None
    name: str | None = None


class Level:
    """Namespace of the eight canonical severity levels."""

    EMERGENCY = SeverityLevel(0, "emergency", "system is unusable")
    ALERT = SeverityLevel(1, "alert", "action must be taken immediately")
    CRITICAL = SeverityLevel(2, "critical", "critical conditions")
    ERROR = SeverityLevel(3, "error", "error conditions")
    WARNING = SeverityLevel(4, "warning", "warning conditions")
    NOTICE = SeverityLevel(5, "notice", "normal, but significant, condition")
    INFO = SeverityLevel(6, "info", "informational message")
    DEBUG = SeverityLevel(7, "debug", "debug level message")


LEVELS: tuple[SeverityLevel, ...] = (
    Level.EMERGENCY,
    Level.ALERT,
    Level.CRITICAL,
    Level.ERROR,
    Level.WARNING,
    Level.NOTICE,
    Level.INFO,
    Level.DEBUG,
)

_BY_CODE = {level.code: level for level in LEVELS}
_BY_NAME = {level.name: level for level in LEVELS}


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def resolve_level(requested: Any, fallback: Any) -> ResolvedLevel:
    """Resolve ``requested`` into a code/name pair.

    ``None`` falls back to ``fallback``. Level objects and mappings are taken
    verbatim without checking them against the canonical table. Numbers are
    looked up by code and names by their trimmed, lower-cased spelling; an
    unknown value keeps only the half that was supplied.
    """

    if requested is None or requested is UNDEFINED:
        requested = fallback

    if isinstance(requested, (SeverityLevel, ResolvedLevel)):
        return ResolvedLevel(code=requested.code, name=requested.name)
    if isinstance(requested, Mapping):
        return ResolvedLevel(code=requested.get("code"), name=requested.get("name"))

    if _is_number(requested):
        found = _BY_CODE.get(requested)
        if found is None:
            return ResolvedLevel(code=requested)
        return ResolvedLevel(code=found.code, name=found.name)

    name = str(requested).strip().lower()
    found = _BY_NAME.get(name)
    if found is None:
        return ResolvedLevel(name=name)
    return ResolvedLevel(code=found.code, name=found.name)


def from_logging_level(levelno: int) -> SeverityLevel:
    """Map a stdlib ``logging`` level number onto a syslog severity."""

    if levelno >= logging.CRITICAL:
        return Level.CRITICAL
    if levelno >= logging.ERROR:
        return Level.ERROR
    if levelno >= logging.WARNING:
        return Level.WARNING
    if levelno >= logging.INFO:
        return Level.INFO
    return Level.DEBUG
