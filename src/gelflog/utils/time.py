"""Time utilities for gelflog."""

from __future__ import annotations

from datetime import datetime, timezone

__all__ = ["utcnow", "epoch_seconds"]


def utcnow() -> datetime:
    """Return a timezone-aware UTC ``datetime`` instance."""

    return datetime.now(timezone.utc)


def epoch_seconds() -> float:
    """Seconds since the epoch with sub-second precision."""

    return utcnow().timestamp()
