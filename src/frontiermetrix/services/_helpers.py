"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time as an aware UTC datetime (the default timeline clock)."""
    return datetime.now(UTC)


def iso(instant: datetime) -> str:
    """ISO 8601 with ``Z`` for UTC, matching the dataset timestamp style.

    Examples:
        >>> iso(datetime(2025, 1, 20, 12, tzinfo=UTC))
        '2025-01-20T12:00:00Z'
    """
    text = instant.isoformat()
    if text.endswith("+00:00"):
        return text[: -len("+00:00")] + "Z"
    return text
