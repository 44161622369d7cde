"""Datetime utility functions."""

from datetime import UTC, datetime, timedelta

# Chromium stores timestamps as microseconds since 1601-01-01 UTC
WEBKIT_EPOCH = datetime(1601, 1, 1, tzinfo=UTC)


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from SQLite."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def webkit_to_iso(value: str | int | None) -> str | None:
    """Convert a Chromium `date_added` value to an ISO-8601 string."""
    if value in (None, "", "0", 0):
        return None
    try:
        microseconds = int(value)
    except (TypeError, ValueError):
        return None
    return (WEBKIT_EPOCH + timedelta(microseconds=microseconds)).isoformat()
