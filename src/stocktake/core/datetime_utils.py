"""UTC datetime utilities.

All timestamps are stored as ISO-8601 strings in UTC.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Return the current time as an ISO-8601 UTC string."""
    return utc_now().isoformat()


def parse_iso_timestamp(timestamp: str) -> datetime:
    """Parse ISO-8601 timestamp, handling both Z and +00:00 suffixes.

    Args:
        timestamp: ISO-8601 timestamp string (e.g., "2024-01-15T10:30:00Z").

    Returns:
        Timezone-aware datetime object (always UTC if no offset specified).
    """
    normalized = timestamp.replace("Z", "+00:00")
    dt = datetime.fromisoformat(normalized)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_timestamp(timestamp: str | None, *, never: str = "never") -> str:
    """Format an ISO-8601 timestamp for display in local time.

    Args:
        timestamp: ISO-8601 timestamp or None.
        never: Text returned when timestamp is None.

    Returns:
        "YYYY-MM-DD HH:MM:SS" in local time, the raw value if it cannot be
        parsed, or the never text when unset.
    """
    if timestamp is None:
        return never
    try:
        return parse_iso_timestamp(timestamp).astimezone().strftime("%Y-%m-%d %H:%M:%S")
    except ValueError:
        return timestamp
