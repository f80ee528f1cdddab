"""UTC timestamps for records and file names.

Stored timestamps are timezone-aware UTC. File names carry a millisecond
timestamp with the characters Windows rejects replaced.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime (model column default)."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Normalize dt to aware UTC; None stays None.

    SQLite returns naive datetimes, which are taken to be UTC already.
    Repositories call this when mapping rows to results.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def file_timestamp(moment: datetime | None = None) -> str:
    """Return e.g. '2024-03-01T10-15-30-123Z' for moment (default: now).

    ISO-8601 UTC at millisecond precision with ':' and '.' replaced by '-'.
    """
    value = ensure_utc(moment) or utc_now()
    iso = value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
    return iso.replace(":", "-").replace(".", "-")
