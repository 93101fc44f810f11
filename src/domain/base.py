from datetime import UTC, datetime


def utc_now() -> datetime:
    """Naive UTC timestamp, the form DateTime columns round-trip through SQLite."""
    return datetime.now(UTC).replace(tzinfo=None)
