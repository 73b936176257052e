from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return current time as an aware UTC datetime.

    SQLModel maps `datetime` fields to `UTCDateTime`, which rejects naive
    values on write and returns aware UTC values on read.
    """
    return datetime.now(UTC)
