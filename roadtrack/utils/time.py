"""Time utilities."""
from datetime import UTC, date, datetime, time, timezone


def utcnow() -> datetime:
    """Return current UTC time with timezone awareness."""

    return datetime.now(tz=UTC)


def parse_iso_utc(value: str) -> datetime:
    """Parse an ISO 8601 string and normalize it to UTC."""

    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive values and convert aware ones; SQLite hands back naive datetimes."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_date_only(value: str) -> bool:
    """Return True for ``YYYY-MM-DD`` strings without a time component."""

    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def end_of_day(value: datetime) -> datetime:
    """Return the last representable instant of ``value``'s calendar day."""

    return datetime.combine(value.date(), time.max, tzinfo=value.tzinfo)


def isoformat_or_none(value: datetime | date | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value).isoformat()
    return value.isoformat()


__all__ = ["utcnow", "parse_iso_utc", "ensure_utc", "is_date_only", "end_of_day", "isoformat_or_none"]
