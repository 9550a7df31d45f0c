"""Helpers for the `Unix-Time` tag carried by every entity record."""
from datetime import datetime, timezone


def now_seconds() -> datetime:
    """Current UTC time truncated to whole seconds."""
    return datetime.now(timezone.utc).replace(microsecond=0)


def format_unix_time(timestamp: datetime) -> str:
    """Whole seconds since epoch; the sub-second part is truncated, never rounded."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    delta = timestamp - datetime(1970, 1, 1, tzinfo=timezone.utc)
    return str(delta.days * 86400 + delta.seconds)


def parse_unix_time(value: str | None) -> datetime | None:
    """Returns None for an absent tag, raises ValueError for a malformed one."""
    if value is None or value == "":
        return None
    seconds = int(value)
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError) as e:
        raise ValueError(f"Unix time out of range: {value!r}") from e


def datetime_to_ms(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    delta = value - datetime(1970, 1, 1, tzinfo=timezone.utc)
    return (delta.days * 86400 + delta.seconds) * 1000 + delta.microseconds // 1000


def ms_to_datetime(value: int) -> datetime:
    seconds, millis = divmod(value, 1000)
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(microsecond=millis * 1000)
    except (OverflowError, OSError) as e:
        raise ValueError(f"Millisecond timestamp out of range: {value!r}") from e
