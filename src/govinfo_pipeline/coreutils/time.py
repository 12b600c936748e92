from datetime import date, datetime, timezone
from typing import Union

DateLike = Union[date, datetime, str]


def format_date(value: DateLike) -> str:
    """Format a date as YYYY-MM-DD. Strings are passed through unchanged.

    Timezone-aware datetimes are converted to UTC first, like format_datetime.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.strftime("%Y-%m-%d")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def format_datetime(value: DateLike) -> str:
    """Format a date/datetime as the ISO timestamp govInfo expects (YYYY-MM-DDTHH:MM:SSZ).

    Naive datetimes are treated as UTC, plain dates as midnight UTC.
    Strings are passed through unchanged.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.strftime("%Y-%m-%dT%H:%M:%SZ")
    if isinstance(value, date):
        return f"{value.isoformat()}T00:00:00Z"
    return str(value)
