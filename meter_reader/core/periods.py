"""Calendar-month helpers shared by request validation and the duplicate guard."""

from datetime import UTC, datetime


def to_utc_naive(value: datetime) -> datetime:
    """Convert an aware datetime to the naive UTC form used for storage."""
    return value.astimezone(UTC).replace(tzinfo=None)


def month_window(timestamp: datetime) -> tuple[datetime, datetime]:
    """
    Get the calendar month containing ``timestamp``.

    Returns the half-open interval ``[first-of-month, first-of-next-month)``
    with both ends at midnight in the timestamp's own offset.
    """
    start = timestamp.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


def measure_period(timestamp: datetime) -> str:
    """Label of the calendar month containing ``timestamp``, e.g. ``2024-03``."""
    start, _ = month_window(timestamp)
    return f"{start.year:04d}-{start.month:02d}"


def check_storable(timestamp: datetime) -> None:
    """
    Raise ``ValueError`` unless the timestamp's month can be stored and queried.

    Both ends of the month window must survive conversion to UTC.
    """
    try:
        start, end = month_window(timestamp)
        to_utc_naive(start)
        to_utc_naive(end)
    except (OverflowError, ValueError):
        raise ValueError("timestamp is out of the supported range") from None
