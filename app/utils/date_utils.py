import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple, Union

from dateutil.parser import isoparse

DateInput = Union[str, date, datetime, None]

# calendar date, optionally followed by a time part
FULL_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}(?:[T ]|$)")

WINDOW_START_TIME = time(0, 0, 0)
WINDOW_END_TIME = time(23, 59, 59)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_calendar_date(value: DateInput) -> Optional[date]:
    """
    Parse an ISO 8601 date or datetime into a calendar date.

    The time component, if any, is dropped. Blank strings and values that
    do not name a real calendar day (e.g. '2024-02-30') yield None, as do
    reduced-precision forms such as '2024' or '2024-02'.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not FULL_DATE_PREFIX.match(text):
        return None
    try:
        return isoparse(text).date()
    except (ValueError, OverflowError):
        return None


def format_calendar_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def day_window(start: date, end: date) -> Tuple[datetime, datetime]:
    """Inclusive timestamp bounds (naive UTC) covering whole days start..end."""
    return datetime.combine(start, WINDOW_START_TIME), datetime.combine(end, WINDOW_END_TIME)


def trailing_days(days: int, today: Optional[date] = None) -> Tuple[date, date]:
    end = today or utc_now().date()
    return end - timedelta(days=days), end
