"""Date bucketing and calendar-day range utilities"""

import calendar
from datetime import date, datetime, time, timezone
from typing import Tuple, Union

from westgate_analytics.domain.models import DateRange

# Single reference frame for bucketing and range filtering
REFERENCE_TZ = timezone.utc


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware datetime.

    The store may return timestamps without a zone marker; those are UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def calendar_date(ts: datetime) -> date:
    """Calendar day of a timestamp in the reference frame"""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(REFERENCE_TZ).date()


def month_key(ts: datetime) -> str:
    """Month bucket "YYYY-MM"; lexicographic order equals chronological order"""
    day = calendar_date(ts)
    return f"{day.year:04d}-{day.month:02d}"


def parse_month_key(key: str) -> Tuple[int, int]:
    """Inverse of month_key: "2024-03" -> (2024, 3)"""
    year_text, sep, month_text = key.partition("-")
    if not sep or len(year_text) != 4 or len(month_text) != 2:
        raise ValueError(f"Invalid month key: {key!r}")
    year, month = int(year_text), int(month_text)
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month key: {key!r}")
    return year, month


def in_date_range(ts: datetime, date_range: DateRange) -> bool:
    """
    Inclusive range check on the calendar (year, month, day) triple only.

    Sub-day components are ignored so a record at 23:59 on the end date is
    still inside the window.
    """
    return date_range.start <= calendar_date(ts) <= date_range.end


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=REFERENCE_TZ)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max, tzinfo=REFERENCE_TZ)


def default_date_range(today: date | None = None) -> DateRange:
    """January 1st of the current year through today"""
    today = today or date.today()
    return DateRange(start=date(today.year, 1, 1), end=today)


def quick_range(months: int, today: date | None = None) -> DateRange:
    """Window covering the last N months, ending today"""
    today = today or date.today()
    month_index = today.year * 12 + (today.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    # Clamp e.g. March 31st minus one month to February 28th/29th
    day = min(today.day, calendar.monthrange(year, month)[1])
    return DateRange(start=date(year, month, day), end=today)
