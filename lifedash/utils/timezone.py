"""
Timezone Utilities - Centralized handling of the user's local calendar

Every "today" in the application comes from a Clock, so date boundaries are
always taken from the local year/month/day and never from a UTC timestamp.
"""
from datetime import date, datetime, timedelta
from typing import Optional, Union
import pytz

from lifedash.core.config import settings

DateLike = Union[date, str]


def get_local_tz(tz_name: Optional[str] = None):
    """
    Get the configured local timezone object

    Args:
        tz_name: Optional IANA timezone name, defaults to settings.APP_TIMEZONE

    Returns:
        pytz timezone
    """
    return pytz.timezone(tz_name or settings.APP_TIMEZONE)


class Clock:
    """Supplies "now" and "today" in the user's local timezone"""

    def __init__(self, tz_name: Optional[str] = None):
        self.tz = get_local_tz(tz_name)

    def now(self) -> datetime:
        """Timezone-aware current datetime"""
        return datetime.now(self.tz)

    def today(self) -> date:
        """Current calendar date in the local timezone"""
        return self.now().date()


class FixedClock(Clock):
    """Clock pinned to a single calendar date"""

    def __init__(self, fixed: DateLike, tz_name: Optional[str] = None):
        super().__init__(tz_name)
        self.fixed = to_date(fixed)

    def now(self) -> datetime:
        return self.tz.localize(datetime(self.fixed.year, self.fixed.month, self.fixed.day, 12, 0))

    def today(self) -> date:
        return self.fixed


_default_clock: Optional[Clock] = None


def get_clock() -> Clock:
    """Get the shared application clock"""
    global _default_clock
    if _default_clock is None:
        _default_clock = Clock()
    return _default_clock


def to_date(value: DateLike) -> date:
    """
    Coerce a date or 'YYYY-MM-DD' string into a date

    Timestamps ('2024-06-10T08:00:00Z') are reduced to their date portion
    as written, without any timezone conversion.

    Raises:
        ValueError: If the string does not start with a valid ISO date
        TypeError: If value is neither a date nor a string
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise TypeError(f"Expected date or str, got {type(value).__name__}")


def resolve_reference_date(value: Optional[DateLike] = None, clock: Optional[Clock] = None) -> date:
    """Use value when given, otherwise today's date from the clock"""
    if value is not None:
        return to_date(value)
    return (clock or get_clock()).today()


def previous_day(value: DateLike) -> date:
    """The calendar day before value"""
    return to_date(value) - timedelta(days=1)
