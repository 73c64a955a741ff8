"""
Date and time utilities. All stored timestamps are UTC.
"""

from datetime import date, datetime, timedelta
from typing import Optional

from dateutil import parser, tz

_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2001, 2, 2)


class DateTimeHelper:
    """UTC date and time helpers"""

    @staticmethod
    def now() -> datetime:
        """Current timezone-aware UTC datetime"""
        return datetime.now(tz.UTC)

    @staticmethod
    def as_utc(dt: Optional[datetime]) -> Optional[datetime]:
        """
        Attach or convert to UTC.

        SQLite hands back naive datetimes for timezone columns; those are
        already UTC and only need the tzinfo attached.
        """
        if dt is None:
            return None
        if dt.tzinfo is None:
            return dt.replace(tzinfo=tz.UTC)
        return dt.astimezone(tz.UTC)

    @staticmethod
    def start_of_day(dt: datetime) -> datetime:
        dt = DateTimeHelper.as_utc(dt)
        return dt.replace(hour=0, minute=0, second=0, microsecond=0)

    @staticmethod
    def day_key(dt: datetime) -> str:
        """YYYY-MM-DD of the UTC date"""
        return DateTimeHelper.as_utc(dt).date().isoformat()

    @staticmethod
    def hours_between(start: datetime, end: datetime) -> float:
        delta: timedelta = DateTimeHelper.as_utc(end) - DateTimeHelper.as_utc(start)
        return delta.total_seconds() / 3600.0

    @staticmethod
    def parse_date(value: str, dayfirst: bool = True) -> date:
        """
        Parse a full date such as 05-03-2003 (day first) or 2003-03-05.

        Raises ValueError when the day, month or year is missing.
        """
        value = value.strip()
        # Year-first input is always year-month-day
        if value[:4].isdigit():
            dayfirst = False
        # Missing parts come from the default, so parse against two
        first = parser.parse(value, dayfirst=dayfirst, default=_DEFAULT_A).date()
        second = parser.parse(value, dayfirst=dayfirst, default=_DEFAULT_B).date()
        if first != second:
            raise ValueError(f"Incomplete date: {value!r}")
        return first

    @staticmethod
    def timestamp_ms(dt: Optional[datetime] = None) -> int:
        dt = DateTimeHelper.as_utc(dt) if dt else DateTimeHelper.now()
        return int(dt.timestamp() * 1000)
