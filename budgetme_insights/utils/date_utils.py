"""Date manipulation utilities"""

import re
from datetime import date, datetime, tzinfo
from typing import Optional, Protocol, Tuple
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = ZoneInfo("Asia/Manila")

MONTH_ABBREVIATIONS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


class Clock(Protocol):
    """Source of the current time"""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall clock in a fixed timezone"""

    def __init__(self, tz: tzinfo = DEFAULT_TIMEZONE):
        self.tz = tz

    def now(self) -> datetime:
        return datetime.now(self.tz)


class FixedClock:
    """Clock pinned to a single instant (tests, replays)"""

    def __init__(self, moment: datetime, tz: tzinfo = DEFAULT_TIMEZONE):
        self.moment = localize(moment, tz)

    def now(self) -> datetime:
        return self.moment


def localize(value: datetime, tz: tzinfo = DEFAULT_TIMEZONE) -> datetime:
    """Attach tz to naive datetimes, convert aware ones"""
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


_FRACTION = re.compile(r"\.(\d+)")
_OFFSET = re.compile(r"([+-])(\d{2}):?(\d{2})?$")


def _normalize_timestamp(text: str) -> str:
    """
    Rewrite database-style timestamps into a form fromisoformat accepts on
    every supported Python: "Z" and "+08" or "+0800" offsets become "+HH:MM",
    fractional seconds are padded or cut to six digits.
    """
    if len(text) <= 10:
        return text
    day, clock = text[:10], text[10:]
    if clock.endswith(("Z", "z")):
        clock = clock[:-1] + "+00:00"
    clock = _OFFSET.sub(lambda m: f"{m.group(1)}{m.group(2)}:{m.group(3) or '00'}", clock)
    clock = _FRACTION.sub(lambda m: "." + (m.group(1) + "000000")[:6], clock)
    return day + clock


def parse_transaction_date(value: object, tz: tzinfo = DEFAULT_TIMEZONE) -> Tuple[Optional[datetime], bool]:
    """
    Parse a transaction date into an aware datetime.

    Returns (moment, time_known). Date-only input yields midnight with
    time_known=False. Anything unparseable yields (None, False).
    """
    if value is None:
        return None, False

    if isinstance(value, datetime):
        return localize(value, tz), True

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=tz), False

    if not isinstance(value, str):
        return None, False

    text = value.strip()
    if not text:
        return None, False

    text = _normalize_timestamp(text)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None, False

    # "2024-01-05" carries no time of day
    time_known = len(text) > 10
    return localize(parsed, tz), time_known


def month_key(moment: datetime) -> Tuple[int, int]:
    """(year, month) bucket key"""
    return moment.year, moment.month


def shift_month(year: int, month: int, offset: int) -> Tuple[int, int]:
    """Move a (year, month) pair by offset months"""
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1
