"""Date manipulation utilities"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Union

Moment = Union[date, datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(moment: Moment) -> datetime:
    """Promote dates to midnight and naive datetimes to UTC"""
    if not isinstance(moment, datetime):
        moment = datetime.combine(moment, time.min)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def days_between(earlier: Moment, later: Moment) -> int:
    """Whole days from earlier to later, floored (negative if reversed)"""
    return (as_utc(later) - as_utc(earlier)) // timedelta(days=1)


def in_window(moment: Moment, start: datetime, end: datetime) -> bool:
    """Inclusive window membership"""
    return start <= as_utc(moment) <= end
