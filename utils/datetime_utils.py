from datetime import datetime, date, time
from typing import Union

import pytz

# Границы суток везде считаются по UTC
UTC = pytz.UTC

DateLike = Union[datetime, date]


def utc_now() -> datetime:
    return datetime.now(UTC)


def to_utc(dt: datetime) -> datetime:
    """Naive datetime считается уже приведенным к UTC"""
    if dt.tzinfo is None:
        return UTC.localize(dt)
    return dt.astimezone(UTC)


def utc_day(value: DateLike) -> date:
    """Календарный день UTC для даты или момента времени"""
    if isinstance(value, datetime):
        return to_utc(value).date()
    return value


def today_utc() -> date:
    return utc_now().date()


def day_start(day: date) -> datetime:
    return UTC.localize(datetime.combine(day, time.min))


def day_end(day: date) -> datetime:
    return UTC.localize(datetime.combine(day, time.max))
