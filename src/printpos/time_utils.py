from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Union

from printpos.domain.errors import ValidationError
from printpos.domain.models import ReportPeriod

DateLike = Union[date, datetime, str]


def local_now() -> datetime:
    """Local wall-clock time, second precision. Timestamps are never UTC-shifted."""
    return datetime.now().replace(microsecond=0)


def format_date(value: DateLike) -> str:
    """Zero-padded YYYY-MM-DD, the sortable prefix every stored timestamp starts with."""
    return parse_date(value).isoformat()


def format_datetime(value: datetime) -> str:
    return value.replace(microsecond=0, tzinfo=None).isoformat(timespec="seconds")


def date_prefix(timestamp: str) -> str:
    return timestamp.split("T", 1)[0]


def parse_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(date_prefix(value.strip()))
    except (AttributeError, ValueError) as e:
        raise ValidationError(f"Invalid date: {value}") from e


def week_range(anchor: DateLike) -> tuple[str, str]:
    d = parse_date(anchor)
    start = d - timedelta(days=d.weekday())
    return start.isoformat(), (start + timedelta(days=6)).isoformat()


def month_range(anchor: DateLike) -> tuple[str, str]:
    d = parse_date(anchor)
    last_day = calendar.monthrange(d.year, d.month)[1]
    return d.replace(day=1).isoformat(), d.replace(day=last_day).isoformat()


def period_range(period: ReportPeriod | str, anchor: DateLike) -> tuple[str, str]:
    """Inclusive (start, end) date strings for the period containing `anchor`.

    Weeks run Monday to Sunday.
    """
    period = ReportPeriod(period)
    if period is ReportPeriod.WEEK:
        return week_range(anchor)
    if period is ReportPeriod.MONTH:
        return month_range(anchor)
    day = parse_date(anchor).isoformat()
    return day, day


def in_range(timestamp: str, start: str, end: str) -> bool:
    # Lexicographic comparison is valid only for zero-padded YYYY-MM-DD prefixes.
    day = date_prefix(timestamp)
    return start <= day <= end


def previous_day(value: DateLike) -> str:
    return (parse_date(value) - timedelta(days=1)).isoformat()
