from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo

from dateutil.relativedelta import relativedelta

from finance_reports.domain.timestamps import local_zone, now_local, to_local

_ONE_MICROSECOND = timedelta(microseconds=1)


def _instant(moment: datetime) -> datetime:
    return moment.astimezone(timezone.utc)


@dataclass(frozen=True)
class Period:
    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if _instant(self.start) > _instant(self.end):
            raise ValueError(f"period start {self.start} is after end {self.end}")

    def contains(self, moment: datetime) -> bool:
        # Same-zone datetimes compare by wall clock, so compare UTC instants.
        return _instant(self.start) <= _instant(moment) <= _instant(self.end)


def _resolve_now(now: datetime | None, tz: tzinfo | None) -> datetime:
    if now is None:
        return now_local(tz)
    return to_local(now, tz)


def start_of_month(moment: datetime) -> datetime:
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def month_period(year: int, month: int, tz: tzinfo | None = None) -> Period:
    start = datetime(year, month, 1, tzinfo=tz or local_zone())
    return Period(start, start + relativedelta(months=1) - _ONE_MICROSECOND)


def year_period(year: int, tz: tzinfo | None = None) -> Period:
    start = datetime(year, 1, 1, tzinfo=tz or local_zone())
    return Period(start, start + relativedelta(years=1) - _ONE_MICROSECOND)


def current_month_to_date(now: datetime | None = None, tz: tzinfo | None = None) -> Period:
    current = _resolve_now(now, tz)
    return Period(start_of_month(current), current)


def previous_month(now: datetime | None = None, tz: tzinfo | None = None) -> Period:
    current = _resolve_now(now, tz)
    first_of_month = start_of_month(current)
    return Period(first_of_month - relativedelta(months=1), first_of_month - _ONE_MICROSECOND)


def trailing_months(months_back: int, now: datetime | None = None, tz: tzinfo | None = None) -> Period:
    if months_back < 0:
        raise ValueError("months_back must be non-negative")
    current = _resolve_now(now, tz)
    return Period(start_of_month(current) - relativedelta(months=months_back), current)
