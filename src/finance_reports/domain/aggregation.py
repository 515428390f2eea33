from collections.abc import Iterable
from datetime import datetime, tzinfo

from dateutil.relativedelta import relativedelta

from finance_reports.domain.periods import Period, start_of_month, trailing_months, year_period
from finance_reports.domain.timestamps import local_zone, now_local, to_local, to_utc
from finance_reports.models import MonthlyBucket, PeriodTotals, Transaction, ViewMode


def local_date(transaction: Transaction, tz: tzinfo | None = None) -> datetime:
    return to_local(transaction.transaction_date, tz)


def sum_totals(transactions: Iterable[Transaction]) -> PeriodTotals:
    income = 0.0
    expenses = 0.0
    for transaction in transactions:
        if transaction.amount > 0:
            income += transaction.amount
        elif transaction.amount < 0:
            expenses += abs(transaction.amount)
    return PeriodTotals(income=income, expenses=expenses)


def filter_period(
    transactions: Iterable[Transaction],
    start: datetime,
    end: datetime,
    tz: tzinfo | None = None,
) -> list[Transaction]:
    period = Period(to_local(start, tz), to_local(end, tz))
    return [t for t in transactions if period.contains(local_date(t, tz))]


def aggregate_period(
    transactions: Iterable[Transaction],
    start: datetime,
    end: datetime,
    tz: tzinfo | None = None,
) -> PeriodTotals:
    return sum_totals(filter_period(transactions, start, end, tz))


def bucket_by_month(
    transactions: Iterable[Transaction],
    months_back: int,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> list[MonthlyBucket]:
    zone = tz or local_zone()
    window = trailing_months(months_back, now, zone)
    first_month = start_of_month(window.start)

    buckets: list[MonthlyBucket] = []
    index_by_month: dict[tuple[int, int], int] = {}
    for offset in range(months_back + 1):
        month_start = first_month + relativedelta(months=offset)
        index_by_month[(month_start.year, month_start.month)] = len(buckets)
        buckets.append(MonthlyBucket(year=month_start.year, month=month_start.month))

    for transaction in transactions:
        moment = local_date(transaction, zone)
        if not window.contains(moment):
            continue
        bucket = buckets[index_by_month[(moment.year, moment.month)]]
        if transaction.amount > 0:
            bucket.income += transaction.amount
        elif transaction.amount < 0:
            bucket.expenses += abs(transaction.amount)

    return buckets


def bucket_by_year_month(
    transactions: Iterable[Transaction],
    year: int,
    tz: tzinfo | None = None,
) -> list[MonthlyBucket]:
    zone = tz or local_zone()
    buckets = [MonthlyBucket(year=year, month=month) for month in range(1, 13)]
    for transaction in transactions:
        moment = local_date(transaction, zone)
        if moment.year != year:
            continue
        bucket = buckets[moment.month - 1]
        if transaction.amount > 0:
            bucket.income += transaction.amount
        elif transaction.amount < 0:
            bucket.expenses += abs(transaction.amount)
    return buckets


def filter_year(
    transactions: Iterable[Transaction],
    year: int,
    tz: tzinfo | None = None,
) -> list[Transaction]:
    period = year_period(year, tz or local_zone())
    return [t for t in transactions if period.contains(local_date(t, period.start.tzinfo))]


def filter_year_to_date(
    transactions: Iterable[Transaction],
    year: int,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> list[Transaction]:
    zone = tz or local_zone()
    current = to_local(now, zone) if now is not None else now_local(zone)
    cutoff = to_utc(current)
    return [
        t for t in filter_year(transactions, year, zone)
        if to_utc(t.transaction_date) <= cutoff
    ]


def filter_by_view_mode(
    transactions: Iterable[Transaction],
    year: int,
    view_mode: ViewMode = "fullYear",
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> list[Transaction]:
    if view_mode == "yearToday":
        return filter_year_to_date(transactions, year, now, tz)
    return filter_year(transactions, year, tz)


def aggregate_by_year(
    transactions: Iterable[Transaction],
    year: int,
    view_mode: ViewMode = "fullYear",
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> PeriodTotals:
    return sum_totals(filter_by_view_mode(transactions, year, view_mode, now, tz))


def years_with_data(
    transactions: Iterable[Transaction],
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> list[int]:
    zone = tz or local_zone()
    current = to_local(now, zone) if now is not None else now_local(zone)
    years = {local_date(t, zone).year for t in transactions}
    years.add(current.year)
    return sorted(years, reverse=True)
