from collections.abc import Iterable
from datetime import datetime, tzinfo

from finance_reports.domain.aggregation import aggregate_period
from finance_reports.domain.periods import current_month_to_date, previous_month
from finance_reports.models import MetricType, PeriodTotals, Transaction, TrendDirection, TrendResult

METRICS: tuple[MetricType, ...] = ("income", "expenses", "savings")


def compute_trend(current: float, previous: float) -> float:
    # From zero: 0 when still zero, otherwise a flat 100.
    if previous == 0:
        return 0.0 if current == 0 else 100.0
    return (current - previous) / previous * 100


def is_favorable(metric: MetricType, percentage: float, current: float, previous: float) -> bool:
    if metric == "savings":
        return current > previous
    if metric == "expenses":
        return percentage <= 0
    return percentage >= 0


def trend_direction(metric: MetricType, percentage: float, favorable: bool) -> TrendDirection:
    if percentage == 0:
        return "flat"
    if metric == "expenses":
        return "down" if favorable else "up"
    return "up" if favorable else "down"


def metric_value(totals: PeriodTotals, metric: MetricType) -> float:
    if metric == "income":
        return totals.income
    if metric == "expenses":
        return totals.expenses
    return totals.net_savings


def build_trend(metric: MetricType, current: float, previous: float) -> TrendResult:
    percentage = compute_trend(current, previous)
    favorable = is_favorable(metric, percentage, current, previous)
    return TrendResult(
        metric=metric,
        amount=current,
        previous_amount=previous,
        percentage=percentage,
        direction=trend_direction(metric, percentage, favorable),
        favorable=favorable,
    )


def month_over_month(
    transactions: Iterable[Transaction],
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> list[TrendResult]:
    transactions = list(transactions)
    current_period = current_month_to_date(now, tz)
    previous_period = previous_month(now, tz)
    current = aggregate_period(transactions, current_period.start, current_period.end, tz)
    previous = aggregate_period(transactions, previous_period.start, previous_period.end, tz)
    return [
        build_trend(metric, metric_value(current, metric), metric_value(previous, metric))
        for metric in METRICS
    ]
