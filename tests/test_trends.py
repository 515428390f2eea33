from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from finance_reports.domain.trends import build_trend, compute_trend, month_over_month
from finance_reports.models import Transaction

NY = ZoneInfo("America/New_York")
NOW = datetime(2024, 3, 15, 12, 0, tzinfo=NY)


@pytest.mark.parametrize(
    ("current", "previous", "expected"),
    [
        (0, 0, 0),
        (5, 0, 100),
        (-5, 0, 100),
        (50, 100, -50),
        (150, 100, 50),
        (100, 100, 0),
    ],
)
def test_compute_trend(current: float, previous: float, expected: float) -> None:
    assert compute_trend(current, previous) == expected


def test_compute_trend_keeps_sign_for_negative_previous() -> None:
    assert compute_trend(-50, -100) == -50


def test_lower_expenses_are_favorable() -> None:
    trend = build_trend("expenses", 50, 100)

    assert trend.percentage == -50
    assert trend.favorable is True
    assert trend.direction == "down"


def test_higher_expenses_are_unfavorable() -> None:
    trend = build_trend("expenses", 150, 100)

    assert trend.favorable is False
    assert trend.direction == "up"


def test_income_trend() -> None:
    up = build_trend("income", 120, 100)
    down = build_trend("income", 80, 100)

    assert (up.favorable, up.direction) == (True, "up")
    assert (down.favorable, down.direction) == (False, "down")


def test_savings_favorability_compares_amounts() -> None:
    # less negative savings is an improvement even though the percentage is negative
    trend = build_trend("savings", -50, -100)

    assert trend.percentage == -50
    assert trend.favorable is True
    assert trend.direction == "up"


def test_no_change_is_flat() -> None:
    trend = build_trend("expenses", 0, 0)

    assert trend.percentage == 0
    assert trend.direction == "flat"
    assert trend.favorable is True


def test_month_over_month() -> None:
    txs = [
        Transaction(id="1", amount=200.0, transaction_date=datetime(2024, 3, 2, tzinfo=NY)),
        Transaction(id="2", amount=-50.0, transaction_date=datetime(2024, 3, 3, tzinfo=NY)),
        Transaction(id="3", amount=100.0, transaction_date=datetime(2024, 2, 29, 23, 30, tzinfo=NY)),
        Transaction(id="4", amount=-100.0, transaction_date=datetime(2024, 2, 1, tzinfo=NY)),
        Transaction(id="5", amount=-999.0, transaction_date=datetime(2024, 3, 20, tzinfo=NY)),
    ]

    income, expenses, savings = month_over_month(txs, NOW, NY)

    assert (income.amount, income.previous_amount, income.percentage) == (200.0, 100.0, 100.0)
    assert (expenses.amount, expenses.previous_amount, expenses.percentage) == (50.0, 100.0, -50.0)
    assert expenses.favorable is True
    assert (savings.amount, savings.previous_amount) == (150.0, 0.0)
    assert savings.percentage == 100.0
