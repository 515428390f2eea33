from unittest.mock import patch

import pytest

from finance_reports.core import settings
from finance_reports.domain.currency import (
    HIDDEN_AMOUNT_MASK,
    display_amount,
    format_currency,
    format_large_number,
    resolve_currency,
)


@pytest.fixture(autouse=True)
def default_currency(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "DEFAULT_CURRENCY", "USD")


def test_format_usd() -> None:
    assert format_currency(10, "USD") == "$10.00"
    assert format_currency(-1234.5, "USD") == "-$1,234.50"


def test_unknown_currency_falls_back_to_usd() -> None:
    assert format_currency(10, "ZZZ") == format_currency(10, "USD")
    assert format_currency(10, None) == "$10.00"
    assert format_currency(10, "") == "$10.00"


def test_currency_code_is_case_insensitive() -> None:
    assert format_currency(10, "gbp") == "£10.00"


def test_euro_uses_spanish_locale() -> None:
    formatted = format_currency(10.5, "EUR").replace("\xa0", " ")
    assert formatted == "10,50 €"


def test_zero_decimal_currency_still_shows_two_digits() -> None:
    assert "10,00" in format_currency(10, "CLP")


def test_formatter_failure_retries_with_usd() -> None:
    with patch(
        "finance_reports.domain.currency.babel_format_currency",
        side_effect=[ValueError("boom"), "$10.00"],
    ) as mock_format:
        result = format_currency(10, "EUR")

    assert result == "$10.00"
    assert mock_format.call_count == 2
    assert mock_format.call_args.args[1] == "USD"
    assert mock_format.call_args.kwargs["locale"] == "en_US"


def test_resolve_currency() -> None:
    assert resolve_currency("EUR") == ("EUR", "es_ES")
    assert resolve_currency("mxn") == ("MXN", "es_MX")
    assert resolve_currency("XYZ") == ("USD", "en_US")


def test_display_amount_masks_when_hidden() -> None:
    assert display_amount(10, "USD", hidden=True) == HIDDEN_AMOUNT_MASK
    assert display_amount(10, "USD", hidden=False) == "$10.00"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0, "0"),
        (12.5, "12.5"),
        (999, "999"),
        (999.0, "999"),
        (1000, "1k"),
        (1500, "1.5k"),
        (2_000_000, "2M"),
        (2_500_000_000, "2.5B"),
    ],
)
def test_format_large_number(value: float, expected: str) -> None:
    assert format_large_number(value) == expected
