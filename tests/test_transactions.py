from datetime import datetime
from zoneinfo import ZoneInfo

from finance_reports.domain.currency import HIDDEN_AMOUNT_MASK
from finance_reports.domain.transactions import (
    build_transaction_payload,
    build_transactions_display,
    filter_transactions,
    parse_transaction,
    parse_transactions,
    sort_transactions,
)
from finance_reports.models import Category, Transaction, UserPreferences

NY = ZoneInfo("America/New_York")


def make_tx(tx_id: str, amount: float, day: int, description: str | None = None) -> Transaction:
    return Transaction(
        id=tx_id,
        amount=amount,
        transaction_date=datetime(2024, 5, day, 12, 0, tzinfo=NY),
        description=description,
    )


def test_parse_transaction_from_store_record() -> None:
    record = {
        "id": 42,
        "amount": "-12.50",
        "transaction_date": "2024-05-01 02:00:00.000000+00",
        "category_id": "food",
        "description": "Lunch",
    }

    tx = parse_transaction(record)

    assert tx is not None
    assert tx.id == "42"
    assert tx.amount == -12.5
    assert tx.category_id == "food"
    assert tx.transaction_date.astimezone(NY).day == 30


def test_parse_transactions_skips_unusable_records() -> None:
    records = [
        {"id": "1", "amount": 10, "transaction_date": "2024-05-01 10:00:00+00"},
        {"id": "2", "amount": "ten", "transaction_date": "2024-05-01 10:00:00+00"},
        {"id": "3", "amount": 10, "transaction_date": "2024-13-01 10:00:00+00"},
        {"amount": 10, "transaction_date": "2024-05-01 10:00:00+00"},
    ]

    txs = parse_transactions(records)

    assert [t.id for t in txs] == ["1"]


def test_filter_matches_description_or_amount() -> None:
    txs = [
        make_tx("1", -12.5, 1, "Coffee Shop"),
        make_tx("2", 300.0, 2, "Refund"),
        make_tx("3", -8.0, 3, None),
    ]

    assert [t.id for t in filter_transactions(txs, "coffee")] == ["1"]
    assert [t.id for t in filter_transactions(txs, "12.5")] == ["1"]
    assert [t.id for t in filter_transactions(txs, "300")] == ["2"]
    assert [t.id for t in filter_transactions(txs, "")] == ["1", "2", "3"]


def test_sort_options() -> None:
    txs = [make_tx("a", 5.0, 2), make_tx("b", -20.0, 9), make_tx("c", 50.0, 1)]

    assert [t.id for t in sort_transactions(txs)] == ["b", "a", "c"]
    assert [t.id for t in sort_transactions(txs, "date_asc")] == ["c", "a", "b"]
    assert [t.id for t in sort_transactions(txs, "amount_desc")] == ["c", "a", "b"]
    assert [t.id for t in sort_transactions(txs, "amount_asc")] == ["b", "a", "c"]


def test_payload_formats_amount_and_date() -> None:
    prefs = UserPreferences(currency="USD", dateFormat="DD/MM/YYYY", timeFormat="24h")
    tx = make_tx("1", -12.5, 4, "Lunch").model_copy(update={"category_id": "food"})
    categories = {"food": Category(id="food", name="Food", color="#f00")}

    payload = build_transaction_payload(tx, categories_by_id=categories, preferences=prefs, hidden=False, tz=NY)

    assert payload["amount_formatted"] == "-$12.50"
    assert payload["date_formatted"] == "04/05/2024 12:00:00"
    assert payload["transaction_date"] == "2024-05-04 16:00:00+00"
    assert payload["local_input"] == "2024-05-04T12:00:00"
    assert payload["category_name"] == "Food"
    assert payload["is_income"] is False


def test_payload_hides_amount_and_labels_uncategorized() -> None:
    prefs = UserPreferences(currency="USD")

    payload = build_transaction_payload(make_tx("1", 10.0, 4), categories_by_id={}, preferences=prefs, hidden=True, tz=NY)

    assert payload["amount_formatted"] == HIDDEN_AMOUNT_MASK
    assert payload["category_name"] == "Uncategorized"
    assert payload["category_color"] is None


def test_display_list_applies_search_and_sort() -> None:
    txs = [make_tx("1", -3.0, 1, "Bus"), make_tx("2", -4.0, 2, "Bus"), make_tx("3", -5.0, 3, "Taxi")]

    display = build_transactions_display(
        txs, [], UserPreferences(currency="USD"), hidden=False, search="bus", sort="date_desc", tz=NY
    )

    assert [row["id"] for row in display] == ["2", "1"]
