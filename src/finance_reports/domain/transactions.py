from __future__ import annotations

from collections.abc import Iterable
from datetime import tzinfo
from typing import Any

from pydantic import ValidationError

from finance_reports.domain.currency import display_amount
from finance_reports.domain.dateformat import format_date_time
from finance_reports.domain.timestamps import to_local_input_string, to_storage_format, to_utc
from finance_reports.logger import get_logger
from finance_reports.models import Category, Transaction, UserPreferences

logger = get_logger(__name__)

UNCATEGORIZED_LABEL = "Uncategorized"

TRANSACTION_SORT_OPTIONS = ("date_desc", "date_asc", "amount_desc", "amount_asc")


def parse_transaction(record: dict[str, Any]) -> Transaction | None:
    try:
        return Transaction.model_validate(record)
    except ValidationError as exc:
        logger.warning(
            "[TX] Skipping record id=%s: %s",
            record.get("id") if isinstance(record, dict) else None,
            "; ".join(error["msg"] for error in exc.errors()),
        )
        return None


def parse_transactions(records: Iterable[dict[str, Any]]) -> list[Transaction]:
    transactions: list[Transaction] = []
    skipped = 0
    for record in records:
        transaction = parse_transaction(record)
        if transaction is None:
            skipped += 1
            continue
        transactions.append(transaction)
    if skipped:
        logger.info("[TX] Parsed %d transactions, skipped %d.", len(transactions), skipped)
    return transactions


def filter_transactions(transactions: Iterable[Transaction], search: str | None) -> list[Transaction]:
    if not search:
        return list(transactions)
    needle = search.lower()
    return [
        t for t in transactions
        if (t.description and needle in t.description.lower()) or search in _amount_text(t.amount)
    ]


def _amount_text(amount: float) -> str:
    if amount.is_integer():
        return str(int(amount))
    return str(amount)


def sort_transactions(transactions: Iterable[Transaction], option: str | None = "date_desc") -> list[Transaction]:
    if option == "date_asc":
        return sorted(transactions, key=lambda t: to_utc(t.transaction_date))
    if option == "amount_desc":
        return sorted(transactions, key=lambda t: t.amount, reverse=True)
    if option == "amount_asc":
        return sorted(transactions, key=lambda t: t.amount)
    return sorted(transactions, key=lambda t: to_utc(t.transaction_date), reverse=True)


def build_transaction_payload(
    transaction: Transaction,
    *,
    categories_by_id: dict[str, Category],
    preferences: UserPreferences,
    hidden: bool,
    tz: tzinfo | None = None,
) -> dict[str, Any]:
    category = categories_by_id.get(transaction.category_id or "")
    return {
        "id": transaction.id,
        "amount": transaction.amount,
        "amount_formatted": display_amount(transaction.amount, preferences.currency, hidden),
        "is_income": transaction.amount >= 0,
        "description": transaction.description,
        "transaction_date": to_storage_format(transaction.transaction_date),
        "date_formatted": format_date_time(transaction.transaction_date, preferences, tz),
        "local_input": to_local_input_string(transaction.transaction_date, tz),
        "category_id": transaction.category_id,
        "category_name": category.name if category else UNCATEGORIZED_LABEL,
        "category_color": category.color if category else None,
    }


def build_transactions_display(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    preferences: UserPreferences,
    *,
    hidden: bool,
    search: str | None = None,
    sort: str | None = "date_desc",
    tz: tzinfo | None = None,
) -> list[dict[str, Any]]:
    categories_by_id = {category.id: category for category in categories}
    selected = sort_transactions(filter_transactions(transactions, search), sort)
    return [
        build_transaction_payload(
            transaction,
            categories_by_id=categories_by_id,
            preferences=preferences,
            hidden=hidden,
            tz=tz,
        )
        for transaction in selected
    ]
