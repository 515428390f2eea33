import unicodedata
from collections import defaultdict
from collections.abc import Iterable
from datetime import tzinfo
from typing import Literal

from finance_reports.domain.aggregation import filter_year, local_date
from finance_reports.domain.timestamps import local_zone, to_utc
from finance_reports.logger import get_logger
from finance_reports.models import (
    Category,
    CategoryBalance,
    CategorySlice,
    CategorySplit,
    CategorySummary,
    Transaction,
)

logger = get_logger(__name__)

SortKey = Literal["name", "balance"]
SortDirection = Literal["asc", "desc"]

SORT_OPTIONS = ("name_asc", "name_desc", "balance_asc", "balance_desc")

MONTH_KEYS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_COMBINING_TILDE = "\u0303"
_AFTER_N = "\uffff"


def collation_key(name: str) -> tuple[str, str, str]:
    # Accents and case only break ties, except the Spanish "ñ", which sorts as
    # its own letter after "n". No other locale tailoring is applied.
    decomposed = unicodedata.normalize("NFKD", name)
    base: list[str] = []
    for char in decomposed:
        if not unicodedata.combining(char):
            base.append(char)
        elif char == _COMBINING_TILDE and base and base[-1] in "nN":
            base.append(_AFTER_N)
    return "".join(base).casefold(), decomposed.casefold(), name


def aggregate_by_category(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
) -> list[CategoryBalance]:
    categories = list(categories)
    known_ids = {category.id for category in categories}
    totals: dict[str, float] = defaultdict(float)
    for transaction in transactions:
        if transaction.category_id in known_ids:
            totals[transaction.category_id] += transaction.amount
    return [
        CategoryBalance(category=category, balance=totals.get(category.id, 0.0))
        for category in categories
    ]


def filter_balances(
    balances: Iterable[CategoryBalance],
    name_substring: str | None,
    case_insensitive: bool = True,
) -> list[CategoryBalance]:
    if not name_substring:
        return list(balances)
    if case_insensitive:
        needle = name_substring.casefold()
        return [b for b in balances if needle in b.category.name.casefold()]
    return [b for b in balances if name_substring in b.category.name]


def sort_balances(
    balances: Iterable[CategoryBalance],
    by: SortKey = "name",
    direction: SortDirection = "asc",
) -> list[CategoryBalance]:
    reverse = direction == "desc"
    if by == "balance":
        return sorted(balances, key=lambda b: b.balance, reverse=reverse)
    return sorted(balances, key=lambda b: collation_key(b.category.name), reverse=reverse)


def parse_sort_option(option: str | None) -> tuple[SortKey, SortDirection]:
    if option not in SORT_OPTIONS:
        return "name", "asc"
    by, direction = option.split("_", 1)
    return by, direction  # type: ignore[return-value]


def split_by_category(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
) -> CategorySplit:
    categories_by_id = {category.id: category for category in categories}
    income: dict[str, float] = {}
    expenses: dict[str, float] = {}
    total_income = 0.0
    total_expenses = 0.0

    for transaction in transactions:
        category = categories_by_id.get(transaction.category_id or "")
        if category is None:
            logger.warning(
                "[CATEGORIES] No category found for transaction %s (category_id=%s).",
                transaction.id,
                transaction.category_id,
            )
            continue
        if transaction.amount > 0:
            income[category.id] = income.get(category.id, 0.0) + transaction.amount
            total_income += transaction.amount
        elif transaction.amount < 0:
            expenses[category.id] = expenses.get(category.id, 0.0) + abs(transaction.amount)
            total_expenses += abs(transaction.amount)

    def to_slices(values: dict[str, float]) -> list[CategorySlice]:
        return [
            CategorySlice(
                id=category_id,
                label=categories_by_id[category_id].name,
                value=value,
                color=categories_by_id[category_id].color,
            )
            for category_id, value in values.items()
        ]

    return CategorySplit(
        income=to_slices(income),
        expenses=to_slices(expenses),
        total_income=total_income,
        total_expenses=total_expenses,
    )


def summarize_category(
    transactions: Iterable[Transaction],
    category: Category,
    year: int,
    tz: tzinfo | None = None,
) -> CategorySummary:
    in_category = [t for t in transactions if t.category_id == category.id]
    yearly = filter_year(in_category, year, tz)
    income = sum(t.amount for t in yearly if t.amount > 0)
    expenses = sum(abs(t.amount) for t in yearly if t.amount < 0)
    return CategorySummary(
        category=category,
        year=year,
        income=income,
        expenses=expenses,
        transaction_count=len(yearly),
    )


def group_by_month(
    transactions: Iterable[Transaction],
    tz: tzinfo | None = None,
) -> dict[str, list[Transaction]]:
    zone = tz or local_zone()
    grouped: dict[int, list[Transaction]] = defaultdict(list)
    for transaction in transactions:
        grouped[local_date(transaction, zone).month].append(transaction)
    return {
        MONTH_KEYS[month - 1]: sorted(grouped[month], key=lambda t: to_utc(t.transaction_date))
        for month in sorted(grouped)
    }
