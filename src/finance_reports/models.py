from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from finance_reports.core import settings
from finance_reports.domain.timestamps import ensure_aware, parse_timestamp

ViewMode = Literal["fullYear", "yearToday"]
TrendDirection = Literal["up", "down", "flat"]
MetricType = Literal["income", "expenses", "savings"]


class Transaction(BaseModel):
    id: str
    amount: float
    transaction_date: datetime
    category_id: str | None = None
    description: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("transaction_date", mode="before")
    @classmethod
    def _parse_transaction_date(cls, value: object) -> object:
        if isinstance(value, str):
            parsed = parse_timestamp(value)
            if parsed is None:
                raise ValueError(f"invalid transaction timestamp: {value!r}")
            return parsed
        if isinstance(value, datetime):
            return ensure_aware(value)
        return value


class Category(BaseModel):
    id: str
    name: str
    color: str = ""


class UserPreferences(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    currency: str = Field(default_factory=lambda: settings.DEFAULT_CURRENCY)
    date_format: Literal["MM/DD/YYYY", "DD/MM/YYYY"] = Field(
        default_factory=lambda: settings.DEFAULT_DATE_FORMAT, alias="dateFormat"
    )
    time_format: Literal["12h", "24h"] = Field(
        default_factory=lambda: settings.DEFAULT_TIME_FORMAT, alias="timeFormat"
    )
    view_mode: ViewMode = Field(default="fullYear", alias="viewMode")


class PeriodTotals(BaseModel):
    income: float = 0.0
    expenses: float = 0.0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def net_savings(self) -> float:
        return self.income - self.expenses


class MonthlyBucket(BaseModel):
    year: int
    month: int  # 1-12
    income: float = 0.0
    expenses: float = 0.0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def label(self) -> str:
        return datetime(self.year, self.month, 1).strftime("%b")


class CategoryBalance(BaseModel):
    category: Category
    balance: float = 0.0


class CategorySlice(BaseModel):
    id: str
    label: str
    value: float
    color: str = ""


class CategorySplit(BaseModel):
    income: list[CategorySlice] = Field(default_factory=list)
    expenses: list[CategorySlice] = Field(default_factory=list)
    total_income: float = 0.0
    total_expenses: float = 0.0


class CategorySummary(BaseModel):
    category: Category
    year: int
    income: float = 0.0
    expenses: float = 0.0
    transaction_count: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def balance(self) -> float:
        return self.income - self.expenses


class TrendResult(BaseModel):
    metric: MetricType
    amount: float
    previous_amount: float
    percentage: float
    direction: TrendDirection
    favorable: bool


class BalanceCard(TrendResult):
    formatted_amount: str


class HomeReport(BaseModel):
    cards: list[BalanceCard]
    monthly: list[MonthlyBucket]
    amounts_hidden: bool


class AnnualReport(BaseModel):
    year: int
    view_mode: ViewMode
    years: list[int]
    totals: PeriodTotals
    formatted_totals: dict[str, str]
    monthly: list[MonthlyBucket]
    categories: list[CategoryBalance]
    amounts_hidden: bool


class MonthlyReport(BaseModel):
    year: int
    month: int
    split: CategorySplit
    formatted_totals: dict[str, str]
    transactions: list[dict[str, Any]]
    amounts_hidden: bool
