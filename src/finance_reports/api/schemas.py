from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from finance_reports.models import Category, Transaction, UserPreferences, ViewMode

# Year periods run to the next 1 January and are compared in UTC, so both ends
# must stay inside the datetime range in every zone.
MIN_YEAR = 2
MAX_YEAR = 9998


class ReportRequest(BaseModel):
    transactions: list[Transaction] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    now: datetime | None = None

    @field_validator("now")
    @classmethod
    def _check_now_year(cls, value: datetime | None) -> datetime | None:
        if value is not None and not MIN_YEAR <= value.year <= MAX_YEAR:
            raise ValueError(f"year must be between {MIN_YEAR} and {MAX_YEAR}")
        return value


class AnnualReportRequest(ReportRequest):
    year: int | None = Field(default=None, ge=MIN_YEAR, le=MAX_YEAR)
    view_mode: ViewMode | None = None
    search: str | None = None
    sort: str | None = None


class MonthlyReportRequest(ReportRequest):
    year: int | None = Field(default=None, ge=MIN_YEAR, le=MAX_YEAR)
    month: int | None = Field(default=None, ge=1, le=12)
    search: str | None = None
    sort: str | None = None


class FormatRequest(BaseModel):
    amount: float
    currency: str | None = None


class FormatResponse(BaseModel):
    currency: str
    formatted: str
    abbreviated: str


class VisibilityResponse(BaseModel):
    hidden: bool
