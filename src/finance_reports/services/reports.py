from collections.abc import Sequence
from datetime import datetime, tzinfo

from finance_reports.domain import aggregation, categories, trends
from finance_reports.domain.currency import display_amount
from finance_reports.domain.periods import month_period
from finance_reports.domain.timestamps import local_zone, now_local, to_local
from finance_reports.domain.transactions import build_transactions_display
from finance_reports.domain.visibility import AmountVisibility
from finance_reports.logger import get_logger
from finance_reports.models import (
    AnnualReport,
    BalanceCard,
    Category,
    HomeReport,
    MonthlyReport,
    PeriodTotals,
    Transaction,
    UserPreferences,
    ViewMode,
)

logger = get_logger(__name__)


class ReportService:
    def __init__(
        self,
        visibility: AmountVisibility,
        trailing_months: int = 5,
        tz: tzinfo | None = None,
    ):
        self.visibility = visibility
        self.trailing_months = trailing_months
        self.tz = tz

    @property
    def zone(self) -> tzinfo:
        return self.tz or local_zone()

    def _now(self, now: datetime | None) -> datetime:
        if now is None:
            return now_local(self.zone)
        return to_local(now, self.zone)

    def _formatted_totals(self, totals: PeriodTotals, currency: str, hidden: bool) -> dict[str, str]:
        return {
            "income": display_amount(totals.income, currency, hidden),
            "expenses": display_amount(totals.expenses, currency, hidden),
            "net_savings": display_amount(totals.net_savings, currency, hidden),
        }

    def home_report(
        self,
        transactions: Sequence[Transaction],
        preferences: UserPreferences,
        now: datetime | None = None,
    ) -> HomeReport:
        current = self._now(now)
        hidden = self.visibility.is_hidden()
        cards = [
            BalanceCard(
                **trend.model_dump(),
                formatted_amount=display_amount(trend.amount, preferences.currency, hidden),
            )
            for trend in trends.month_over_month(transactions, current, self.zone)
        ]
        monthly = aggregation.bucket_by_month(transactions, self.trailing_months, current, self.zone)
        logger.debug(
            "[REPORT] Home report: %d transactions, %d buckets.", len(transactions), len(monthly)
        )
        return HomeReport(cards=cards, monthly=monthly, amounts_hidden=hidden)

    def annual_report(
        self,
        transactions: Sequence[Transaction],
        category_list: Sequence[Category],
        preferences: UserPreferences,
        *,
        year: int | None = None,
        view_mode: ViewMode | None = None,
        search: str | None = None,
        sort: str | None = None,
        now: datetime | None = None,
    ) -> AnnualReport:
        current = self._now(now)
        target_year = year or current.year
        mode = view_mode or preferences.view_mode
        hidden = self.visibility.is_hidden()

        selected = aggregation.filter_by_view_mode(transactions, target_year, mode, current, self.zone)
        totals = aggregation.sum_totals(selected)

        balances = categories.aggregate_by_category(selected, category_list)
        sort_by, direction = categories.parse_sort_option(sort)
        balances = categories.sort_balances(
            categories.filter_balances(balances, search),
            by=sort_by,
            direction=direction,
        )

        logger.debug(
            "[REPORT] Annual report %s (%s): %d of %d transactions selected.",
            target_year,
            mode,
            len(selected),
            len(transactions),
        )
        return AnnualReport(
            year=target_year,
            view_mode=mode,
            years=aggregation.years_with_data(transactions, current, self.zone),
            totals=totals,
            formatted_totals=self._formatted_totals(totals, preferences.currency, hidden),
            monthly=aggregation.bucket_by_year_month(selected, target_year, self.zone),
            categories=balances,
            amounts_hidden=hidden,
        )

    def monthly_report(
        self,
        transactions: Sequence[Transaction],
        category_list: Sequence[Category],
        preferences: UserPreferences,
        *,
        year: int | None = None,
        month: int | None = None,
        search: str | None = None,
        sort: str | None = None,
        now: datetime | None = None,
    ) -> MonthlyReport:
        current = self._now(now)
        target_year = year or current.year
        target_month = month or current.month
        hidden = self.visibility.is_hidden()

        period = month_period(target_year, target_month, self.zone)
        in_month = aggregation.filter_period(transactions, period.start, period.end, self.zone)
        split = categories.split_by_category(in_month, category_list)
        totals = PeriodTotals(income=split.total_income, expenses=split.total_expenses)

        return MonthlyReport(
            year=target_year,
            month=target_month,
            split=split,
            formatted_totals=self._formatted_totals(totals, preferences.currency, hidden),
            transactions=build_transactions_display(
                in_month,
                category_list,
                preferences,
                hidden=hidden,
                search=search,
                sort=sort,
                tz=self.zone,
            ),
            amounts_hidden=hidden,
        )
