import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends

from finance_reports.api.dependencies import get_report_service
from finance_reports.api.schemas import (
    AnnualReportRequest,
    FormatRequest,
    FormatResponse,
    MonthlyReportRequest,
    ReportRequest,
)
from finance_reports.domain.currency import format_currency, format_large_number, resolve_currency
from finance_reports.models import AnnualReport, HomeReport, MonthlyReport
from finance_reports.services.reports import ReportService

router = APIRouter()


@router.post("/api/reports/home", response_model=HomeReport)
async def home_report(
    req: ReportRequest,
    service: Annotated[ReportService, Depends(get_report_service)],
) -> HomeReport:
    return await asyncio.to_thread(
        service.home_report,
        req.transactions,
        req.preferences,
        req.now,
    )


@router.post("/api/reports/annual", response_model=AnnualReport)
async def annual_report(
    req: AnnualReportRequest,
    service: Annotated[ReportService, Depends(get_report_service)],
) -> AnnualReport:
    return await asyncio.to_thread(
        service.annual_report,
        req.transactions,
        req.categories,
        req.preferences,
        year=req.year,
        view_mode=req.view_mode,
        search=req.search,
        sort=req.sort,
        now=req.now,
    )


@router.post("/api/reports/monthly", response_model=MonthlyReport)
async def monthly_report(
    req: MonthlyReportRequest,
    service: Annotated[ReportService, Depends(get_report_service)],
) -> MonthlyReport:
    return await asyncio.to_thread(
        service.monthly_report,
        req.transactions,
        req.categories,
        req.preferences,
        year=req.year,
        month=req.month,
        search=req.search,
        sort=req.sort,
        now=req.now,
    )


@router.post("/api/format/currency", response_model=FormatResponse)
async def format_amount(req: FormatRequest) -> FormatResponse:
    currency, _ = resolve_currency(req.currency)
    return FormatResponse(
        currency=currency,
        formatted=format_currency(req.amount, req.currency),
        abbreviated=format_large_number(req.amount),
    )
