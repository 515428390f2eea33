from fastapi import HTTPException, Request

from finance_reports.domain.visibility import AmountVisibility
from finance_reports.services.reports import ReportService


def get_report_service(request: Request) -> ReportService:
    service = getattr(request.app.state, "reports", None)
    if not service:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return service


def get_visibility(request: Request) -> AmountVisibility:
    visibility = getattr(request.app.state, "visibility", None)
    if not visibility:
        raise HTTPException(status_code=500, detail="Preferences not initialized")
    return visibility
