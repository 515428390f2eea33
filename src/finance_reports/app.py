import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from finance_reports.api.routes import preferences, reports
from finance_reports.core import settings
from finance_reports.domain.timestamps import local_zone
from finance_reports.domain.visibility import AmountVisibility, JsonPreferenceStore
from finance_reports.logger import get_logger, setup_logging
from finance_reports.services.reports import ReportService

logger = get_logger(__name__)


def create_app() -> FastAPI:
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Initializing services...")
        settings.log_environment()

        store = JsonPreferenceStore(
            data_path=os.path.join(settings.DATA_DIR, settings.PREFERENCES_FILENAME)
        )
        visibility = AmountVisibility(store)
        service = ReportService(visibility=visibility, trailing_months=settings.TRAILING_MONTHS)

        app.state.store = store
        app.state.visibility = visibility
        app.state.reports = service

        logger.info("Services initialized (local zone: %s).", local_zone())
        yield
        logger.info("Service shutting down.")

    app = FastAPI(title="Finance Reports", lifespan=lifespan)

    app.include_router(reports.router)
    app.include_router(preferences.router)

    return app


app = create_app()
