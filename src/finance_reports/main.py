import uvicorn

from finance_reports.core import settings
from finance_reports.logger import get_logging_config


def run() -> None:
    uvicorn.run(
        "finance_reports.app:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=get_logging_config(),
    )


if __name__ == "__main__":
    run()
