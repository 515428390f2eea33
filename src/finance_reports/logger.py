import logging
import logging.config
import os


class ColourizedFormatter(logging.Formatter):
    """
    Formatter that colours the level name with ANSI escapes.
    """
    GREY = "\x1b[90m"
    GREEN = "\x1b[32m"
    YELLOW = "\x1b[33m"
    RED = "\x1b[31m"
    BOLD_RED = "\x1b[31;1m"
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: GREY,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: BOLD_RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        orig_levelname = record.levelname

        if record.levelno in self.LEVEL_COLORS:
            record.levelname = f"{self.LEVEL_COLORS[record.levelno]}{record.levelname}{self.RESET}"

        result = super().format(record)

        # Other handlers share the record
        record.levelname = orig_levelname
        return result

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILENAME = "finance-reports.log"
UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def get_logging_config() -> dict:
    log_level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    log_dir = os.getenv("LOG_DIR")
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stdout",
            "formatter": "default",
        },
    }
    root_handlers = ["console"]
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        handlers["file"] = {
            "class": "logging.FileHandler",
            "filename": os.path.join(log_dir, LOG_FILENAME),
            "formatter": "plain",
        }
        root_handlers.append("file")

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "()": "finance_reports.logger.ColourizedFormatter",
                "format": LOG_FORMAT,
            },
            "plain": {
                "format": LOG_FORMAT,
            },
        },
        "handlers": handlers,
        "loggers": {
            "": {"handlers": root_handlers, "level": log_level_name},
            **{
                name: {"handlers": root_handlers, "level": "INFO", "propagate": False}
                for name in UVICORN_LOGGERS
            },
        },
    }


def setup_logging() -> None:
    logging.config.dictConfig(get_logging_config())


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
