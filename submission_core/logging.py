"""
Logging setup for the API process, the Celery workers and the scripts.

Everything goes through loguru. Standard-library loggers used by uvicorn,
FastAPI and Celery are intercepted so that pipeline stage logs and HTTP
logs end up in one stream with one format.
"""

import logging
import sys

from loguru import logger

from submission_core.config import settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

INTERCEPTED_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "fastapi",
    "celery",
    "celery.app.trace",
    "kombu",
)


class InterceptHandler(logging.Handler):
    """
    Forward standard library log records to loguru.
    See: https://loguru.readthedocs.io/en/stable/overview.html#entirely-compatible-with-standard-logging
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk out of the logging module so loguru reports the real caller
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str | None = None, json_logs: bool | None = None):
    """
    Route all logs to stdout through loguru.

    Args:
        level: Minimum level (defaults to LOG_LEVEL).
        json_logs: Emit one JSON object per line (defaults to LOG_JSON).
    """
    level = level or settings.LOG_LEVEL
    serialize = settings.LOG_JSON if json_logs is None else json_logs

    logger.remove()
    if serialize:
        logger.add(sys.stdout, level=level, serialize=True)
    else:
        logger.add(sys.stdout, format=LOG_FORMAT, level=level, colorize=True)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in INTERCEPTED_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False

    logger.info(f"Logging initialized (level={level}, json={serialize})")
