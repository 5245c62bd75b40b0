"""Logging configuration.

Routes all application and library logging through loguru: JSON lines
in production, colourised human-readable lines elsewhere.
"""

import logging
import sys

from loguru import logger

from noisewatch.core.config import Settings


class InterceptHandler(logging.Handler):
    """Handler that forwards standard library log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding Loguru level if it exists
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(settings: Settings) -> None:
    """Install the loguru sinks and intercept standard library loggers.

    Args:
        settings: Application settings; ``APP_ENV`` selects the JSON sink
            and ``DEBUG`` lowers the development level to DEBUG.
    """
    # Remove default handlers
    logging.root.handlers = []

    logger.remove()

    if settings.APP_ENV == "production":
        # JSON logs for production
        logger.add(
            sys.stderr,
            format="{message}",
            serialize=True,
            level="INFO",
            backtrace=False,
            diagnose=False,
        )
    else:
        logger.add(
            sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
            level="DEBUG" if settings.DEBUG else "INFO",
            colorize=True,
        )

    # Intercept standard library logs (e.g. uvicorn, sqlalchemy)
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for _log in ["uvicorn", "uvicorn.error", "uvicorn.access", "fastapi", "sqlalchemy"]:
        _logger = logging.getLogger(_log)
        _logger.handlers = [InterceptHandler()]
        _logger.propagate = False
