"""
Loguru logging configuration.

- Colored console output in development
- JSON lines (serialize=True) everywhere else
- Rotating file sink under logs/ (not in tests)
- Correlation ID attached to every record
"""

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from core.correlation import get_correlation_id

if TYPE_CHECKING:
    from loguru import Record

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[correlation_id]}</cyan> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def correlation_filter(record: "Record") -> bool:
    """Stamp the current correlation ID on the record; never drops messages."""
    record["extra"]["correlation_id"] = get_correlation_id() or "-"
    return True


def configure_logging(environment: str = "development", log_dir: str = "logs") -> None:
    """
    Configure Loguru for the application.

    Args:
        environment: "development" for console, "test" for quiet stderr only,
            anything else for JSON.
        log_dir: Directory for the rotating file sink.
    """
    logger.remove()

    if environment == "development":
        logger.add(
            sys.stderr,
            format=CONSOLE_FORMAT,
            level="DEBUG",
            filter=correlation_filter,
            colorize=True,
        )
    elif environment == "test":
        logger.add(
            sys.stderr,
            format=CONSOLE_FORMAT,
            level="WARNING",
            filter=correlation_filter,
            colorize=False,
        )
        return
    else:
        logger.add(
            sys.stderr,
            format="{message}",
            level="INFO",
            filter=correlation_filter,
            serialize=True,
        )

    Path(log_dir).mkdir(parents=True, exist_ok=True)
    logger.add(
        str(Path(log_dir) / "app.log"),
        format=CONSOLE_FORMAT if environment == "development" else "{message}",
        level="INFO",
        filter=correlation_filter,
        rotation="10 MB",
        retention="7 days",
        serialize=(environment != "development"),
    )
