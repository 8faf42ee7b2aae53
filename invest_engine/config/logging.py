"""
Logging setup.

Configures loguru sinks for workers and the scheduler process.
"""

import sys
from pathlib import Path

from loguru import logger

from invest_engine.config.settings import settings


def setup_logging(log_file: str | None = None, level: str | None = None) -> None:
    """
    Configure loguru sinks.

    Adds a stderr sink and a rotating file sink.

    Args:
        log_file: Log file path (defaults to settings.log_file)
        level: Minimum log level (defaults to settings.log_level)
    """
    level = (level or settings.log_level).upper()
    log_file = log_file or settings.log_file

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if settings.debug else level)

    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        rotation="1 day",
        retention="7 days",
        level=level,
        encoding="utf-8",
    )
