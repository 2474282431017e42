"""loguru sinks for the analytics engine.

Components log with a bracketed tag ([WORKLOAD], [TDEE], [READINESS],
[RISK], [TRIAGE]). Sinks are configured once on import from settings.
"""

import sys
from pathlib import Path

from loguru import logger

from athlete_analytics.config.settings import settings

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
FILE_ROTATION = "10 MB"
FILE_RETENTION = "7 days"


def setup_logger(level: str = "INFO", log_file: str | None = None) -> None:
    """Replace all sinks with stderr and, if log_file is set, a rotating file."""
    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_path, format=FILE_FORMAT, level=level, rotation=FILE_ROTATION, retention=FILE_RETENTION)

    logger.debug(f"[LOGGER] level={level} file={log_file}")


setup_logger(level=settings.log_level, log_file=settings.log_file)
