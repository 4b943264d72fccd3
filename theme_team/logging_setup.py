from __future__ import annotations

"""
Loguru sink configuration shared by the API and the CLI.
"""

import sys
from typing import Optional

from loguru import logger

from .config import LOG_DIR, LOG_FILE, LOG_LEVEL


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Replace loguru's default sink with a stderr sink at ``level``.

    When ``log_file`` (or ``THEME_TEAM_LOG_FILE``) is set, a rotating file
    sink under ``LOG_DIR`` is added as well.
    """
    level = (level or LOG_LEVEL).upper()
    log_file = log_file if log_file is not None else LOG_FILE
    logger.remove()
    logger.add(sys.stderr, level=level)
    if log_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        logger.add(LOG_DIR / log_file, level=level, rotation="10 MB", retention=5)
    logger.debug("Logging configured at level {}", level)
