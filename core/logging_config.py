"""
Logging Setup

Shared by broker_service.py and scripts/upload_video.py.

Logs to both console and file with rotation:
- Daily rotation
- Keep LOG_BACKUP_COUNT days of logs
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

from config.settings import LOG_BACKUP_COUNT, LOG_DIR, LOG_FILE, LOG_LEVEL


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = LOG_FILE,
    console: bool = True,
) -> None:
    """
    Configure the root logger.

    Args:
        level: Log level name (default: LOG_LEVEL from settings)
        log_file: File name under LOG_DIR, or None to disable file logging
        console: Also log to stdout
    """
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO))

    log_format = logging.Formatter(
        "%(asctime)s - %(levelname)s - %(message)s | %(name)s",
    )

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(log_format)
        logger.addHandler(console_handler)

    if not log_file:
        return

    try:
        logs_dir = Path(LOG_DIR)
        logs_dir.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.TimedRotatingFileHandler(
            str(logs_dir / log_file),
            when="midnight",
            interval=1,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(log_format)
        logger.addHandler(file_handler)
    except OSError as e:
        # Console logging still works
        logger.warning(f"Cannot write log file in {LOG_DIR}: {e}")
