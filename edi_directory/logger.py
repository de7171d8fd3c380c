"""
Logging for the directory layer.

Library modules log through get_logger(); the CLI and API entry points call
setup_logger() once with the loaded Settings to attach handlers.
"""
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import Settings

LOGGER_NAME = "edi_directory"
LOG_FILE_PATTERN = f"{LOGGER_NAME}_*.log"

FILE_FORMAT = logging.Formatter('%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                                datefmt='%Y-%m-%d %H:%M:%S')
CONSOLE_FORMAT = logging.Formatter('%(asctime)s | %(levelname)-8s | %(message)s', datefmt='%H:%M:%S')


def setup_logger(settings: Optional[Settings] = None, log_dir: Optional[str] = None) -> logging.Logger:
    """
    Attach a DEBUG file handler and a console handler to the package logger.

    Args:
        settings: log_dir, log_retention_days and the console log_level;
                  defaults apply when omitted
        log_dir: Overrides settings.log_dir (CLI --logs)

    Returns:
        The package logger
    """
    settings = settings or Settings()
    log_path = Path(log_dir or settings.log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    removed = cleanup_old_logs(log_path, settings.log_retention_days)

    logger = get_logger()
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    log_file = log_path / f"{LOGGER_NAME}_{datetime.now():%Y%m%d_%H%M%S}.log"
    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(FILE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(settings.log_level)
    console_handler.setFormatter(CONSOLE_FORMAT)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    logger.debug(f"Log file created: {log_file} ({removed} expired logs removed)")
    return logger


def cleanup_old_logs(log_dir: Path, retention_days: int) -> int:
    """
    Delete this package's log files older than retention_days.

    Returns:
        Number of files deleted
    """
    if not log_dir.exists():
        return 0

    cutoff_time = time.time() - retention_days * 86400
    deleted_count = 0
    for log_file in log_dir.glob(LOG_FILE_PATTERN):
        try:
            if log_file.stat().st_mtime < cutoff_time:
                log_file.unlink()
                deleted_count += 1
        except OSError:
            continue  # vanished or locked

    return deleted_count


def get_logger() -> logging.Logger:
    """Get the package logger instance."""
    return logging.getLogger(LOGGER_NAME)
