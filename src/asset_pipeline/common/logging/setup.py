"""Root logger configuration for the command line entry point."""

import logging
import sys
from datetime import date
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

from asset_pipeline.common.logging.formatters import ConsoleFormatter, JSONFormatter

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# Third-party loggers that are chatty at DEBUG/INFO; pinned to WARNING
NOISY_LOGGERS = ("aiohttp", "boto3", "botocore", "s3transfer", "urllib3")


def get_log_file_path(log_dir: Path, name: str, day: Optional[date] = None) -> Path:
    """``{log_dir}/{YYYY-MM-DD}/{name}_{YYYYMMDD}.log`` for the given day (default today)."""
    day = day or date.today()
    return Path(log_dir) / day.isoformat() / f"{name}_{day:%Y%m%d}.log"


def _file_handler(path: Path, level: int, max_bytes: int, backup_count: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging(
    name: str = "asset_pipeline",
    log_dir: Optional[Path] = None,
    json_format: bool = False,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    max_bytes: int = LOG_FILE_MAX_BYTES,
    backup_count: int = LOG_FILE_BACKUPS,
    suppress_noisy: bool = True,
) -> logging.Logger:
    """
    Install handlers on the root logger, replacing any already present.

    Console output goes to stderr so stdout stays free for command results.
    With ``log_dir`` set, a rotating JSON file is written as well.

    Args:
        name: Name of the returned logger and prefix of the log file
        log_dir: Directory for log files (None: console only)
        json_format: JSON lines on the console instead of plain text
        console_level: Console threshold
        file_level: File threshold
        max_bytes: Rotation size of the log file
        backup_count: Rotated files kept
        suppress_noisy: Pin HTTP and AWS SDK loggers to WARNING

    Returns:
        The ``name`` logger
    """
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(JSONFormatter() if json_format else ConsoleFormatter())

    handlers: List[logging.Handler] = [console]
    log_file = None
    if log_dir is not None:
        log_file = get_log_file_path(Path(log_dir), name)
        handlers.append(_file_handler(log_file, file_level, max_bytes, backup_count))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG)
    for handler in handlers:
        root.addHandler(handler)

    if suppress_noisy:
        for noisy in NOISY_LOGGERS:
            logging.getLogger(noisy).setLevel(logging.WARNING)

    logger = logging.getLogger(name)
    logger.debug(f"Logging configured (file={log_file}, json={json_format})")
    return logger
