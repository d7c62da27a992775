"""
Logging module for the asset pipeline.

Library code logs through get_logger/log_with_context/LoggedClass; only the
entry point calls setup_logging.
"""

from asset_pipeline.common.logging.context import (
    clear_log_context,
    get_log_context,
    set_log_context,
)
from asset_pipeline.common.logging.formatters import (
    ConsoleFormatter,
    JSONFormatter,
    sanitize_url,
)
from asset_pipeline.common.logging.setup import setup_logging
from asset_pipeline.common.logging.utilities import (
    LoggedClass,
    get_logger,
    log_exception,
    log_with_context,
    logged_operation,
)

__all__ = [
    "ConsoleFormatter",
    "JSONFormatter",
    "LoggedClass",
    "clear_log_context",
    "get_log_context",
    "get_logger",
    "log_exception",
    "log_with_context",
    "logged_operation",
    "sanitize_url",
    "set_log_context",
    "setup_logging",
]
