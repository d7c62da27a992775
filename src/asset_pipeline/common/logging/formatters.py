"""Formatters: one JSON object per line for files, plain text for terminals."""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict
from urllib.parse import urlsplit, urlunsplit

from asset_pipeline.common.logging.context import get_log_context


def sanitize_url(url: str) -> str:
    """
    Drop the query string from a URL.

    Provider asset links are frequently pre-signed, and the signature
    grants access if it leaks into logs.
    """
    if not url:
        return url
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    if not parts.query:
        return url
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "[REDACTED]", ""))


# Structured fields copied from records into JSON output, in output order
STRUCTURED_FIELDS = (
    "duration_ms",
    "http_status",
    "error_category",
    "error_message",
    "retry_count",
    "url",
    "download_url",
    "address",
    "backend_kind",
    "content_hash",
    "size_bytes",
    "result_count",
    "query",
    "page",
)

# Subset of STRUCTURED_FIELDS holding URLs
REDACTED_URL_FIELDS = frozenset({"url", "download_url", "address"})

# Levels that also record the source location
LOCATED_LEVELS = frozenset({logging.DEBUG, logging.ERROR, logging.CRITICAL})


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class JSONFormatter(logging.Formatter):
    """
    Renders a record, the current log context and its structured fields
    as a single JSON line. URL fields lose their query strings.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": _utc_timestamp(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        entry.update({key: value for key, value in get_log_context().items() if value})

        if record.levelno in LOCATED_LEVELS:
            entry["file"] = f"{record.filename}:{record.lineno}"

        for name in STRUCTURED_FIELDS:
            value = getattr(record, name, None)
            if value is None:
                continue
            if name in REDACTED_URL_FIELDS and isinstance(value, str):
                value = sanitize_url(value)
            entry[name] = value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """``time - LEVEL - [operation] - [provider_id] - message``; tracebacks for errors."""

    def format(self, record: logging.LogRecord) -> str:
        context = get_log_context()
        prefix = [self.formatTime(record, "%Y-%m-%d %H:%M:%S"), record.levelname]
        prefix.extend(f"[{context[key]}]" for key in ("operation", "provider_id") if context[key])

        line = " - ".join(prefix + [record.getMessage()])
        if record.exc_info and record.levelno >= logging.ERROR:
            line += "\n" + self.formatException(record.exc_info)
        return line
