"""Structured logging helpers and the LoggedClass mixin."""

import asyncio
import functools
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

# Error text attached to log records is capped at this many characters
MAX_ERROR_CHARS = 500

AsyncMethod = TypeVar("AsyncMethod", bound=Callable[..., Awaitable[Any]])


def get_logger(name: str) -> logging.Logger:
    """Module logger; pass ``__name__``."""
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger,
    level: int,
    msg: str,
    **fields: Any,
) -> None:
    """
    Emit ``msg`` with structured fields attached as record attributes.

    The JSON formatter picks up known field names (url, http_status,
    duration_ms, content_hash, ...); others are ignored by both formatters.

    Example:
        log_with_context(
            logger, logging.DEBUG, "Stored payload",
            address=ref.address,
            size_bytes=ref.size_bytes,
        )
    """
    logger.log(level, msg, extra=fields)


def _error_fields(exc: Exception) -> Dict[str, Any]:
    """Category, status and URL pulled off a PipelineError, if present."""
    fields: Dict[str, Any] = {}

    category = getattr(exc, "category", None)
    if category is not None:
        fields["error_category"] = getattr(category, "value", str(category))

    context = getattr(exc, "context", None)
    if isinstance(context, dict):
        fields.update(
            {key: context[key] for key in ("http_status", "url") if context.get(key) is not None}
        )

    text = str(exc)
    fields["error_message"] = (
        text if len(text) <= MAX_ERROR_CHARS else text[:MAX_ERROR_CHARS] + "..."
    )
    return fields


def log_exception(
    logger: logging.Logger,
    exc: Exception,
    msg: str,
    level: int = logging.ERROR,
    include_traceback: bool = True,
    **fields: Any,
) -> None:
    """
    Log a failure with its classification.

    Explicit ``fields`` win over values derived from the exception.

    Args:
        logger: Target logger
        exc: The failure
        msg: Message describing what was being attempted
        level: Record level (ERROR unless told otherwise)
        include_traceback: Attach exc_info to the record
        **fields: Extra structured fields
    """
    merged = _error_fields(exc)
    merged.update({key: value for key, value in fields.items() if value is not None})

    logger.log(level, msg, exc_info=exc if include_traceback else None, extra=merged)


def logged_operation(
    level: int = logging.DEBUG,
    failure_level: int = logging.WARNING,
    operation_name: Optional[str] = None,
) -> Callable[[AsyncMethod], AsyncMethod]:
    """
    Time an async method and log how it ended.

    Success is logged at ``level`` with ``duration_ms``; failure at
    ``failure_level`` without traceback, after which the exception
    propagates unchanged.

    Example:
        class ContentProcessor(LoggedClass):
            @logged_operation(level=logging.DEBUG)
            async def process(self, url, credential=None):
                ...
    """

    def decorator(method: AsyncMethod) -> AsyncMethod:
        if not asyncio.iscoroutinefunction(method):
            raise TypeError(f"logged_operation requires a coroutine function: {method!r}")

        label = operation_name or method.__name__

        @functools.wraps(method)
        async def timed(self, *args, **kwargs):
            logger = getattr(self, "_logger", None) or get_logger(type(self).__module__)
            qualified = f"{type(self).__name__}.{label}"
            started = time.perf_counter()

            def elapsed_ms() -> float:
                return round((time.perf_counter() - started) * 1000, 1)

            try:
                outcome = await method(self, *args, **kwargs)
            except Exception as e:
                log_exception(
                    logger,
                    e,
                    f"{qualified} failed",
                    level=failure_level,
                    include_traceback=False,
                    duration_ms=elapsed_ms(),
                )
                raise
            log_with_context(logger, level, f"{qualified} completed", duration_ms=elapsed_ms())
            return outcome

        return timed  # type: ignore[return-value]

    return decorator


# Instance attributes copied onto every record logged through LoggedClass
INSTANCE_CONTEXT_ATTRS = ("backend_kind", "base_url")


class LoggedClass:
    """
    Mixin giving a class its own logger and context-aware log methods.

    The logger is named after the defining module, suffixed with
    ``log_component`` when set. ``backend_kind`` and ``base_url`` are
    attached to each record when the instance has them.
    """

    log_component: Optional[str] = None

    def __init__(self, *args, **kwargs):
        module = type(self).__module__
        self._logger = get_logger(
            f"{module}.{self.log_component}" if self.log_component else module
        )
        super().__init__(*args, **kwargs)

    def _instance_context(self) -> Dict[str, Any]:
        return {
            attr: getattr(self, attr)
            for attr in INSTANCE_CONTEXT_ATTRS
            if getattr(self, attr, None) is not None
        }

    def _log(self, level: int, msg: str, **fields: Any) -> None:
        log_with_context(self._logger, level, msg, **{**self._instance_context(), **fields})

    def _log_exception(
        self,
        exc: Exception,
        msg: str,
        level: int = logging.ERROR,
        **fields: Any,
    ) -> None:
        log_exception(self._logger, exc, msg, level=level, **{**self._instance_context(), **fields})
