"""Log context propagated across async boundaries with contextvars."""

from contextvars import ContextVar
from typing import Dict, Optional

_operation: ContextVar[Optional[str]] = ContextVar("operation", default=None)
_provider_id: ContextVar[Optional[str]] = ContextVar("provider_id", default=None)
_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def set_log_context(
    operation: Optional[str] = None,
    provider_id: Optional[str] = None,
    request_id: Optional[str] = None,
) -> None:
    """
    Set context values picked up by the formatters.

    Only arguments that are not None are applied, so callers can update
    one field without clearing the others.
    """
    if operation is not None:
        _operation.set(operation)
    if provider_id is not None:
        _provider_id.set(provider_id)
    if request_id is not None:
        _request_id.set(request_id)


def get_log_context() -> Dict[str, Optional[str]]:
    """Current context values (None where unset)."""
    return {
        "operation": _operation.get(),
        "provider_id": _provider_id.get(),
        "request_id": _request_id.get(),
    }


def clear_log_context() -> None:
    """Reset all context values."""
    _operation.set(None)
    _provider_id.set(None)
    _request_id.set(None)
