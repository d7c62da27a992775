"""
Exception types and error classification for the asset import pipeline.

Provides:
- ErrorCategory enum for retry and response-mapping decisions
- Typed exception hierarchy, one class per failure kind
- HTTP status classification helper

Every error carries its diagnostic context (HTTP status, offending URL,
parse message) so the caller can log it without re-deriving anything.
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

# Response bodies are truncated to this length before being stored on errors
MAX_BODY_CHARS = 500


class ErrorCategory(Enum):
    """
    Classification of error types for handling decisions.

    Categories:
        TRANSIENT: Failures that may succeed if the whole call is repeated
                   (e.g., 5xx from the provider, network drops, upload errors)
        PERMANENT: Failures that will not change on retry
                   (e.g., 404, malformed content, no asset link)
        CONFIGURATION: Missing or invalid settings, surfaced before any I/O
        UNKNOWN: Unclassified errors
    """

    TRANSIENT = "transient"
    PERMANENT = "permanent"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


def _truncate(text: Optional[str]) -> Optional[str]:
    if text and len(text) > MAX_BODY_CHARS:
        return text[:MAX_BODY_CHARS] + "..."
    return text


class PipelineError(Exception):
    """
    Base exception for all pipeline errors.

    Attributes:
        message: Human-readable error description
        category: Error classification
        http_status: Status the transport layer should answer with
        cause: Original exception if wrapping
        context: Additional context dict for debugging
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN
    http_status: int = 500

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        context: Optional[dict] = None,
    ):
        self.message = message
        self.cause = cause
        self.context = context or {}
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        """Whether repeating the whole operation might succeed."""
        return self.category in (ErrorCategory.TRANSIENT, ErrorCategory.UNKNOWN)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable error description for response bodies and CLI output."""
        return {
            "error": self.message,
            "type": type(self).__name__,
            "category": self.category.value,
            "status": self.http_status,
            "context": self.context,
        }

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(PipelineError):
    """Required setting is missing or invalid (e.g., no provider API key)."""

    category = ErrorCategory.CONFIGURATION
    http_status = 400


class InvalidRequest(PipelineError):
    """Caller arguments are out of range (e.g., page numbers below 1)."""

    category = ErrorCategory.PERMANENT
    http_status = 400


# =============================================================================
# Provider Errors
# =============================================================================


class ProviderRequestFailed(PipelineError):
    """Provider search or detail request returned a non-success status."""

    category = ErrorCategory.TRANSIENT
    http_status = 502

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        body: Optional[str] = None,
        url: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        self.status = status
        self.body = _truncate(body)
        self.url = url
        super().__init__(
            message,
            cause=cause,
            context={"http_status": status, "url": url, "body": self.body},
        )


class ProviderNotFound(ProviderRequestFailed):
    """Provider has no record for the requested identifier (404)."""

    category = ErrorCategory.PERMANENT
    http_status = 404


class NoDownloadableAsset(PipelineError):
    """Provider detail exposes no URL-shaped field anywhere."""

    category = ErrorCategory.PERMANENT
    http_status = 422

    def __init__(self, message: str, available_fields: Optional[Iterable[str]] = None):
        self.available_fields: List[str] = sorted(available_fields or [])
        super().__init__(message, context={"available_fields": self.available_fields})


# =============================================================================
# Content Errors
# =============================================================================


class DownloadFailed(PipelineError):
    """Asset download returned a non-success status or could not connect."""

    category = ErrorCategory.TRANSIENT
    http_status = 502

    def __init__(
        self,
        url: str,
        status: Optional[int] = None,
        reason: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        self.url = url
        self.status = status
        self.reason = reason
        detail = ", ".join(str(part) for part in (status, reason) if part is not None)
        message = f"Download failed ({detail}): {url}"
        super().__init__(
            message,
            cause=cause,
            context={"http_status": status, "url": url, "reason": reason},
        )


class DownloadTooLarge(DownloadFailed):
    """Asset body exceeds the configured size limit; repeating will not shrink it."""

    category = ErrorCategory.PERMANENT


class InvalidPayload(PipelineError):
    """Downloaded body is not well-formed JSON."""

    category = ErrorCategory.PERMANENT
    http_status = 422

    def __init__(self, url: str, reason: str, cause: Optional[Exception] = None):
        self.url = url
        self.reason = reason
        super().__init__(
            f"Downloaded file is not valid JSON: {reason}",
            cause=cause,
            context={"url": url, "reason": reason},
        )


# =============================================================================
# Storage Errors
# =============================================================================


class StorageWriteFailed(PipelineError):
    """Writing the compressed payload to the storage backend failed."""

    category = ErrorCategory.TRANSIENT
    http_status = 500

    def __init__(
        self,
        message: str,
        address: Optional[str] = None,
        backend_kind: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        self.address = address
        self.backend_kind = backend_kind
        super().__init__(
            message,
            cause=cause,
            context={"address": address, "backend_kind": backend_kind},
        )


# =============================================================================
# Error Classification Utilities
# =============================================================================


def classify_http_status(status_code: int) -> ErrorCategory:
    """
    Classify HTTP status code into error category.

    Args:
        status_code: HTTP response status

    Returns:
        Appropriate ErrorCategory
    """
    if 200 <= status_code < 300:
        return ErrorCategory.UNKNOWN  # Not an error

    if status_code == 429:
        return ErrorCategory.TRANSIENT  # Rate limited

    if 400 <= status_code < 500:
        return ErrorCategory.PERMANENT

    if status_code >= 500:
        return ErrorCategory.TRANSIENT

    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "PipelineError",
    "ConfigurationError",
    "InvalidRequest",
    "ProviderRequestFailed",
    "ProviderNotFound",
    "NoDownloadableAsset",
    "DownloadFailed",
    "DownloadTooLarge",
    "InvalidPayload",
    "StorageWriteFailed",
    "classify_http_status",
]
