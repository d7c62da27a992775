"""
Content processing module.

Provides asset download and the validate -> canonicalize -> compress -> hash
chain, decoupled from storage backends.
"""

from asset_pipeline.processing.processor import (
    ContentProcessor,
    ProcessedPayload,
    build_payload,
    canonicalize,
    compress,
    content_hash_for,
)

__all__ = [
    "ContentProcessor",
    "ProcessedPayload",
    "build_payload",
    "canonicalize",
    "compress",
    "content_hash_for",
]
