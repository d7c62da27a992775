"""
Response schemas.

Pydantic models for everything handed to the transport layer.

Schemas:
    search.py    - SearchResult, SearchResponse
    manifest.py  - ImportOptions, StoredObjectRef, ImportManifest and parts

Design Decisions:
    - Frozen models, constructed fresh per call
    - camelCase aliases on output, snake_case attributes in code
    - Internal byte-carrying results (ProcessedPayload, AssetCandidate) are
      plain dataclasses next to the code that produces them
"""

from asset_pipeline.schemas.manifest import (
    ImportManifest,
    ImportOptions,
    ManifestSource,
    RequiredAsset,
    SequencePhase,
    SequenceTemplate,
    StoredObjectRef,
)
from asset_pipeline.schemas.search import (
    SearchResponse,
    SearchResult,
    SearchResultMetadata,
)

__all__ = [
    "ImportManifest",
    "ImportOptions",
    "ManifestSource",
    "RequiredAsset",
    "SearchResponse",
    "SearchResult",
    "SearchResultMetadata",
    "SequencePhase",
    "SequenceTemplate",
    "StoredObjectRef",
]
