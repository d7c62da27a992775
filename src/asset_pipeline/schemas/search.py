"""
Search result schemas.

Provider-agnostic shapes returned to the transport layer for search calls.
Field names serialize as camelCase (``providerId``, ``pageSize``) via
``model_dump(by_alias=True)``.
"""

from typing import FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

RESPONSE_MODEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
)


class SearchResultMetadata(BaseModel):
    """Optional timing metadata reported by the provider."""

    model_config = RESPONSE_MODEL_CONFIG

    duration_ms: Optional[float] = Field(default=None, description="Animation length in ms")
    frame_count: Optional[int] = Field(default=None, description="Total frame count")


class SearchResult(BaseModel):
    """One normalized search hit.

    Attributes:
        provider: Provider kind (e.g., "lottiefiles")
        provider_id: Provider's identifier, always a string
        title: Display title
        kind: Asset kind (e.g., "lottie")
        thumbnail_ref: Thumbnail URL, None when absent
        preview_ref: Preview URL, None when absent
        license: License name, "unknown" when absent
        tags: Tag set, empty when absent
        relevance_score: Placeholder score; ranking is the provider's order
        metadata: Duration/frame metadata
    """

    model_config = RESPONSE_MODEL_CONFIG

    provider: str
    provider_id: str
    title: str
    kind: str
    thumbnail_ref: Optional[str] = None
    preview_ref: Optional[str] = None
    license: str = "unknown"
    tags: FrozenSet[str] = Field(default_factory=frozenset)
    relevance_score: float = 1.0
    metadata: SearchResultMetadata = Field(default_factory=SearchResultMetadata)

    @field_serializer("tags")
    def serialize_tags(self, tags: FrozenSet[str]) -> List[str]:
        """Serialize tags as a sorted list so output is stable."""
        return sorted(tags)


class SearchResponse(BaseModel):
    """A page of normalized search results in provider order."""

    model_config = RESPONSE_MODEL_CONFIG

    query: str
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
    total: int = Field(..., ge=0)
    results: List[SearchResult] = Field(default_factory=list)
