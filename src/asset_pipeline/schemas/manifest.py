"""
Import manifest schemas.

The ImportManifest is serialized directly as the import response body and
must remain valid indefinitely, so it references stored objects by stable
addresses only.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_serializer

from asset_pipeline.schemas.search import RESPONSE_MODEL_CONFIG


class ImportOptions(BaseModel):
    """Caller options for a single import."""

    model_config = RESPONSE_MODEL_CONFIG

    generate_template: bool = Field(
        default=False,
        description="Attach the default charge/travel/impact sequence template",
    )


class StoredObjectRef(BaseModel):
    """Reference to a persisted compressed payload.

    Created exactly once per successful store and never mutated.

    Attributes:
        backend_kind: "s3" or "local"
        address: Stable URL (S3) or file URI (local cache)
        filename: Content-addressed filename, also the dedup key
        size_bytes: Size of the compressed bytes
        content_hash: 12-hex digest of the compressed bytes
        local_path: Filesystem path for the local backend, None for S3
    """

    model_config = RESPONSE_MODEL_CONFIG

    backend_kind: Literal["s3", "local"]
    address: str
    filename: str
    size_bytes: int = Field(..., ge=0)
    content_hash: str = Field(..., min_length=12, max_length=12)
    local_path: Optional[str] = None


class RequiredAsset(BaseModel):
    """Manifest descriptor for one stored asset."""

    model_config = RESPONSE_MODEL_CONFIG

    name: str
    type: str = "lottie"
    mime: str = "application/json"
    url: str
    local_path: Optional[str] = None
    size: int = Field(..., ge=0)
    etag: str

    @classmethod
    def from_stored_ref(cls, ref: StoredObjectRef) -> "RequiredAsset":
        return cls(
            name=ref.filename,
            url=ref.address,
            local_path=ref.local_path,
            size=ref.size_bytes,
            etag=ref.content_hash,
        )


class ManifestSource(BaseModel):
    """Where an imported asset came from."""

    model_config = RESPONSE_MODEL_CONFIG

    provider: str
    provider_id: str


class SequencePhase(BaseModel):
    """One step of a playback sequence."""

    model_config = RESPONSE_MODEL_CONFIG

    time: Union[int, Literal["onImpact"]]
    action: str
    effect: str
    pos: str
    duration: Optional[int] = None


class SequenceTemplate(BaseModel):
    """Editable playback sequence attached to an imported effect."""

    model_config = RESPONSE_MODEL_CONFIG

    name: str
    phases: List[SequencePhase]
    notes: str = ""


class ImportManifest(BaseModel):
    """Provider-agnostic record of a completed import.

    ``id`` is derived from the provider id and content hash only, so
    re-importing unchanged content yields the same id.
    """

    model_config = RESPONSE_MODEL_CONFIG

    id: str
    display_name: str
    version: str
    license: str
    source: ManifestSource
    required_assets: List[RequiredAsset]
    sequence_template: Optional[SequenceTemplate] = None
    imported_at: datetime
    provider_detail_snapshot: Dict[str, Any] = Field(default_factory=dict)

    @field_serializer("imported_at")
    def serialize_timestamp(self, timestamp: datetime) -> str:
        """Serialize datetime to ISO 8601 format."""
        return timestamp.isoformat()
