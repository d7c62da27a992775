"""
Storage backend interface.

A backend persists the compressed bytes of a ProcessedPayload under a
content-addressed filename and returns a StoredObjectRef. Because the name
embeds the content hash, writing the same content twice is a no-op.
"""

from abc import ABC, abstractmethod

from asset_pipeline.common.logging import LoggedClass
from asset_pipeline.processing import ProcessedPayload
from asset_pipeline.schemas.manifest import StoredObjectRef

GZIP_JSON_SUFFIX = ".json.gz"


def build_filename(provider_kind: str, provider_id: str, content_hash: str) -> str:
    """Content-addressed filename: ``{kind}_{id}_{hash}.json.gz``."""
    return f"{provider_kind}_{provider_id}_{content_hash}{GZIP_JSON_SUFFIX}"


class StorageBackend(LoggedClass, ABC):
    """Abstract base for payload storage."""

    backend_kind: str = ""

    @abstractmethod
    async def store(
        self, provider_kind: str, provider_id: str, payload: ProcessedPayload
    ) -> StoredObjectRef:
        """
        Persist payload.compressed_bytes.

        Args:
            provider_kind: Filename prefix (e.g. "lottie")
            provider_id: Provider identifier of the asset
            payload: Processed payload to store

        Returns:
            Reference to the stored object

        Raises:
            StorageWriteFailed: If the backend rejects the write
        """
