"""
Local filesystem cache backend.

Writes go to a temporary file in the target directory and are renamed into
place, so a reader never observes a partially written payload.
"""

import asyncio
import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from asset_pipeline.common.exceptions import StorageWriteFailed
from asset_pipeline.processing import ProcessedPayload
from asset_pipeline.schemas.manifest import StoredObjectRef
from asset_pipeline.storage.base import StorageBackend, build_filename


class LocalCacheBackend(StorageBackend):
    """Stores compressed payloads under a cache directory."""

    backend_kind = "local"
    log_component = "storage.local"

    def __init__(self, cache_dir: Union[str, Path]):
        self.cache_dir = Path(cache_dir)
        super().__init__()

    async def store(
        self, provider_kind: str, provider_id: str, payload: ProcessedPayload
    ) -> StoredObjectRef:
        filename = build_filename(provider_kind, provider_id, payload.content_hash)
        target = (self.cache_dir / filename).resolve()
        address = target.as_uri()

        if target.parent != self.cache_dir.resolve():
            raise StorageWriteFailed(
                f"Refusing to write outside cache directory: {filename}",
                address=address,
                backend_kind=self.backend_kind,
            )

        try:
            written = await asyncio.to_thread(self._write_atomic, target, payload.compressed_bytes)
        except OSError as e:
            raise StorageWriteFailed(
                f"Failed to write local cache file: {e}",
                address=address,
                backend_kind=self.backend_kind,
                cause=e,
            ) from e

        self._log(
            logging.DEBUG,
            "Stored payload in local cache" if written else "Payload already cached",
            address=address,
            backend_kind=self.backend_kind,
            content_hash=payload.content_hash,
            size_bytes=payload.size_bytes,
        )

        return StoredObjectRef(
            backend_kind="local",
            address=address,
            filename=filename,
            size_bytes=payload.size_bytes,
            content_hash=payload.content_hash,
            local_path=str(target),
        )

    @staticmethod
    def _write_atomic(target: Path, data: bytes) -> bool:
        """Write data to target via temp file + rename. Returns False if target existed."""
        target.parent.mkdir(parents=True, exist_ok=True)
        if target.exists():
            return False

        fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=".tmp-", suffix=".part")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, target)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
        return True
