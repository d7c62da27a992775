"""Storage backend selection."""

from typing import Any, Optional

from asset_pipeline.config import PipelineConfig
from asset_pipeline.storage.base import StorageBackend
from asset_pipeline.storage.local import LocalCacheBackend
from asset_pipeline.storage.s3 import S3StorageBackend


def create_storage_backend(
    config: PipelineConfig, s3_client: Optional[Any] = None
) -> StorageBackend:
    """
    Choose the backend once from configuration.

    S3 when a bucket is configured, otherwise the local cache. A failing S3
    write never falls back to the local cache.
    """
    if config.remote_storage_enabled:
        return S3StorageBackend(
            bucket=config.s3_bucket,
            region=config.aws_region,
            client=s3_client,
        )
    return LocalCacheBackend(config.cache_dir)
