"""
Storage backends for processed payloads.

Backends:
- S3StorageBackend: conditional uploads to an S3 bucket
- LocalCacheBackend: atomic writes under a local cache directory
"""

from asset_pipeline.storage.base import StorageBackend, build_filename
from asset_pipeline.storage.factory import create_storage_backend
from asset_pipeline.storage.local import LocalCacheBackend
from asset_pipeline.storage.s3 import S3StorageBackend

__all__ = [
    "LocalCacheBackend",
    "S3StorageBackend",
    "StorageBackend",
    "build_filename",
    "create_storage_backend",
]
