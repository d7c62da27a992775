"""Tests for storage backend selection."""

from unittest.mock import MagicMock

from asset_pipeline.config import PipelineConfig
from asset_pipeline.storage import LocalCacheBackend, S3StorageBackend, create_storage_backend


class TestCreateStorageBackend:
    def test_bucket_selects_s3(self):
        client = MagicMock()
        config = PipelineConfig(s3_bucket="assets", aws_region="eu-west-1")

        backend = create_storage_backend(config, s3_client=client)

        assert isinstance(backend, S3StorageBackend)
        assert backend.bucket == "assets"
        assert backend.region == "eu-west-1"
        assert backend.client is client

    def test_no_bucket_selects_local(self, tmp_path):
        config = PipelineConfig(cache_dir=tmp_path)

        backend = create_storage_backend(config)

        assert isinstance(backend, LocalCacheBackend)
        assert backend.cache_dir == tmp_path
        assert backend.backend_kind == "local"
