"""
S3 storage backend.

Uploads are conditional on the key not existing yet. Keys are content
addressed, so an existing object already holds identical bytes and the
conflict response is treated as success.
"""

import asyncio
import logging
from typing import Any, Optional
from urllib.parse import quote

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from asset_pipeline.common.exceptions import StorageWriteFailed
from asset_pipeline.config import DEFAULT_REGION
from asset_pipeline.processing import ProcessedPayload
from asset_pipeline.schemas.manifest import StoredObjectRef
from asset_pipeline.storage.base import StorageBackend, build_filename

DEFAULT_KEY_PREFIX = "lottie"

# Error codes S3 returns when IfNoneMatch="*" finds an existing object
EXISTING_OBJECT_CODES = frozenset({"PreconditionFailed", "ConditionalRequestConflict"})


class S3StorageBackend(StorageBackend):
    """
    Stores compressed payloads in an S3 bucket.

    The boto3 client is built once per backend; pass ``client=`` to inject
    a preconfigured or stubbed one.
    """

    backend_kind = "s3"
    log_component = "storage.s3"

    def __init__(
        self,
        bucket: str,
        region: str = DEFAULT_REGION,
        client: Optional[Any] = None,
        key_prefix: str = DEFAULT_KEY_PREFIX,
    ):
        self.bucket = bucket
        self.region = region or DEFAULT_REGION
        self.key_prefix = key_prefix.strip("/")
        self.client = client or boto3.client("s3", region_name=self.region)
        super().__init__()

    def object_key(self, filename: str) -> str:
        return f"{self.key_prefix}/{filename}" if self.key_prefix else filename

    def address_for(self, key: str) -> str:
        """Stable public URL of an object (unsigned)."""
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{quote(key)}"

    async def store(
        self, provider_kind: str, provider_id: str, payload: ProcessedPayload
    ) -> StoredObjectRef:
        filename = build_filename(provider_kind, provider_id, payload.content_hash)
        key = self.object_key(filename)
        address = self.address_for(key)

        try:
            await asyncio.to_thread(
                self.client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=payload.compressed_bytes,
                ContentType="application/json",
                ContentEncoding="gzip",
                IfNoneMatch="*",
            )
            message = "Uploaded payload to S3"
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code not in EXISTING_OBJECT_CODES:
                raise StorageWriteFailed(
                    f"S3 upload failed ({code or 'unknown'}): s3://{self.bucket}/{key}",
                    address=address,
                    backend_kind=self.backend_kind,
                    cause=e,
                ) from e
            message = "Payload already present in S3"
        except BotoCoreError as e:
            raise StorageWriteFailed(
                f"S3 upload failed: {e}",
                address=address,
                backend_kind=self.backend_kind,
                cause=e,
            ) from e

        self._log(
            logging.DEBUG,
            message,
            address=address,
            backend_kind=self.backend_kind,
            content_hash=payload.content_hash,
            size_bytes=payload.size_bytes,
        )

        return StoredObjectRef(
            backend_kind="s3",
            address=address,
            filename=filename,
            size_bytes=payload.size_bytes,
            content_hash=payload.content_hash,
        )
