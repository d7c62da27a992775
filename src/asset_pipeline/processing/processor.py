"""
Content processing: download, validate, canonicalize, compress, hash.

Clean interface: url -> ProcessedPayload

Only the download step is retried. A body that fails to parse is rejected
immediately since malformed content will not become well-formed on retry.
"""

import asyncio
import gzip
import hashlib
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import aiohttp

from asset_pipeline.common.exceptions import DownloadFailed, DownloadTooLarge, InvalidPayload
from asset_pipeline.common.logging import LoggedClass, logged_operation
from asset_pipeline.common.retry import DOWNLOAD_RETRY, RetryConfig, retry_async

CONTENT_HASH_LENGTH = 12
COMPRESSION_LEVEL = 9


@dataclass(frozen=True)
class ProcessedPayload:
    """Every byte form of one processed asset.

    Attributes:
        raw_bytes: Body as downloaded
        canonical_bytes: Minified JSON (UTF-8)
        compressed_bytes: gzip of canonical_bytes
        content_hash: First 12 hex chars of SHA-1 over compressed_bytes
    """

    raw_bytes: bytes
    canonical_bytes: bytes
    compressed_bytes: bytes
    content_hash: str

    @property
    def size_bytes(self) -> int:
        return len(self.compressed_bytes)


def parse_json(raw_bytes: bytes, source_url: str) -> Any:
    """Decode and parse a JSON body; raise InvalidPayload on any failure."""
    try:
        return json.loads(raw_bytes.decode("utf-8-sig"))
    except UnicodeDecodeError as e:
        raise InvalidPayload(source_url, f"not UTF-8 ({e.reason})", cause=e) from e
    except json.JSONDecodeError as e:
        raise InvalidPayload(source_url, e.msg, cause=e) from e


def canonicalize(parsed: Any) -> bytes:
    """Minimal JSON form: no insignificant whitespace, key order preserved."""
    return json.dumps(parsed, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def compress(data: bytes) -> bytes:
    """gzip at maximum effort with a fixed header timestamp.

    mtime=0 keeps output bytes a pure function of the input, so the same
    canonical content always lands on the same content hash.
    """
    return gzip.compress(data, compresslevel=COMPRESSION_LEVEL, mtime=0)


def content_hash_for(compressed: bytes) -> str:
    """Short dedup key over compressed bytes (not a security boundary)."""
    return hashlib.sha1(compressed).hexdigest()[:CONTENT_HASH_LENGTH]


def build_payload(raw_bytes: bytes, source_url: str = "") -> ProcessedPayload:
    """Validate, canonicalize, compress and hash a downloaded body."""
    canonical = canonicalize(parse_json(raw_bytes, source_url))
    compressed = compress(canonical)
    return ProcessedPayload(
        raw_bytes=raw_bytes,
        canonical_bytes=canonical,
        compressed_bytes=compressed,
        content_hash=content_hash_for(compressed),
    )


class ContentProcessor(LoggedClass):
    """
    Downloads an asset and turns it into a ProcessedPayload.

    Usage:
        async with ContentProcessor() as processor:
            payload = await processor.process(url, credential=api_key)

    Session management:
        Owns an aiohttp session unless one is passed to the constructor.
    """

    log_component = "processor"

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        timeout_seconds: int = 60,
        retry_config: RetryConfig = DOWNLOAD_RETRY,
        max_bytes: Optional[int] = None,
    ):
        """
        Initialize ContentProcessor.

        Args:
            session: Optional shared aiohttp session
            timeout_seconds: Per-attempt download timeout
            retry_config: Attempts and backoff unit for downloads
            max_bytes: Reject bodies larger than this (None = no limit)
        """
        self.timeout_seconds = timeout_seconds
        self.retry_config = retry_config
        self.max_bytes = max_bytes

        self._session = session
        self._owns_session = session is None

        super().__init__()

    async def __aenter__(self) -> "ContentProcessor":
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if this processor created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None

    @logged_operation(level=logging.DEBUG)
    async def process(self, url: str, credential: Optional[str] = None) -> ProcessedPayload:
        """
        Download and process one asset.

        Args:
            url: Asset URL chosen by the locator
            credential: Provider bearer token, sent when given

        Returns:
            ProcessedPayload

        Raises:
            DownloadFailed: Non-success status or transport error on every attempt
            DownloadTooLarge: Body exceeds max_bytes (not retried)
            InvalidPayload: Body is not well-formed JSON (not retried)
        """
        raw_bytes = await self.download(url, credential)
        payload = build_payload(raw_bytes, url)
        self._log(
            logging.DEBUG,
            "Processed asset payload",
            url=url,
            content_hash=payload.content_hash,
            size_bytes=payload.size_bytes,
        )
        return payload

    async def download(self, url: str, credential: Optional[str] = None) -> bytes:
        """Fetch raw bytes with linear-backoff retry; permanent failures end it early."""
        session = await self._ensure_session()
        headers: Dict[str, str] = {}
        if credential:
            headers["Authorization"] = f"Bearer {credential}"

        return await retry_async(
            lambda: self._download_once(session, url, headers),
            max_attempts=self.retry_config.max_attempts,
            base_delay=self.retry_config.base_delay,
            retry_if=lambda e: getattr(e, "is_retryable", True),
        )

    async def _download_once(
        self, session: aiohttp.ClientSession, url: str, headers: Dict[str, str]
    ) -> bytes:
        try:
            async with session.get(
                url,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                allow_redirects=True,
            ) as response:
                if not 200 <= response.status < 300:
                    raise DownloadFailed(url, status=response.status)
                if (
                    self.max_bytes
                    and response.content_length
                    and response.content_length > self.max_bytes
                ):
                    raise DownloadTooLarge(
                        url,
                        status=response.status,
                        reason=f"size {response.content_length} exceeds maximum {self.max_bytes}",
                    )
                body = await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise DownloadFailed(url, reason=type(e).__name__, cause=e) from e

        if self.max_bytes and len(body) > self.max_bytes:
            raise DownloadTooLarge(
                url, reason=f"size {len(body)} exceeds maximum {self.max_bytes}"
            )
        return body
