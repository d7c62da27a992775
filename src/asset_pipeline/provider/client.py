"""
LottieFiles REST API client.

Async HTTP client for the provider catalog: search and detail fetch. Every
request is wrapped in the linear-backoff retry executor; the client does not
interpret response bodies beyond decoding JSON.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import aiohttp

from asset_pipeline.common.exceptions import (
    ConfigurationError,
    ProviderNotFound,
    ProviderRequestFailed,
    classify_http_status,
)
from asset_pipeline.common.logging import LoggedClass
from asset_pipeline.common.retry import PROVIDER_RETRY, RetryConfig, retry_async
from asset_pipeline.config import DEFAULT_API_BASE


class LottieFilesClient(LoggedClass):
    """
    Async client for the LottieFiles v2 API.

    Usage:
        async with LottieFilesClient(api_key) as client:
            raw = await client.search("fire", page=1, page_size=24)
            detail = await client.fetch_detail("abc123")

    Session management:
        By default the client owns an aiohttp session created on context
        enter. Pass ``session=`` to share one; the client then never closes it.
    """

    log_component = "lottiefiles"

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_API_BASE,
        timeout_seconds: int = 30,
        session: Optional[aiohttp.ClientSession] = None,
        retry_config: RetryConfig = PROVIDER_RETRY,
    ):
        """
        Initialize the client.

        Args:
            api_key: Bearer credential; checked on each call, not here
            base_url: API base URL
            timeout_seconds: Per-request timeout
            session: Optional shared aiohttp session
            retry_config: Attempts and backoff unit for each request
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.retry_config = retry_config

        self._session = session
        self._owns_session = session is None

        super().__init__()

    async def __aenter__(self) -> "LottieFilesClient":
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"Accept": "application/json"},
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None

    def _auth_headers(self) -> Dict[str, str]:
        key = (self.api_key or "").strip()
        if not key:
            raise ConfigurationError("LOTTIE_API_KEY not configured in env")
        return {"Authorization": f"Bearer {key}"}

    async def search(self, query: str, page: int = 1, page_size: int = 24) -> Dict[str, Any]:
        """
        Search the catalog.

        Args:
            query: Free-text query
            page: 1-based page number
            page_size: Results per page

        Returns:
            Raw provider response body

        Raises:
            ConfigurationError: If no API key is configured (before any I/O)
            ProviderRequestFailed: After all attempts fail
        """
        params = {"query": query, "page": str(page), "per_page": str(page_size)}
        return await self._get("animations", params=params)

    async def fetch_detail(self, provider_id: str) -> Dict[str, Any]:
        """
        Fetch the detail record for one animation.

        Raises:
            ConfigurationError: If no API key is configured (before any I/O)
            ProviderNotFound: If the provider answers 404 on every attempt
            ProviderRequestFailed: After all attempts fail
        """
        return await self._get(f"animations/{quote(str(provider_id), safe='')}")

    async def _get(
        self, endpoint: str, params: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        headers = self._auth_headers()
        session = await self._ensure_session()
        url = f"{self.base_url}/{endpoint}"

        return await retry_async(
            lambda: self._request_once(session, url, params, headers),
            max_attempts=self.retry_config.max_attempts,
            base_delay=self.retry_config.base_delay,
        )

    async def _request_once(
        self,
        session: aiohttp.ClientSession,
        url: str,
        params: Optional[Dict[str, str]],
        headers: Dict[str, str],
    ) -> Dict[str, Any]:
        try:
            async with session.get(
                url,
                params=params,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
            ) as response:
                text = await response.text()
                if not 200 <= response.status < 300:
                    self._log(
                        logging.DEBUG,
                        "Provider request failed",
                        url=url,
                        http_status=response.status,
                        error_category=classify_http_status(response.status).value,
                    )
                    error_cls = ProviderNotFound if response.status == 404 else ProviderRequestFailed
                    raise error_cls(
                        f"LottieFiles request failed: {response.status} {text[:200]}",
                        status=response.status,
                        body=text,
                        url=url,
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ProviderRequestFailed(
                f"LottieFiles request error: {type(e).__name__}",
                url=url,
                cause=e,
            ) from e

        try:
            return json.loads(text) if text else {}
        except json.JSONDecodeError as e:
            raise ProviderRequestFailed(
                f"LottieFiles returned non-JSON body: {e}",
                status=response.status,
                body=text,
                url=url,
                cause=e,
            ) from e
