"""
Asset import service.

Wires the provider client, locator, content processor, storage backend and
manifest builder into the two public operations: search and import.
"""

import logging
import uuid
from typing import Optional

from asset_pipeline.common.exceptions import InvalidRequest, PipelineError
from asset_pipeline.common.logging import LoggedClass, clear_log_context, set_log_context
from asset_pipeline.config import PipelineConfig
from asset_pipeline.manifest import build_manifest
from asset_pipeline.processing import ContentProcessor
from asset_pipeline.provider import ASSET_KIND, LottieFilesClient, locate_asset
from asset_pipeline.provider.normalizer import normalize_search_response
from asset_pipeline.schemas.manifest import ImportManifest, ImportOptions
from asset_pipeline.schemas.search import SearchResponse
from asset_pipeline.storage import StorageBackend, create_storage_backend


class AssetImportService(LoggedClass):
    """
    Search the provider catalog and import assets into storage.

    Usage:
        config = PipelineConfig.load_config()
        async with AssetImportService(config) as service:
            results = await service.search("fire")
            manifest = await service.import_asset("abc123")

    Components not passed to the constructor are built from config and
    closed again on exit.
    """

    log_component = "service"

    def __init__(
        self,
        config: PipelineConfig,
        client: Optional[LottieFilesClient] = None,
        processor: Optional[ContentProcessor] = None,
        storage: Optional[StorageBackend] = None,
    ):
        self.config = config

        self._owns_client = client is None
        self._owns_processor = processor is None

        self.client = client or LottieFilesClient(
            api_key=config.lottie_api_key,
            base_url=config.lottie_api_base,
            timeout_seconds=config.request_timeout_seconds,
        )
        self.processor = processor or ContentProcessor(
            timeout_seconds=config.download_timeout_seconds,
            max_bytes=config.max_download_bytes,
        )
        self.storage = storage or create_storage_backend(config)

        super().__init__()

    async def __aenter__(self) -> "AssetImportService":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the client and processor sessions this service created."""
        if self._owns_client:
            await self.client.close()
        if self._owns_processor:
            await self.processor.close()

    async def search(self, query: str, page: int = 1, page_size: int = 24) -> SearchResponse:
        """
        Search the provider and normalize the results.

        Raises:
            InvalidRequest: If page or page_size is below 1 (before any I/O)
            ConfigurationError: If no API key is configured
            ProviderRequestFailed: If the provider keeps failing
        """
        set_log_context(operation="search", request_id=uuid.uuid4().hex[:12])
        try:
            if page < 1 or page_size < 1:
                raise InvalidRequest(
                    f"page and page_size must be >= 1, got page={page} page_size={page_size}",
                    context={"page": page, "page_size": page_size},
                )
            raw = await self.client.search(query, page=page, page_size=page_size)
            response = normalize_search_response(raw, query, page, page_size)
        except PipelineError as e:
            self._log_exception(e, "Search failed", query=query, page=page)
            raise
        else:
            self._log(
                logging.INFO,
                "Search completed",
                query=query,
                page=response.page,
                result_count=len(response.results),
            )
            return response
        finally:
            clear_log_context()

    async def import_asset(
        self, provider_id: str, options: Optional[ImportOptions] = None
    ) -> ImportManifest:
        """
        Import one asset: detail -> locate -> download/process -> store -> manifest.

        Args:
            provider_id: Provider identifier of the animation
            options: Import options

        Returns:
            ImportManifest for the stored asset

        Raises:
            ConfigurationError: If no API key is configured (before any I/O)
            ProviderRequestFailed / ProviderNotFound: Detail fetch failed
            NoDownloadableAsset: Detail has no download link
            DownloadFailed / InvalidPayload: Asset could not be fetched or parsed
            StorageWriteFailed: Backend rejected the write
        """
        options = options or ImportOptions()
        set_log_context(
            operation="import", provider_id=provider_id, request_id=uuid.uuid4().hex[:12]
        )
        self._log(logging.INFO, "Import started", backend_kind=self.storage.backend_kind)

        try:
            api_key = self.config.require_api_key()
            detail = await self.client.fetch_detail(provider_id)

            candidate = locate_asset(detail)
            self._log(
                logging.DEBUG,
                "Selected download candidate",
                download_url=candidate.url,
            )

            payload = await self.processor.process(candidate.url, credential=api_key)
            stored_ref = await self.storage.store(ASSET_KIND, provider_id, payload)
            manifest = build_manifest(provider_id, detail, stored_ref, options)
        except PipelineError as e:
            self._log_exception(e, "Import failed", backend_kind=self.storage.backend_kind)
            raise
        else:
            self._log(
                logging.INFO,
                "Import completed",
                address=stored_ref.address,
                backend_kind=stored_ref.backend_kind,
                content_hash=stored_ref.content_hash,
                size_bytes=stored_ref.size_bytes,
            )
            return manifest
        finally:
            clear_log_context()
