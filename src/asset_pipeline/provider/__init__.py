"""
Provider integration: API client, search normalization, asset location.
"""

from asset_pipeline.provider.client import LottieFilesClient
from asset_pipeline.provider.locator import (
    AssetCandidate,
    FormatHint,
    locate,
    locate_asset,
    select_candidate,
)
from asset_pipeline.provider.normalizer import (
    ASSET_KIND,
    PROVIDER_KIND,
    normalize_item,
    normalize_search_response,
)

__all__ = [
    "ASSET_KIND",
    "AssetCandidate",
    "FormatHint",
    "LottieFilesClient",
    "PROVIDER_KIND",
    "locate",
    "locate_asset",
    "normalize_item",
    "normalize_search_response",
    "select_candidate",
]
