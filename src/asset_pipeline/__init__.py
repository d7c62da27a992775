"""
Animation asset import pipeline.

Searches the LottieFiles catalog and imports animations: the asset is
downloaded, validated, canonicalized, compressed and stored under a
content-addressed name (S3 or local cache), and an import manifest is
returned for the editor.

Entry points:
    AssetImportService: search() and import_asset()
    python -m asset_pipeline: command line wrapper
"""

from asset_pipeline.config import PipelineConfig
from asset_pipeline.service import AssetImportService

__version__ = "0.1.0"

__all__ = ["AssetImportService", "PipelineConfig", "__version__"]
