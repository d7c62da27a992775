"""
pytest configuration for the asset pipeline tests.

Adds src directory to Python path for imports and isolates tests from the
developer's environment.
"""

import sys
from pathlib import Path

import pytest

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

PIPELINE_ENV_VARS = [
    "LOTTIE_API_KEY",
    "LOTTIE_API_BASE",
    "S3_BUCKET",
    "AWS_REGION",
    "ASSET_CACHE_DIR",
    "ASSET_REQUEST_TIMEOUT",
    "ASSET_DOWNLOAD_TIMEOUT",
    "ASSET_MAX_DOWNLOAD_BYTES",
]


@pytest.fixture(autouse=True)
def clean_pipeline_env(monkeypatch):
    """Remove pipeline settings so tests never see real credentials."""
    for name in PIPELINE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
