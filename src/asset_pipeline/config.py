"""
Asset pipeline configuration from environment variables and config.yaml.

Configuration priority (highest to lowest):
    1. Environment variables
    2. config.yaml file (under 'asset_pipeline:' key)
    3. Dataclass defaults

Environment variables:
    LOTTIE_API_KEY: Provider credential (required before the first provider call)
    LOTTIE_API_BASE: Provider API base URL
    S3_BUCKET: Enables the S3 storage backend when set
    AWS_REGION: Region for the S3 bucket (default: us-east-1)
    ASSET_CACHE_DIR: Local cache directory (default: ./cache/lottie)
    ASSET_REQUEST_TIMEOUT: Provider request timeout in seconds (default: 30)
    ASSET_DOWNLOAD_TIMEOUT: Asset download timeout in seconds (default: 60)
    ASSET_MAX_DOWNLOAD_BYTES: Reject downloads larger than this (default: unlimited)
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from asset_pipeline.common.exceptions import ConfigurationError

DEFAULT_CONFIG_PATH = Path("config.yaml")
DEFAULT_API_BASE = "https://api.lottiefiles.com/v2"
DEFAULT_REGION = "us-east-1"
DEFAULT_CACHE_DIR = Path("cache") / "lottie"


@dataclass
class PipelineConfig:
    """Settings consumed by the provider client, processor and storage factory.

    Load with PipelineConfig.from_env() or PipelineConfig.load_config().
    The API key is not validated at load time: a missing key surfaces as a
    ConfigurationError on the first provider call, before any network I/O.
    """

    lottie_api_key: str = ""
    lottie_api_base: str = DEFAULT_API_BASE

    # Storage
    s3_bucket: str = ""
    aws_region: str = DEFAULT_REGION
    cache_dir: Path = field(default_factory=lambda: DEFAULT_CACHE_DIR)

    # Network
    request_timeout_seconds: int = 30
    download_timeout_seconds: int = 60
    max_download_bytes: Optional[int] = None

    @property
    def remote_storage_enabled(self) -> bool:
        return bool(self.s3_bucket)

    def require_api_key(self) -> str:
        """Return the provider credential or raise ConfigurationError."""
        key = (self.lottie_api_key or "").strip()
        if not key:
            raise ConfigurationError("LOTTIE_API_KEY not configured in env")
        return key

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        """Load configuration from environment variables only."""
        return cls._build({})

    @classmethod
    def load_config(cls, config_path: Optional[Path] = None) -> "PipelineConfig":
        """Load configuration from config.yaml overlaid with environment variables.

        Args:
            config_path: YAML file to read (default: ./config.yaml; ignored if missing)

        Raises:
            ConfigurationError: If the file exists but is not a YAML mapping
        """
        config_path = config_path or DEFAULT_CONFIG_PATH

        file_data: Dict[str, Any] = {}
        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                try:
                    yaml_data = yaml.safe_load(f) or {}
                except yaml.YAMLError as e:
                    raise ConfigurationError(
                        f"Invalid YAML in {config_path}", cause=e
                    ) from e
            if not isinstance(yaml_data, dict):
                raise ConfigurationError(f"Expected a mapping in {config_path}")
            file_data = yaml_data.get("asset_pipeline", {}) or {}

        return cls._build(file_data)

    @classmethod
    def _build(cls, data: Dict[str, Any]) -> "PipelineConfig":
        max_bytes = os.getenv("ASSET_MAX_DOWNLOAD_BYTES", data.get("max_download_bytes"))

        try:
            return cls(
                lottie_api_key=os.getenv("LOTTIE_API_KEY", data.get("lottie_api_key", "")),
                lottie_api_base=os.getenv(
                    "LOTTIE_API_BASE", data.get("lottie_api_base", DEFAULT_API_BASE)
                ),
                s3_bucket=os.getenv("S3_BUCKET", data.get("s3_bucket", "")),
                aws_region=os.getenv("AWS_REGION", data.get("aws_region", DEFAULT_REGION)),
                cache_dir=Path(
                    os.getenv("ASSET_CACHE_DIR", data.get("cache_dir", str(DEFAULT_CACHE_DIR)))
                ),
                request_timeout_seconds=int(
                    os.getenv("ASSET_REQUEST_TIMEOUT", data.get("request_timeout_seconds", 30))
                ),
                download_timeout_seconds=int(
                    os.getenv("ASSET_DOWNLOAD_TIMEOUT", data.get("download_timeout_seconds", 60))
                ),
                max_download_bytes=int(max_bytes) if max_bytes not in (None, "") else None,
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid numeric setting: {e}", cause=e) from e
