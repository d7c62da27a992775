"""
Asset location discovery.

Provider detail records expose download links in several places, none of
them contractually stable. The locator gathers every URL-shaped field,
ranks the per-format ``files`` map above top-level fallbacks, and only
fails when nothing at all is found.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, List, Mapping, Sequence
from urllib.parse import urlsplit

from asset_pipeline.common.exceptions import NoDownloadableAsset

# Per-entry keys inside detail["files"][<format>], in priority order
FILE_ENTRY_KEYS = ("url", "download_url")

# Top-level fallbacks, in priority order (all ranked below the files map)
TOP_LEVEL_KEYS = ("animation_url", "download_url", "preview")

STRUCTURED_EXTENSION = ".json"
BINARY_EXTENSIONS = (".lottie", ".zip", ".gz")


class FormatHint(str, Enum):
    """What a candidate URL appears to serve."""

    JSON = "json"
    BINARY = "binary"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class AssetCandidate:
    """A discovered download URL and its format hint."""

    url: str
    format_hint: FormatHint


def format_hint_for(url: str) -> FormatHint:
    """
    Guess the payload format from the URL text.

    A path ending in ``.json`` or any mention of ``json`` in the URL counts
    as structured data.
    """
    path = urlsplit(url).path.lower()
    if path.endswith(STRUCTURED_EXTENSION) or "json" in url.lower():
        return FormatHint.JSON
    if path.endswith(BINARY_EXTENSIONS):
        return FormatHint.BINARY
    return FormatHint.UNKNOWN


def _url_value(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _iter_urls(detail: Mapping[str, Any]) -> Iterator[str]:
    files = detail.get("files")
    if isinstance(files, Mapping):
        for entry in files.values():
            if not isinstance(entry, Mapping):
                continue
            for key in FILE_ENTRY_KEYS:
                url = _url_value(entry.get(key))
                if url:
                    yield url

    for key in TOP_LEVEL_KEYS:
        url = _url_value(detail.get(key))
        if url:
            yield url


def locate(detail: Mapping[str, Any]) -> List[AssetCandidate]:
    """
    Discover candidate download URLs in a provider detail record.

    Args:
        detail: Raw provider detail body

    Returns:
        Candidates deduplicated by exact URL, in discovery order

    Raises:
        NoDownloadableAsset: If no URL-shaped field exists anywhere
    """
    if not isinstance(detail, Mapping):
        raise NoDownloadableAsset("Provider detail is not an object")

    seen = set()
    candidates: List[AssetCandidate] = []
    for url in _iter_urls(detail):
        if url in seen:
            continue
        seen.add(url)
        candidates.append(AssetCandidate(url=url, format_hint=format_hint_for(url)))

    if not candidates:
        raise NoDownloadableAsset(
            "No downloadable JSON/url discovered in provider metadata",
            available_fields=detail.keys(),
        )
    return candidates


def select_candidate(candidates: Sequence[AssetCandidate]) -> AssetCandidate:
    """First JSON-hinted candidate, else the first candidate."""
    if not candidates:
        raise NoDownloadableAsset("No candidates to select from")
    for candidate in candidates:
        if candidate.format_hint is FormatHint.JSON:
            return candidate
    return candidates[0]


def locate_asset(detail: Mapping[str, Any]) -> AssetCandidate:
    """locate() followed by select_candidate()."""
    return select_candidate(locate(detail))
