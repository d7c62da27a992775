"""
Search response normalization.

Provider item shapes drift between API versions, so each target attribute is
described by an ordered tuple of accessor rules. A rule is a pure function
``raw item -> Optional[value]``; the first rule that yields a present value
wins, otherwise the attribute's fixed default is used.
"""

from typing import Any, Callable, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

from asset_pipeline.schemas.search import SearchResponse, SearchResult, SearchResultMetadata

PROVIDER_KIND = "lottiefiles"
ASSET_KIND = "lottie"
DEFAULT_TITLE = "Lottie"
DEFAULT_LICENSE = "unknown"
DEFAULT_PROVIDER_ID = "unknown"
BASE_RELEVANCE_SCORE = 1.0

Accessor = Callable[[Mapping[str, Any]], Any]


def path_rule(*path: str) -> Accessor:
    """Accessor reading a nested key path, None when any hop is missing."""

    def read(raw: Mapping[str, Any]) -> Any:
        value: Any = raw
        for key in path:
            if not isinstance(value, Mapping):
                return None
            value = value.get(key)
        return value

    return read


def text_rule(*path: str) -> Accessor:
    """Like path_rule() but only accepts non-empty strings."""
    read = path_rule(*path)

    def read_text(raw: Mapping[str, Any]) -> Optional[str]:
        value = read(raw)
        return value if isinstance(value, str) and value else None

    return read_text


def _is_present(value: Any) -> bool:
    if value is None or value is False:
        return False
    if isinstance(value, (str, list, tuple, set, frozenset, dict)) and not value:
        return False
    return True


def first_present(raw: Mapping[str, Any], rules: Iterable[Accessor], default: Any = None) -> Any:
    """Apply rules in order and return the first present value, else default."""
    for rule in rules:
        value = rule(raw)
        if _is_present(value):
            return value
    return default


# Ordered accessor rules per target attribute
FIELD_RULES: Dict[str, Tuple[Accessor, ...]] = {
    "provider_id": (path_rule("id"), path_rule("_id"), path_rule("uid"), path_rule("uuid")),
    "title": (text_rule("title"), text_rule("name")),
    "thumbnail_ref": (
        text_rule("thumbnail"),
        text_rule("preview"),
        text_rule("images", "thumbnail"),
    ),
    "preview_ref": (text_rule("preview"), text_rule("files", "json", "url")),
    "license": (text_rule("license", "name"), text_rule("license")),
    "tags": (path_rule("tags"), path_rule("meta", "tags")),
    "duration_ms": (path_rule("duration_ms"), path_rule("duration")),
    "frame_count": (path_rule("frames"),),
}


def _coerce_tags(value: Any) -> FrozenSet[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple, set, frozenset)):
        return frozenset()
    return frozenset(str(tag) for tag in value if tag is not None and str(tag))


def _coerce_number(value: Any, cast: Callable[[Any], Any]) -> Any:
    if isinstance(value, bool):
        return None
    try:
        return cast(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def normalize_item(item: Mapping[str, Any]) -> SearchResult:
    """
    Map one raw provider item onto SearchResult.

    Never raises on missing fields: absent optionals become None or an
    empty set, identifiers are coerced to strings.
    """
    provider_id = first_present(item, FIELD_RULES["provider_id"], DEFAULT_PROVIDER_ID)

    return SearchResult(
        provider=PROVIDER_KIND,
        provider_id=str(provider_id),
        title=first_present(item, FIELD_RULES["title"], DEFAULT_TITLE),
        kind=ASSET_KIND,
        thumbnail_ref=first_present(item, FIELD_RULES["thumbnail_ref"]),
        preview_ref=first_present(item, FIELD_RULES["preview_ref"]),
        license=first_present(item, FIELD_RULES["license"], DEFAULT_LICENSE),
        tags=_coerce_tags(first_present(item, FIELD_RULES["tags"], ())),
        relevance_score=BASE_RELEVANCE_SCORE,
        metadata=SearchResultMetadata(
            duration_ms=_coerce_number(first_present(item, FIELD_RULES["duration_ms"]), float),
            frame_count=_coerce_number(first_present(item, FIELD_RULES["frame_count"]), int),
        ),
    )


def normalize_search_response(
    raw: Mapping[str, Any], query: str, page: int, page_size: int
) -> SearchResponse:
    """
    Normalize a raw search response.

    Args:
        raw: Provider response body
        query: Query as sent
        page: Requested page (used when the provider does not echo one)
        page_size: Requested page size (used when the provider does not echo one)

    Returns:
        SearchResponse with results in provider order; ``total`` falls back
        to the number of results observed
    """
    if not isinstance(raw, Mapping):
        raw = {}

    items = raw.get("data")
    if not isinstance(items, list):
        items = []

    results = [normalize_item(item) for item in items if isinstance(item, Mapping)]

    total = _coerce_number(raw.get("total"), int)
    echoed_page = _coerce_number(raw.get("page"), int)
    echoed_size = _coerce_number(raw.get("per_page"), int)

    return SearchResponse(
        query=query,
        page=echoed_page if echoed_page and echoed_page > 0 else page,
        page_size=echoed_size if echoed_size and echoed_size > 0 else page_size,
        total=total if total and total > 0 else len(results),
        results=results,
    )
