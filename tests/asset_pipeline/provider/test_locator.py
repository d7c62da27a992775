"""Tests for asset location discovery."""

import pytest

from asset_pipeline.common.exceptions import NoDownloadableAsset
from asset_pipeline.provider.locator import (
    AssetCandidate,
    FormatHint,
    format_hint_for,
    locate,
    locate_asset,
    select_candidate,
)


class TestFormatHint:
    @pytest.mark.parametrize(
        "url,hint",
        [
            ("https://cdn/a.json", FormatHint.JSON),
            ("https://cdn/a.JSON?x=1", FormatHint.JSON),
            ("https://cdn/get?format=json", FormatHint.JSON),
            ("https://cdn/a.lottie", FormatHint.BINARY),
            ("https://cdn/a.zip", FormatHint.BINARY),
            ("https://cdn/a.gif", FormatHint.UNKNOWN),
        ],
    )
    def test_hint(self, url, hint):
        assert format_hint_for(url) is hint


class TestLocate:
    def test_files_map_ranked_first(self, sample_detail):
        candidates = locate(sample_detail)

        assert [c.url for c in candidates] == [
            "https://cdn.example.com/abc123.json",
            "https://cdn.example.com/abc123.gif",
        ]
        assert candidates[0].format_hint is FormatHint.JSON

    def test_deduplicates_in_order(self):
        detail = {
            "files": {"lottie": {"url": "https://cdn/a.lottie"}, "json": {"download_url": "https://cdn/a.json"}},
            "animation_url": "https://cdn/a.json",
            "download_url": "https://cdn/a.lottie",
        }

        assert [c.url for c in locate(detail)] == ["https://cdn/a.lottie", "https://cdn/a.json"]

    def test_top_level_fallback_order(self):
        detail = {
            "preview": "https://cdn/p.gif",
            "download_url": "https://cdn/d.bin",
            "animation_url": "https://cdn/a.json",
        }

        assert [c.url for c in locate(detail)] == [
            "https://cdn/a.json",
            "https://cdn/d.bin",
            "https://cdn/p.gif",
        ]

    def test_preview_only_detail(self):
        detail = {"id": "abc", "preview": "https://cdn/p.gif"}

        assert locate(detail) == [AssetCandidate("https://cdn/p.gif", FormatHint.UNKNOWN)]
        assert locate_asset(detail).url == "https://cdn/p.gif"

    def test_blank_and_non_string_values_ignored(self):
        detail = {"files": {"json": {"url": "  "}, "bad": "x"}, "preview": 7, "download_url": "https://cdn/d"}
        assert [c.url for c in locate(detail)] == ["https://cdn/d"]

    def test_nothing_found(self):
        with pytest.raises(NoDownloadableAsset) as exc_info:
            locate({"id": "abc", "title": "No links"})

        assert exc_info.value.http_status == 422
        assert exc_info.value.available_fields == ["id", "title"]

    def test_not_an_object(self):
        with pytest.raises(NoDownloadableAsset):
            locate(["https://cdn/a.json"])


class TestSelectCandidate:
    def test_prefers_json(self):
        candidates = [
            AssetCandidate("https://cdn/a.lottie", FormatHint.BINARY),
            AssetCandidate("https://cdn/a.json", FormatHint.JSON),
        ]
        assert select_candidate(candidates).url == "https://cdn/a.json"

    def test_falls_back_to_first(self):
        candidates = [
            AssetCandidate("https://cdn/a.gif", FormatHint.UNKNOWN),
            AssetCandidate("https://cdn/a.lottie", FormatHint.BINARY),
        ]
        assert select_candidate(candidates).url == "https://cdn/a.gif"

    def test_empty(self):
        with pytest.raises(NoDownloadableAsset):
            select_candidate([])

    def test_locate_asset(self, sample_detail):
        assert locate_asset(sample_detail).url == "https://cdn.example.com/abc123.json"
