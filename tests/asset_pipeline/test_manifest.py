"""Tests for import manifest construction."""

from datetime import datetime, timezone

import pytest

from asset_pipeline.manifest import build_manifest, default_sequence_template, manifest_id_for
from asset_pipeline.schemas.manifest import ImportOptions, StoredObjectRef

IMPORTED_AT = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def stored_ref():
    return StoredObjectRef(
        backend_kind="s3",
        address="https://assets.s3.us-east-1.amazonaws.com/lottie/lottie_abc123_0123456789ab.json.gz",
        filename="lottie_abc123_0123456789ab.json.gz",
        size_bytes=321,
        content_hash="0123456789ab",
    )


class TestManifestId:
    def test_format(self):
        assert manifest_id_for("abc123", "0123456789ab") == "lottie_import_abc123_0123456789ab"


class TestBuildManifest:
    def test_fields_from_detail(self, sample_detail, stored_ref):
        manifest = build_manifest("abc123", sample_detail, stored_ref, imported_at=IMPORTED_AT)

        assert manifest.id == "lottie_import_abc123_0123456789ab"
        assert manifest.display_name == "Fireball"
        assert manifest.version == "3"
        assert manifest.license == "Lottie Simple License"
        assert manifest.source.provider == "lottiefiles"
        assert manifest.source.provider_id == "abc123"
        assert manifest.sequence_template is None
        assert manifest.provider_detail_snapshot == sample_detail
        assert manifest.imported_at == IMPORTED_AT

    def test_required_asset_from_ref(self, sample_detail, stored_ref):
        manifest = build_manifest("abc123", sample_detail, stored_ref, imported_at=IMPORTED_AT)

        (asset,) = manifest.required_assets
        assert asset.name == stored_ref.filename
        assert asset.type == "lottie"
        assert asset.mime == "application/json"
        assert asset.url == stored_ref.address
        assert asset.local_path is None
        assert asset.size == 321
        assert asset.etag == "0123456789ab"

    def test_defaults_for_sparse_detail(self, stored_ref):
        manifest = build_manifest("xyz", {}, stored_ref, imported_at=IMPORTED_AT)

        assert manifest.display_name == "Lottie xyz"
        assert manifest.version == "1"
        assert manifest.license == "unknown"
        assert manifest.provider_detail_snapshot == {}

    def test_name_and_license_fallbacks(self, stored_ref):
        manifest = build_manifest(
            "xyz", {"name": "Spark", "license": "CC0"}, stored_ref, imported_at=IMPORTED_AT
        )
        assert manifest.display_name == "Spark"
        assert manifest.license == "CC0"

    def test_deterministic_apart_from_timestamp(self, sample_detail, stored_ref):
        first = build_manifest("abc123", sample_detail, stored_ref, imported_at=IMPORTED_AT)
        second = build_manifest("abc123", sample_detail, stored_ref, imported_at=IMPORTED_AT)
        assert first == second

    def test_default_timestamp_is_utc(self, sample_detail, stored_ref):
        manifest = build_manifest("abc123", sample_detail, stored_ref)
        assert manifest.imported_at.tzinfo is not None

    def test_template_when_requested(self, sample_detail, stored_ref):
        manifest = build_manifest(
            "abc123",
            sample_detail,
            stored_ref,
            ImportOptions(generate_template=True),
            imported_at=IMPORTED_AT,
        )

        template = manifest.sequence_template
        assert template is not None
        assert template.name == manifest.id
        assert [(p.time, p.effect, p.pos) for p in template.phases] == [
            (0, "lottie_charge", "attacker"),
            (600, "lottie_projectile", "towards_target"),
            ("onImpact", "lottie_impact", "target"),
        ]
        assert template.phases[0].duration == 600
        assert all(p.action == "spawn" for p in template.phases)
        assert template.notes.startswith("Automatically generated template")


class TestManifestSerialization:
    def test_camel_case_body(self, sample_detail, stored_ref):
        manifest = build_manifest(
            "abc123",
            sample_detail,
            stored_ref,
            ImportOptions(generate_template=True),
            imported_at=IMPORTED_AT,
        )

        body = manifest.model_dump(by_alias=True)

        assert body["displayName"] == "Fireball"
        assert body["source"] == {"provider": "lottiefiles", "providerId": "abc123"}
        assert body["requiredAssets"][0]["localPath"] is None
        assert body["importedAt"] == "2024-05-01T12:00:00+00:00"
        assert body["providerDetailSnapshot"]["files"]["json"]["url"].endswith(".json")
        assert body["sequenceTemplate"]["phases"][2]["time"] == "onImpact"


class TestDefaultSequenceTemplate:
    def test_name_passthrough(self):
        assert default_sequence_template("fx").name == "fx"
