"""
Import manifest construction.

Everything here is a pure function of its inputs apart from the default
``imported_at`` timestamp.
"""

from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from asset_pipeline.provider.normalizer import (
    DEFAULT_LICENSE,
    PROVIDER_KIND,
    first_present,
    text_rule,
)
from asset_pipeline.schemas.manifest import (
    ImportManifest,
    ImportOptions,
    ManifestSource,
    RequiredAsset,
    SequencePhase,
    SequenceTemplate,
    StoredObjectRef,
)

DEFAULT_VERSION = "1"

TEMPLATE_NOTES = (
    "Automatically generated template for imported Lottie. "
    "Edit in UI if you want bespoke timing."
)

CHARGE_DURATION_MS = 600

DISPLAY_NAME_RULES = (text_rule("title"), text_rule("name"))
LICENSE_RULES = (text_rule("license", "name"), text_rule("license"))


def manifest_id_for(provider_id: str, content_hash: str) -> str:
    return f"lottie_import_{provider_id}_{content_hash}"


def default_sequence_template(name: str) -> SequenceTemplate:
    """Charge at the attacker, travel towards the target, impact on hit."""
    return SequenceTemplate(
        name=name,
        phases=[
            SequencePhase(
                time=0,
                action="spawn",
                effect="lottie_charge",
                pos="attacker",
                duration=CHARGE_DURATION_MS,
            ),
            SequencePhase(
                time=CHARGE_DURATION_MS,
                action="spawn",
                effect="lottie_projectile",
                pos="towards_target",
            ),
            SequencePhase(
                time="onImpact",
                action="spawn",
                effect="lottie_impact",
                pos="target",
            ),
        ],
        notes=TEMPLATE_NOTES,
    )


def _version_of(detail: Mapping[str, Any]) -> str:
    version = detail.get("version")
    if version is None or version == "":
        return DEFAULT_VERSION
    return str(version)


def build_manifest(
    provider_id: str,
    detail: Mapping[str, Any],
    stored_ref: StoredObjectRef,
    options: Optional[ImportOptions] = None,
    imported_at: Optional[datetime] = None,
) -> ImportManifest:
    """
    Assemble the manifest for one completed import.

    Args:
        provider_id: Provider identifier as requested by the caller
        detail: Raw provider detail record (kept verbatim as a snapshot)
        stored_ref: Where the compressed payload was persisted
        options: Import options (template generation)
        imported_at: Completion time (default: now, UTC)

    Returns:
        ImportManifest
    """
    options = options or ImportOptions()
    detail = detail if isinstance(detail, Mapping) else {}
    manifest_id = manifest_id_for(provider_id, stored_ref.content_hash)

    return ImportManifest(
        id=manifest_id,
        display_name=first_present(detail, DISPLAY_NAME_RULES, f"Lottie {provider_id}"),
        version=_version_of(detail),
        license=first_present(detail, LICENSE_RULES, DEFAULT_LICENSE),
        source=ManifestSource(provider=PROVIDER_KIND, provider_id=provider_id),
        required_assets=[RequiredAsset.from_stored_ref(stored_ref)],
        sequence_template=(
            default_sequence_template(manifest_id) if options.generate_template else None
        ),
        imported_at=imported_at or datetime.now(timezone.utc),
        provider_detail_snapshot=dict(detail),
    )
