"""Icon bundle materialization.

Resolves the bundle plan, then creates one asset per icon request: a copy
of a matching icon-library file when one exists, otherwise a generated SVG.
One printable PDF sheet is rendered per audience profile, and a
``manifest.json`` describing the bundle, icons, helper tasks and those
sheets is written next to the assets.
"""

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from html import escape
from io import BytesIO
from pathlib import PurePosixPath

import structlog
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from audience.profile import AudienceProfile, PersonalizationContext, StyleLevel
from bundles.catalog import CatalogStore
from bundles.library import BundleLibrary, BundleLibraryEntry, reuse_suggestion
from bundles.personalization import IconRequest
from bundles.resolver import BundlePlan, resolve_bundle_plan
from fulfillment.storage.document_port import FOLDER_MIME_TYPE, PDF_MIME_TYPE, StoredFile
from fulfillment.workspace import OrderWorkspace
from intake.intake import OrderIntake
from shared.text import slugify

logger = structlog.get_logger(__name__)

ICONS_FOLDER = "icons"
MANIFEST_NAME = "manifest.json"
SVG_MIME_TYPE = "image/svg+xml"
JSON_MIME_TYPE = "application/json"
MAX_SHEET_ICONS = 12

# (background, foreground)
_PALETTES = {
    StyleLevel.STANDARD.value: ("#F6F1EB", "#3B3A36"),
    StyleLevel.KID_FRIENDLY.value: ("#FFF4D6", "#2E4057"),
    StyleLevel.ELDER_ACCESSIBLE.value: ("#FFFFFF", "#111111"),
    StyleLevel.NEURODIVERGENT_SUPPORT.value: ("#EEF4F1", "#1F3A34"),
}
_HIGH_CONTRAST_PALETTE = ("#FFFFFF", "#000000")
_FONT_SIZES = {
    StyleLevel.KID_FRIENDLY.value: 64,
    StyleLevel.NEURODIVERGENT_SUPPORT.value: 60,
    StyleLevel.ELDER_ACCESSIBLE.value: 56,
    StyleLevel.STANDARD.value: 48,
}


@dataclass(frozen=True)
class IconLibraryEntry:
    file_id: str
    slug: str
    label: str
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class IconAsset:
    request: IconRequest
    file: StoredFile
    origin: str


@dataclass(frozen=True)
class IconBundleArtifacts:
    folder: StoredFile
    manifest: StoredFile
    plan: BundlePlan
    assets: tuple[IconAsset, ...]
    variants: tuple[dict, ...] = ()
    reuse_suggestion: str | None = None


def load_icon_library(store, folder_id: str) -> list[IconLibraryEntry]:
    """List the icon files kept in the library folder.

    The file name (without extension) is the slug; sub-folders and JSON
    files are skipped. A store error leaves the library empty.
    """
    try:
        files = store.list_files(folder_id)
    except Exception as exc:
        logger.warning("Unable to list icon library", folder_id=folder_id, error=str(exc))
        return []

    entries = []
    for stored in files:
        if stored.mime_type in (FOLDER_MIME_TYPE, JSON_MIME_TYPE):
            continue
        stem = PurePosixPath(stored.name).stem
        entries.append(
            IconLibraryEntry(
                file_id=stored.id,
                slug=slugify(stem, "icon"),
                label=stem.replace("-", " ").replace("_", " ").strip().title(),
            )
        )
    logger.info("Icon library loaded", folder_id=folder_id, icons=len(entries))
    return entries


def match_library_icon(request: IconRequest, library: list[IconLibraryEntry]) -> IconLibraryEntry | None:
    """Match by slug, then by every library tag being present, then by the first label word."""
    for entry in library:
        if entry.slug == request.slug:
            return entry
    request_tags = set(request.tags)
    for entry in library:
        if entry.tags and set(entry.tags) <= request_tags:
            return entry
    first_word = request.label.split()[0].lower() if request.label.split() else ""
    for entry in library:
        if first_word and entry.label.split() and entry.label.split()[0].lower() == first_word:
            return entry
    return None


def render_icon_svg(request: IconRequest) -> bytes:
    background, foreground = _HIGH_CONTRAST_PALETTE if request.high_contrast else _PALETTES.get(
        request.style_level, _PALETTES[StyleLevel.STANDARD.value]
    )
    font_size = _FONT_SIZES.get(request.style_level, 48)
    stroke = 12 if request.high_contrast else 6
    size = f"{request.icon_size}in"
    svg = (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" viewBox="0 0 512 512">'
        f'<rect width="512" height="512" rx="64" fill="{background}"/>'
        f'<circle cx="256" cy="200" r="110" fill="none" stroke="{foreground}" stroke-width="{stroke}"/>'
        f'<text x="256" y="420" font-family="Helvetica, Arial, sans-serif" font-size="{font_size}" '
        f'text-anchor="middle" fill="{foreground}">{escape(request.label)}</text>'
        "</svg>"
    )
    return svg.encode("utf-8")


def render_variant_pdf(profile: AudienceProfile, requests: list[IconRequest]) -> bytes:
    """One letter-size sheet listing the icons with the audience's style notes."""
    styles = getSampleStyleSheet()
    story = [
        Paragraph(escape(f"{profile.name}'s Magnet Bundle"), styles["Title"]),
        Paragraph(
            escape(f"Style: {profile.style_level.value.replace('_', ' ')}, icon size {profile.icon_size}in"),
            styles["BodyText"],
        ),
    ]
    if profile.high_contrast:
        story.append(Paragraph("High contrast text and bold outlines recommended.", styles["BodyText"]))
    if profile.simplify_text:
        story.append(Paragraph("Use simplified wording on shared boards.", styles["BodyText"]))
    if profile.needs_repetition:
        story.append(Paragraph("Repeat key magnets for regulation cues.", styles["BodyText"]))
    story.append(Spacer(1, 12))
    story.append(Paragraph("Icons", styles["Heading2"]))
    for request in requests[:MAX_SHEET_ICONS]:
        story.append(Paragraph(escape(f"{request.label} ({request.icon_size}in)"), styles["BodyText"]))

    buffer = BytesIO()
    SimpleDocTemplate(buffer, pagesize=letter, title=f"{profile.name} icons").build(story)
    return buffer.getvalue()


def create_pdf_variants(store, folder_id: str, plan: BundlePlan) -> list[dict]:
    """Upload one PDF sheet per audience; a failed sheet is logged and left out."""
    variants = []
    for profile, variant in zip(plan.context.audiences, audience_variants(plan.context)):
        try:
            content = render_variant_pdf(profile, list(plan.requests))
            stored = store.create_file(variant["file_name"], PDF_MIME_TYPE, content, folder_id)
        except Exception as exc:
            logger.warning("Failed to create PDF variant", audience=profile.name, error=str(exc))
            continue
        variants.append({**variant, "file_id": stored.id, "url": stored.url})
    return variants


def audience_variants(context: PersonalizationContext) -> list[dict]:
    return [
        {
            "audience": profile.name,
            "version": profile.version,
            "file_name": f"{slugify(profile.name, 'audience')}-icons-v{profile.version}.pdf",
            "style_level": profile.style_level.value,
            "icon_size": profile.icon_size,
            "high_contrast": profile.high_contrast,
        }
        for profile in context.audiences
    ]


def build_manifest(
    plan: BundlePlan,
    assets: list[IconAsset],
    intake: OrderIntake,
    variants: list[dict] | None = None,
    suggestion: str | None = None,
) -> dict:
    return {
        "generated_at": datetime.now(UTC).isoformat(),
        "customer": intake.email,
        "tier": intake.tier.value,
        "bundle": {
            "id": plan.bundle.id,
            "name": plan.bundle.name,
            "category": plan.bundle.category,
            "source": plan.source.value,
            "score": plan.score,
            "format": plan.format,
            "merged_from": list(plan.merged_from),
        },
        "icons": [
            {**asset.request.to_dict(), "file_id": asset.file.id, "url": asset.file.url, "origin": asset.origin}
            for asset in assets
        ],
        "helpers": [helper.to_dict() for helper in plan.helpers],
        "keywords": list(plan.context.keywords),
        "persona_tags": list(plan.context.persona_tags),
        "variants": list(variants or []),
        "reuse_suggestion": suggestion,
    }


def library_entry_for(plan: BundlePlan, intake: OrderIntake) -> BundleLibraryEntry:
    return BundleLibraryEntry(
        bundle_id=plan.bundle.id,
        name=plan.bundle.name,
        category=plan.bundle.category,
        source=plan.source.value,
        format=plan.format,
        email=intake.email,
        family_name=plan.context.family_name,
        cohort=plan.context.cohort.value,
        keywords=tuple(keyword.lower() for keyword in (plan.bundle.keywords or plan.context.keywords)),
        persona_tags=tuple(plan.context.persona_tags),
        merged_from=tuple(plan.merged_from),
    )


def materialize_icon_bundle(
    intake: OrderIntake,
    workspace: OrderWorkspace,
    store,
    context: PersonalizationContext,
    catalog: CatalogStore,
    generator=None,
    library: list[IconLibraryEntry] | None = None,
    bundle_library: BundleLibrary | None = None,
) -> IconBundleArtifacts:
    plan = resolve_bundle_plan(intake, context, catalog, generator)
    folder = store.ensure_folder(workspace.order.id, ICONS_FOLDER)

    assets: list[IconAsset] = []
    for request in plan.requests:
        entry = match_library_icon(request, library or [])
        if entry is not None:
            stored = store.copy_file(entry.file_id, f"{request.slug}.svg", folder.id)
            assets.append(IconAsset(request=request, file=stored, origin="library"))
        else:
            stored = store.create_file(f"{request.slug}.svg", SVG_MIME_TYPE, render_icon_svg(request), folder.id)
            assets.append(IconAsset(request=request, file=stored, origin="generated"))

    variants = create_pdf_variants(store, folder.id, plan)

    suggestion = None
    if bundle_library is not None:
        reusable = bundle_library.find_reusable(intake.email, context)
        suggestion = reuse_suggestion(reusable) if reusable is not None else None
        bundle_library.track(library_entry_for(plan, intake))

    manifest_bytes = json.dumps(build_manifest(plan, assets, intake, variants, suggestion), indent=2).encode("utf-8")
    manifest = store.create_file(MANIFEST_NAME, JSON_MIME_TYPE, manifest_bytes, folder.id)
    logger.info(
        "Icon bundle materialized",
        bundle_id=plan.bundle.id,
        source=plan.source.value,
        icons=len(assets),
        library_matches=sum(1 for asset in assets if asset.origin == "library"),
        variants=len(variants),
    )
    return IconBundleArtifacts(
        folder=folder,
        manifest=manifest,
        plan=plan,
        assets=tuple(assets),
        variants=tuple(variants),
        reuse_suggestion=suggestion,
    )
