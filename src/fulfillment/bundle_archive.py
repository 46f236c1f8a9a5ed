"""Archive of generated bundles.

A bundle the generator designed for one order is worth keeping: its icons
and manifest are copied into a "Magnet Bundles" folder (under the icon
library folder when one is configured, otherwise under the drive root),
and a row is appended to the bundle sheet. All of it is best-effort.
"""

from datetime import UTC, datetime

import structlog

from bundles.template import BundleSource
from fulfillment.bookkeeping import append_fulfillment_log
from fulfillment.config import FulfillmentConfig
from fulfillment.icons import MANIFEST_NAME, IconBundleArtifacts
from fulfillment.storage.document_port import StoredFile

logger = structlog.get_logger(__name__)

ARCHIVE_FOLDER = "Magnet Bundles"
BUNDLE_LOG_RANGE = "MagnetBundles!A2:G"
MAX_FOLDER_NAME = 80


def archive_folder_name(artifacts: IconBundleArtifacts) -> str:
    bundle = artifacts.plan.bundle
    return f"{bundle.category} - {bundle.name}"[:MAX_FOLDER_NAME]


def build_bundle_row(artifacts: IconBundleArtifacts, folder: StoredFile, now: datetime | None = None) -> list[str]:
    """[utc, bundle name, category, family name, keywords, format, archive folder url]"""
    plan = artifacts.plan
    return [
        (now or datetime.now(UTC)).isoformat(),
        plan.bundle.name,
        plan.bundle.category,
        plan.context.family_name or "",
        ", ".join(plan.context.keywords),
        plan.context.preferred_format,
        folder.url,
    ]


def _copy_once(store, source: StoredFile, name: str, folder: StoredFile, existing: set[str]) -> None:
    if name in existing:
        return
    try:
        store.copy_file(source.id, name, folder.id)
    except Exception as exc:
        logger.warning("Failed to copy file into bundle archive", name=name, error=str(exc))


def archive_generated_bundle(
    artifacts: IconBundleArtifacts,
    store,
    log_store,
    config: FulfillmentConfig,
) -> StoredFile | None:
    """Copy a generated bundle into the archive; stored and fallback bundles are skipped.

    A folder that already holds the manifest is left untouched, so a
    retried attempt leaves a single copy and a single sheet row.
    """
    if artifacts.plan.source is not BundleSource.GENERATED:
        return None

    try:
        root = store.ensure_folder(config.icon_library_id or config.drive_root_id, ARCHIVE_FOLDER)
        folder = store.ensure_folder(root.id, archive_folder_name(artifacts))
        existing = {stored.name for stored in store.list_files(folder.id)}
    except Exception as exc:
        logger.warning("Unable to archive generated bundle", bundle_id=artifacts.plan.bundle.id, error=str(exc))
        return None

    if MANIFEST_NAME in existing:
        logger.info("Generated bundle already archived", bundle_id=artifacts.plan.bundle.id, folder_id=folder.id)
        return folder

    for asset in artifacts.assets:
        _copy_once(store, asset.file, f"{asset.request.slug}.svg", folder, existing)
    _copy_once(store, artifacts.manifest, MANIFEST_NAME, folder, existing)

    append_fulfillment_log(log_store, config, build_bundle_row(artifacts, folder), range_name=BUNDLE_LOG_RANGE)
    logger.info("Generated bundle archived", bundle_id=artifacts.plan.bundle.id, folder_id=folder.id)
    return folder
