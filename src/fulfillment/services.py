"""Collaborators used by the orchestrator, gathered into one injectable object."""

import os
from dataclasses import dataclass, field

from audience.profile import PersonaOverride
from bundles.catalog import CatalogStore
from bundles.generation import get_bundle_generator
from bundles.library import BundleLibrary
from fulfillment.config import FulfillmentConfig
from fulfillment.icons import IconLibraryEntry, load_icon_library
from fulfillment.storage import get_document_store, get_log_store
from intake.session import get_session_source
from intake.sku_map import SkuMapping, load_sku_map
from narrative.provider import get_narrative_providers
from notifications.channel import ChannelType, get_channel

_catalog_instance: CatalogStore | None = None
_bundle_library_instance: BundleLibrary | None = None


def get_catalog() -> CatalogStore:
    """Return the process catalog store (singleton).

    FULFILLMENT_RUNTIME_CATALOG names a JSON file that keeps generated bundles across restarts.
    """
    global _catalog_instance
    if _catalog_instance is None:
        _catalog_instance = CatalogStore(path=os.environ.get("FULFILLMENT_RUNTIME_CATALOG") or None)
    return _catalog_instance


def reset_catalog():
    """Reset the catalog singleton (useful for testing)."""
    global _catalog_instance
    _catalog_instance = None


def get_bundle_library() -> BundleLibrary:
    """Return the process bundle library (singleton).

    FULFILLMENT_BUNDLE_LIBRARY names the JSON file that records delivered bundles.
    """
    global _bundle_library_instance
    if _bundle_library_instance is None:
        _bundle_library_instance = BundleLibrary(path=os.environ.get("FULFILLMENT_BUNDLE_LIBRARY") or None)
    return _bundle_library_instance


def reset_bundle_library():
    """Reset the bundle library singleton (useful for testing)."""
    global _bundle_library_instance
    _bundle_library_instance = None


@dataclass
class FulfillmentServices:
    document_store: object
    log_store: object
    chat: object
    email: object
    narrative_providers: list
    catalog: CatalogStore
    session_source: object
    bundle_generator: object | None = None
    icon_library: list[IconLibraryEntry] = field(default_factory=list)
    bundle_library: BundleLibrary | None = None
    sku_map: dict[str, SkuMapping] | None = None
    persona_overrides: dict[str, PersonaOverride] = field(default_factory=dict)

    @classmethod
    def from_registry(
        cls,
        catalog: CatalogStore | None = None,
        config: FulfillmentConfig | None = None,
    ) -> "FulfillmentServices":
        """Build services from the adapter registries.

        With a config naming an icon library folder, the library entries are
        listed from the document store once, here.
        """
        document_store = get_document_store()
        library_id = config.icon_library_id if config else None
        return cls(
            document_store=document_store,
            log_store=get_log_store(),
            chat=get_channel(ChannelType.CHAT.value),
            email=get_channel(ChannelType.EMAIL.value),
            narrative_providers=get_narrative_providers(),
            catalog=catalog or get_catalog(),
            session_source=get_session_source(),
            bundle_generator=get_bundle_generator(),
            icon_library=load_icon_library(document_store, library_id) if library_id else [],
            bundle_library=get_bundle_library(),
            sku_map=load_sku_map(),
        )
