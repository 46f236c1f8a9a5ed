"""Catalog store — static bundle templates plus the runtime (generated) catalog.

A CatalogStore is constructed explicitly and passed to the resolver, so
every test or process owns its own instance. The runtime catalog is
de-duplicated by id or name: adding a template whose id or name already
exists replaces the earlier entry (last writer wins). When constructed
with a path, the runtime catalog is loaded from and saved to a JSON file.
"""

import json
from collections.abc import Iterable
from pathlib import Path

import structlog

from bundles.static_catalog import STATIC_CATALOG
from bundles.template import BundleTemplate

logger = structlog.get_logger(__name__)


class CatalogStore:
    def __init__(
        self,
        static: Iterable[BundleTemplate] = STATIC_CATALOG,
        runtime: Iterable[BundleTemplate] = (),
        path: str | Path | None = None,
    ):
        self.static: tuple[BundleTemplate, ...] = tuple(static)
        self.path = Path(path) if path else None
        self.runtime: list[BundleTemplate] = []
        if self.path is not None and self.path.exists():
            self.runtime = self._load()
        for template in runtime:
            self._upsert(template)

    def _load(self) -> list[BundleTemplate]:
        data = json.loads(self.path.read_text(encoding="utf-8"))
        return [BundleTemplate.from_dict(entry) for entry in data]

    def save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [template.to_dict() for template in self.runtime]
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def _upsert(self, template: BundleTemplate) -> None:
        name = template.name.lower()
        self.runtime = [
            existing for existing in self.runtime if existing.id != template.id and existing.name.lower() != name
        ]
        self.runtime.append(template)

    def templates(self) -> list[BundleTemplate]:
        """Every candidate template, static entries first."""
        return [*self.static, *self.runtime]

    def add(self, template: BundleTemplate) -> None:
        """Append a template to the runtime catalog and persist it."""
        self._upsert(template)
        self.save()
        logger.info("Runtime catalog updated", template_id=template.id, size=len(self.runtime))

    def find(self, reference: str) -> BundleTemplate | None:
        """Look a template up by id or name (case-insensitive)."""
        key = reference.strip().lower()
        for template in self.templates():
            if template.id.lower() == key or template.name.lower() == key:
                return template
        return None
