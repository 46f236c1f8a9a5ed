"""Bundle library — a record of the bundles each household has received.

Every resolved plan is tracked here so a returning customer can be offered
the bundle they already have. Entries live in memory and, when the library
is constructed with a path, in a JSON file next to the runtime catalog.
"""

import json
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from pathlib import Path

import structlog

from audience.profile import PersonalizationContext
from shared.text import as_text, split_list

logger = structlog.get_logger(__name__)

REUSE_THRESHOLD = 4
MAX_KEYWORD_POINTS = 3


@dataclass(frozen=True)
class BundleLibraryEntry:
    bundle_id: str
    name: str
    category: str
    source: str
    format: str
    email: str | None = None
    family_name: str | None = None
    cohort: str | None = None
    keywords: tuple[str, ...] = ()
    persona_tags: tuple[str, ...] = ()
    merged_from: tuple[str, ...] = ()
    created_at: str = field(default_factory=lambda: datetime.now(UTC).isoformat())

    def to_dict(self) -> dict:
        data = asdict(self)
        for key in ("keywords", "persona_tags", "merged_from"):
            data[key] = list(data[key])
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "BundleLibraryEntry":
        return cls(
            bundle_id=as_text(data.get("bundle_id")) or as_text(data.get("id")) or "",
            name=as_text(data.get("name")) or "",
            category=as_text(data.get("category")) or "",
            source=as_text(data.get("source")) or "",
            format=as_text(data.get("format")) or "",
            email=as_text(data.get("email")),
            family_name=as_text(data.get("family_name")),
            cohort=as_text(data.get("cohort")),
            keywords=tuple(keyword.lower() for keyword in split_list(data.get("keywords"))),
            persona_tags=tuple(split_list(data.get("persona_tags"))),
            merged_from=tuple(split_list(data.get("merged_from"))),
            created_at=as_text(data.get("created_at")) or "",
        )


def reuse_score(entry: BundleLibraryEntry, email: str | None, context: PersonalizationContext) -> int:
    """Same email is worth 4, same family name 3, plus one per shared keyword (at most 3)."""
    score = 0
    if email and entry.email and entry.email.lower() == email.lower():
        score += 4
    if context.family_name and entry.family_name and entry.family_name.lower() == context.family_name.lower():
        score += 3
    shared = sum(1 for keyword in context.keywords if keyword.lower() in entry.keywords)
    return score + min(shared, MAX_KEYWORD_POINTS)


def reuse_suggestion(entry: BundleLibraryEntry) -> str:
    return f"Found a {entry.name} bundle from your blueprint. Want to reuse or tweak it?"


class BundleLibrary:
    def __init__(self, entries=(), path: str | Path | None = None):
        self.path = Path(path) if path else None
        self.entries: list[BundleLibraryEntry] = []
        if self.path is not None and self.path.exists():
            self.entries = self._load()
        self.entries.extend(entries)

    def _load(self) -> list[BundleLibraryEntry]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "[]")
        except (OSError, ValueError) as exc:
            logger.warning("Unreadable bundle library, starting empty", path=str(self.path), error=str(exc))
            return []
        if isinstance(data, dict):
            data = data.get("entries")
        if not isinstance(data, list):
            return []
        return [BundleLibraryEntry.from_dict(item) for item in data if isinstance(item, dict)]

    def save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps([entry.to_dict() for entry in self.entries], indent=2), encoding="utf-8")

    def find_reusable(self, email: str | None, context: PersonalizationContext) -> BundleLibraryEntry | None:
        """Return the best-scoring earlier bundle, or None when nothing scores at least REUSE_THRESHOLD."""
        best, best_score = None, 0
        for entry in self.entries:
            score = reuse_score(entry, email, context)
            if best is None or score > best_score:
                best, best_score = entry, score
        return best if best is not None and best_score >= REUSE_THRESHOLD else None

    def track(self, entry: BundleLibraryEntry) -> bool:
        """Record a delivered bundle once per (bundle, email); returns False for a repeat."""
        for existing in self.entries:
            if existing.bundle_id == entry.bundle_id and (existing.email or "").lower() == (entry.email or "").lower():
                return False
        self.entries.append(entry)
        try:
            self.save()
        except OSError as exc:
            logger.warning("Unable to persist bundle library", path=str(self.path), error=str(exc))
        logger.info("Bundle library updated", bundle_id=entry.bundle_id, size=len(self.entries))
        return True
