"""Bundle templates — named, categorized collections of icon definitions."""

from dataclasses import dataclass, field
from enum import Enum

from audience.profile import StyleLevel
from shared.text import as_text, slugify, split_list


class BundleSource(Enum):
    STORED = "stored"
    GENERATED = "generated"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class BundleIcon:
    """One icon definition.

    ``ages`` lists the cohorts the icon suits (empty means every cohort).
    ``templates`` maps a personalization value name (``family_name``,
    ``child_name``, ``name``) to a label pattern containing ``{value}``.
    """

    slug: str
    label: str
    description: str = ""
    tags: tuple[str, ...] = ()
    tone: str | None = None
    section: str | None = None
    ages: tuple[str, ...] = ()
    templates: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "slug": self.slug,
            "label": self.label,
            "description": self.description,
            "tags": list(self.tags),
            "tone": self.tone,
            "section": self.section,
            "ages": list(self.ages),
            "templates": dict(self.templates),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BundleIcon":
        """Build an icon from loosely shaped data; list fields accept text or lists, other shapes are dropped."""
        label = as_text(data.get("label")) or as_text(data.get("name")) or ""
        templates = data.get("templates")
        return cls(
            slug=as_text(data.get("slug")) or slugify(label, "icon"),
            label=label,
            description=as_text(data.get("description")) or "",
            tags=tuple(tag.lower() for tag in split_list(data.get("tags"))),
            tone=as_text(data.get("tone")),
            section=as_text(data.get("section")),
            ages=tuple(age.lower() for age in split_list(data.get("ages"))),
            templates={
                str(key): str(pattern)
                for key, pattern in (templates.items() if isinstance(templates, dict) else ())
                if as_text(pattern)
            },
        )


@dataclass(frozen=True)
class BundleTemplate:
    id: str
    name: str
    category: str
    description: str = ""
    formats: tuple[str, ...] = ("svg", "printable", "digital")
    persona_tags: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    icons: tuple[BundleIcon, ...] = ()
    style_level: StyleLevel | None = None
    icon_size: float | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "formats": list(self.formats),
            "persona_tags": list(self.persona_tags),
            "keywords": list(self.keywords),
            "icons": [icon.to_dict() for icon in self.icons],
            "style_level": self.style_level.value if self.style_level else None,
            "icon_size": self.icon_size,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BundleTemplate":
        style = data.get("style_level")
        return cls(
            id=data["id"],
            name=data["name"],
            category=data.get("category") or "Household",
            description=data.get("description") or "",
            formats=tuple(data.get("formats") or ("svg", "digital")),
            persona_tags=tuple(data.get("persona_tags") or ()),
            keywords=tuple(data.get("keywords") or ()),
            icons=tuple(BundleIcon.from_dict(icon) for icon in data.get("icons") or ()),
            style_level=StyleLevel(style) if style else None,
            icon_size=data.get("icon_size"),
        )
