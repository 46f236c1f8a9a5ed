"""Audience profiles and the personalization context derived from them."""

from dataclasses import dataclass
from enum import Enum

from intake.intake import Cohort


class StyleLevel(Enum):
    STANDARD = "standard"
    KID_FRIENDLY = "kid_friendly"
    ELDER_ACCESSIBLE = "elder_accessible"
    NEURODIVERGENT_SUPPORT = "neurodivergent_support"

    @classmethod
    def from_text(cls, value: str | None) -> "StyleLevel | None":
        if not value:
            return None
        lowered = value.lower()
        if "kid" in lowered or "child" in lowered:
            return cls.KID_FRIENDLY
        if "elder" in lowered or "access" in lowered:
            return cls.ELDER_ACCESSIBLE
        if "neuro" in lowered or "sensory" in lowered:
            return cls.NEURODIVERGENT_SUPPORT
        if "standard" in lowered:
            return cls.STANDARD
        return None


# Icon edge length in inches
DEFAULT_ICON_SIZES = {
    StyleLevel.KID_FRIENDLY: 1.25,
    StyleLevel.ELDER_ACCESSIBLE: 1.25,
    StyleLevel.NEURODIVERGENT_SUPPORT: 1.1,
    StyleLevel.STANDARD: 0.95,
}

# (simplify_text, high_contrast)
STYLE_TEXT_FLAGS = {
    StyleLevel.KID_FRIENDLY: (True, False),
    StyleLevel.ELDER_ACCESSIBLE: (True, True),
    StyleLevel.NEURODIVERGENT_SUPPORT: (True, True),
    StyleLevel.STANDARD: (False, False),
}


@dataclass(frozen=True)
class PersonaOverride:
    """Explicit per-person settings that win over every derived value."""

    cohort: Cohort | None = None
    style_level: StyleLevel | None = None
    icon_size: float | None = None
    version: int | None = None


@dataclass(frozen=True)
class AudienceProfile:
    name: str
    cohort: Cohort
    style_level: StyleLevel
    icon_size: float
    simplify_text: bool
    high_contrast: bool
    needs_repetition: bool
    emphasize_categories: bool
    version: int = 1

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "cohort": self.cohort.value,
            "style_level": self.style_level.value,
            "icon_size": self.icon_size,
            "simplify_text": self.simplify_text,
            "high_contrast": self.high_contrast,
            "needs_repetition": self.needs_repetition,
            "emphasize_categories": self.emphasize_categories,
            "version": self.version,
        }


@dataclass(frozen=True)
class PersonalizationContext:
    """Primary audience settings flattened together with the order's persona signals."""

    audiences: tuple[AudienceProfile, ...]
    persona_tags: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    preferred_format: str = "svg"
    preferred_category: str | None = None
    family_name: str | None = None
    child_name: str | None = None
    tone: str | None = None
    selected_bundles: tuple[str, ...] = ()

    @property
    def primary(self) -> AudienceProfile:
        return self.audiences[0]

    @property
    def primary_name(self) -> str:
        return self.primary.name

    @property
    def cohort(self) -> Cohort:
        return self.primary.cohort

    @property
    def style_level(self) -> StyleLevel:
        return self.primary.style_level

    @property
    def icon_size(self) -> float:
        return self.primary.icon_size

    @property
    def simplify_text(self) -> bool:
        return self.primary.simplify_text

    @property
    def high_contrast(self) -> bool:
        return self.primary.high_contrast

    @property
    def needs_repetition(self) -> bool:
        return self.primary.needs_repetition

    @property
    def emphasize_categories(self) -> bool:
        return self.primary.emphasize_categories

    def placeholder_values(self) -> dict[str, str]:
        """Values available to icon label templates."""
        values = {
            "name": self.primary_name,
            "primary_name": self.primary_name,
            "family_name": self.family_name,
            "child_name": self.child_name,
        }
        return {key: value for key, value in values.items() if value}
