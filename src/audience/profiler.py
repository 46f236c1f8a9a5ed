"""Audience profiler — who the kit is for and how each person's icons should look.

Candidate names come from, in priority order: the customer's first name,
a child name preference, the household member list, the free-text
``audience_names`` preference, and the name embedded in a prior profile
record. Names are de-duplicated case-insensitively; when none is found a
single "Primary" audience is used.

Cohort per name starts from the intake cohort and is then overridden by
persona tags, by focus keywords, and finally by an explicit per-person
override. Profile[0] is the primary audience.
"""

import structlog

from audience.profile import (
    DEFAULT_ICON_SIZES,
    STYLE_TEXT_FLAGS,
    AudienceProfile,
    PersonalizationContext,
    PersonaOverride,
    StyleLevel,
)
from audience.signals import (
    REPETITION_TAGS,
    collect_keywords,
    detect_persona_tags,
    resolve_child_name,
    resolve_family_name,
    resolve_preferred_category,
    resolve_preferred_format,
    resolve_selected_bundles,
    resolve_tone,
)
from intake.intake import Cohort, OrderIntake
from shared.text import as_text, split_list, unique

logger = structlog.get_logger(__name__)

PLACEHOLDER_NAME = "Primary"

_STYLE_BY_COHORT = {
    Cohort.CHILD: StyleLevel.KID_FRIENDLY,
    Cohort.ELDER: StyleLevel.ELDER_ACCESSIBLE,
}


def collect_audience_names(intake: OrderIntake) -> list[str]:
    names: list[str] = []
    if intake.customer.first_name:
        names.append(intake.customer.first_name)
    child_name = resolve_child_name(intake)
    if child_name:
        names.append(child_name)
    names.extend(intake.customer.household)
    names.extend(split_list(intake.prefs.get("audience_names")))
    prior = intake.prefs.get("profile")
    if isinstance(prior, dict) and as_text(prior.get("name")):
        names.append(as_text(prior.get("name")))
    return unique(names) or [PLACEHOLDER_NAME]


def _parse_float(value) -> float | None:
    try:
        return float(str(value).lower().replace("in", "").strip())
    except (TypeError, ValueError):
        return None


def _parse_version(name: str, value) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        logger.warning("Ignoring non-numeric profile version", name=name, version=value)
        return None


def _parse_override(name: str, data: dict) -> PersonaOverride:
    cohort = as_text(data.get("cohort"))
    return PersonaOverride(
        cohort=Cohort(cohort.lower()) if cohort and cohort.lower() in {c.value for c in Cohort} else None,
        style_level=StyleLevel.from_text(as_text(data.get("style_level"))),
        icon_size=_parse_float(data.get("icon_size")) if data.get("icon_size") is not None else None,
        version=_parse_version(name, data.get("version")),
    )


def load_overrides(intake: OrderIntake, configured: dict[str, PersonaOverride] | None = None) -> dict[str, PersonaOverride]:
    """Merge configured overrides with the ``audience_overrides`` preference (preference wins)."""
    overrides = {name.lower(): override for name, override in (configured or {}).items()}
    raw = intake.prefs.get("audience_overrides")
    if isinstance(raw, dict):
        for name, data in raw.items():
            if isinstance(data, dict):
                overrides[name.lower()] = _parse_override(name, data)
    return overrides


def _focus_cohort(keywords: tuple[str, ...]) -> Cohort | None:
    text = " ".join(keywords)
    if "elder" in text or "grand" in text:
        return Cohort.ELDER
    if "kid" in text or "child" in text:
        return Cohort.CHILD
    return None


def _resolve_cohort(base: Cohort, tags: tuple[str, ...], keywords: tuple[str, ...]) -> Cohort:
    cohort = base
    if "toddler" in tags:
        cohort = Cohort.CHILD
    if "elder support" in tags:
        cohort = Cohort.ELDER
    return _focus_cohort(keywords) or cohort


def _versions(intake: OrderIntake) -> dict[str, int]:
    raw = intake.prefs.get("profile_versions")
    if not isinstance(raw, dict):
        return {}
    versions = {}
    for name, value in raw.items():
        version = _parse_version(name, value)
        if version is not None:
            versions[name.lower()] = version
    return versions


def build_profile(
    name: str,
    base_cohort: Cohort,
    tags: tuple[str, ...],
    keywords: tuple[str, ...],
    override: PersonaOverride | None = None,
    explicit_style: StyleLevel | None = None,
    explicit_size: float | None = None,
    version: int = 1,
) -> AudienceProfile:
    override = override or PersonaOverride()
    cohort = override.cohort or _resolve_cohort(base_cohort, tags, keywords)

    style = _STYLE_BY_COHORT.get(cohort) or override.style_level or explicit_style or StyleLevel.STANDARD
    simplify_text, high_contrast = STYLE_TEXT_FLAGS[style]
    needs_support = bool(REPETITION_TAGS.intersection(tags)) or style is StyleLevel.NEURODIVERGENT_SUPPORT
    icon_size = override.icon_size or explicit_size or DEFAULT_ICON_SIZES[style]

    return AudienceProfile(
        name=name,
        cohort=cohort,
        style_level=style,
        icon_size=icon_size,
        simplify_text=simplify_text,
        high_contrast=high_contrast,
        needs_repetition=needs_support,
        emphasize_categories=needs_support,
        version=override.version or version,
    )


def build_audience_profiles(
    intake: OrderIntake,
    overrides: dict[str, PersonaOverride] | None = None,
) -> list[AudienceProfile]:
    """Return one profile per audience name; the first is the primary audience."""
    tags = detect_persona_tags(intake)
    keywords = collect_keywords(intake)
    overrides = load_overrides(intake, overrides)
    versions = _versions(intake)
    explicit_style = StyleLevel.from_text(as_text(intake.prefs.get("style_level")))
    explicit_size = _parse_float(intake.prefs.get("icon_size")) if intake.prefs.get("icon_size") else None

    return [
        build_profile(
            name,
            intake.cohort or Cohort.ADULT,
            tags,
            keywords,
            override=overrides.get(name.lower()),
            explicit_style=explicit_style,
            explicit_size=explicit_size,
            version=versions.get(name.lower(), 1),
        )
        for name in collect_audience_names(intake)
    ]


def build_personalization_context(
    intake: OrderIntake,
    overrides: dict[str, PersonaOverride] | None = None,
) -> PersonalizationContext:
    tags = detect_persona_tags(intake)
    keywords = collect_keywords(intake)
    profiles = build_audience_profiles(intake, overrides)
    context = PersonalizationContext(
        audiences=tuple(profiles),
        persona_tags=tags,
        keywords=keywords,
        preferred_format=resolve_preferred_format(intake),
        preferred_category=resolve_preferred_category(intake, tags, keywords),
        family_name=resolve_family_name(intake),
        child_name=resolve_child_name(intake),
        tone=resolve_tone(intake),
        selected_bundles=resolve_selected_bundles(intake),
    )
    logger.info(
        "Personalization context built",
        audiences=[profile.name for profile in profiles],
        style_level=context.style_level.value,
        persona_tags=list(tags),
        preferred_category=context.preferred_category,
    )
    return context
