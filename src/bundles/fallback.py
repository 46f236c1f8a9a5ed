"""Deterministic fallback bundle.

Built from a fixed icon set that depends only on the tier and a couple of
focus hints, so it always yields at least four icons.
"""

from audience.profile import PersonalizationContext
from bundles.template import BundleIcon, BundleTemplate
from intake.intake import OrderIntake, Tier
from shared.text import as_text, unique

FALLBACK_BUNDLE_ID = "fallback-bundle"
FALLBACK_BUNDLE_NAME = "Fallback Rhythm Icons"

_BASE_ICONS = (
    ("sunrise-anchor", "Sunrise Anchor", "Start the day with one grounding ritual.", "Morning"),
    ("midday-spark", "Midday Spark", "Pause at midday for a quick reset.", "Midday"),
    ("evening-soften", "Evening Soften", "Wind down with a calming routine.", "Evening"),
    ("weekly-reset", "Weekly Reset", "Reset the house and plan the week ahead.", "Weekly"),
)
_LITE_ICONS = (("seasonal-wave", "Seasonal Wave", "Mark the turn of each season with one small ritual.", "Seasonal"),)
_FULL_ICONS = (
    ("daily-flow", "Daily Flow", "Move through the day's blocks in order.", "Daily"),
    ("sacred-rest", "Sacred Rest", "Protect one unhurried hour each week.", "Weekly"),
)
_FAMILY_ICON = ("family-circle", "Family Circle", "Gather everyone for a short shared moment.", "Family")


def _base_tone(intake: OrderIntake) -> str:
    tone = (as_text(intake.prefs.get("tone")) or "").lower()
    if "earth" in tone:
        return "earthy"
    if "bold" in tone:
        return "bright"
    return "soft"


def build_fallback_bundle(intake: OrderIntake, context: PersonalizationContext) -> BundleTemplate:
    specs = list(_BASE_ICONS)
    if intake.tier is not Tier.MINI:
        specs.extend(_LITE_ICONS)
    if intake.tier is Tier.FULL:
        specs.extend(_FULL_ICONS)

    hints = " ".join(as_text(intake.prefs.get(key)) or "" for key in ("themes", "focus")).lower()
    if "kid" in hints or "family" in hints:
        specs.append(_FAMILY_ICON)

    tone = _base_tone(intake)
    icons = tuple(
        BundleIcon(slug=slug, label=label, description=description, tags=("rhythm",), tone=tone, section=section)
        for slug, label, description, section in specs
    )
    return BundleTemplate(
        id=FALLBACK_BUNDLE_ID,
        name=FALLBACK_BUNDLE_NAME,
        category=context.preferred_category or "Household",
        description="Baseline rhythm icons for any household.",
        formats=tuple(unique([context.preferred_format, "svg", "printable", "digital"])),
        persona_tags=tuple(context.persona_tags),
        keywords=tuple(context.keywords),
        icons=icons,
    )
