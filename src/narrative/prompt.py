"""Blueprint prompt construction."""

from intake.intake import OrderIntake, Tier
from narrative.advanced import AdvancedExpansion, build_advanced_directives, load_advanced_expansion
from shared.text import as_text

MAX_PROMPT_PREFERENCES = 12

_DEPTH_BY_TIER = {
    Tier.MINI: "a one-page snapshot",
    Tier.LITE: "a three-section reading",
    Tier.FULL: "a complete, deep reading with seasonal guidance",
}

_SKIPPED_PREFERENCE_KEYS = {"email", "name", "full_name", "audience_overrides", "profile_versions", "profile"}


def _birth_line(intake: OrderIntake) -> str:
    birth = intake.birth
    if not birth.date:
        return "Birth details: not provided."
    parts = [birth.date, birth.time, birth.location, birth.timezone]
    return "Birth details: " + ", ".join(part for part in parts if part) + "."


def build_blueprint_prompt(intake: OrderIntake, expansion: AdvancedExpansion | None = None) -> str:
    """Full-tier prompts end with the Advanced Soul Systems directives.

    ``expansion`` defaults to the settings file named by NARRATIVE_ADVANCED_CONFIG.
    """
    focus = as_text(intake.pref("focus", "intention", "primary_need")) or "a steadier everyday rhythm"
    lines = [
        f"Soul Blueprint for {intake.display_name}: {focus}",
        f"Write {_DEPTH_BY_TIER[intake.tier]} for the {intake.tier.label} tier.",
        _birth_line(intake),
    ]
    if intake.add_ons:
        lines.append("Add-ons: " + ", ".join(sorted(intake.add_ons)) + ".")
    if intake.expansions:
        lines.append("Include expansions: " + ", ".join(intake.expansions) + ".")

    preferences = [
        f"- {key}: {as_text(value)}"
        for key, value in intake.prefs.items()
        if key not in _SKIPPED_PREFERENCE_KEYS and as_text(value)
    ][:MAX_PROMPT_PREFERENCES]
    if preferences:
        lines.append("Preferences:")
        lines.extend(preferences)
    lines.append("Write warmly, in second person, with short paragraphs and no headings in markdown.")

    if intake.tier is Tier.FULL:
        lines.append("")
        lines.extend(build_advanced_directives(intake, expansion or load_advanced_expansion()))
    return "\n".join(lines)
