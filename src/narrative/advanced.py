"""Advanced Soul Systems expansion for full-tier blueprints.

The expansion is described by a JSON document (its section copy, the
modalities to weave in, the Magic Codes legend and a few automation
rules). NARRATIVE_ADVANCED_CONFIG names that file; without a readable file
the prompt falls back to a fixed directive covering the same ground.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from intake.intake import Cohort, OrderIntake
from shared.text import as_text, split_list

logger = structlog.get_logger(__name__)

CONFIG_ENV_VAR = "NARRATIVE_ADVANCED_CONFIG"

DEFAULT_MISSING_BIRTH = (
    "If data is missing, gently name what would deepen accuracy and share the "
    "intuitive bridge you are using in the meantime."
)
FALLBACK_DIRECTIVE = (
    "Advanced Soul Systems directives: even if the expansion settings are unavailable, ensure the "
    "Advanced Soul Systems section covers Enneagram, Akashic Records, Chakra scan, Soul Urge "
    "evolution, Progressed Astrology, Sabian Symbols, an I Ching hexagram, and Archetype mapping. "
    "Include sensory evidence, rhythm guidance, psychic development tips, and a Magic Codes Key legend."
)


@dataclass(frozen=True)
class SoulSystem:
    id: str
    label: str
    narrative: str = ""
    integration: str = ""
    mediumship: str = ""
    rhythm_tie_in: str = ""
    child_tone: str | None = None

    def describe(self, cohort: Cohort | None) -> str:
        pieces = [self.narrative, self.integration, self.mediumship, self.rhythm_tie_in]
        if cohort is Cohort.CHILD and self.child_tone:
            pieces.append(self.child_tone)
        return " ".join(piece for piece in pieces if piece)

    @classmethod
    def from_dict(cls, data: dict) -> "SoulSystem":
        label = as_text(data.get("label")) or as_text(data.get("id")) or "Soul system"
        return cls(
            id=as_text(data.get("id")) or label.lower(),
            label=label,
            narrative=as_text(data.get("narrative")) or "",
            integration=as_text(data.get("integration")) or "",
            mediumship=as_text(data.get("mediumship")) or "",
            rhythm_tie_in=as_text(data.get("rhythm_tie_in") or data.get("rhythmTieIn")) or "",
            child_tone=as_text(data.get("child_tone") or data.get("childTone")),
        )


@dataclass(frozen=True)
class MagicCode:
    symbol: str
    label: str
    meaning: str


@dataclass(frozen=True)
class AdvancedExpansion:
    title: str
    introduction: str
    systems: tuple[SoulSystem, ...]
    magic_codes_title: str = "Magic Codes Key"
    magic_codes_intro: str = ""
    magic_codes: tuple[MagicCode, ...] = ()
    mediumship_style: str | None = None
    rhythm_integration: str | None = None
    evidential_examples: tuple[str, ...] = ()
    callout_heading: str | None = None
    callout_instructions: str = ""
    child_tone: str | None = None
    child_skip_systems: frozenset[str] = field(default_factory=frozenset)
    missing_birth: str | None = None
    upgrade_note: str | None = None
    helper_agents: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "AdvancedExpansion":
        section = data.get("section") if isinstance(data.get("section"), dict) else {}
        summary = data.get("summary") if isinstance(data.get("summary"), dict) else {}
        codes = data.get("magic_codes") or data.get("magicCodes")
        codes = codes if isinstance(codes, dict) else {}
        automation = data.get("automation") if isinstance(data.get("automation"), dict) else {}
        child_rules = automation.get("child_rules") or automation.get("childRules")
        child_rules = child_rules if isinstance(child_rules, dict) else {}
        fallbacks = automation.get("fallbacks") if isinstance(automation.get("fallbacks"), dict) else {}
        helpers = data.get("helper_agents") or data.get("helperAgents")
        helpers = helpers.values() if isinstance(helpers, dict) else ()
        systems = data.get("systems") if isinstance(data.get("systems"), list) else []
        icons = codes.get("icons") if isinstance(codes.get("icons"), list) else []

        return cls(
            title=as_text(section.get("title")) or "Advanced Soul Systems",
            introduction=as_text(section.get("introduction")) or "",
            systems=tuple(SoulSystem.from_dict(system) for system in systems if isinstance(system, dict)),
            magic_codes_title=as_text(codes.get("title")) or "Magic Codes Key",
            magic_codes_intro=as_text(codes.get("intro")) or "",
            magic_codes=tuple(
                MagicCode(
                    symbol=as_text(icon.get("symbol")) or "",
                    label=as_text(icon.get("label")) or "",
                    meaning=as_text(icon.get("meaning")) or "",
                )
                for icon in icons
                if isinstance(icon, dict)
            ),
            mediumship_style=as_text(section.get("mediumship_style") or section.get("mediumshipStyle")),
            rhythm_integration=as_text(section.get("rhythm_integration") or section.get("rhythmIntegration")),
            evidential_examples=tuple(
                split_list(section.get("evidential_examples") or section.get("evidentialExamples"))
            ),
            callout_heading=as_text(summary.get("callout_heading") or summary.get("calloutHeading")),
            callout_instructions=as_text(summary.get("instructions")) or "",
            child_tone=as_text(child_rules.get("tone")),
            child_skip_systems=frozenset(
                split_list(child_rules.get("skip_systems") or child_rules.get("skipSystems"))
            ),
            missing_birth=as_text(fallbacks.get("missing_birth") or fallbacks.get("missingBirth")),
            upgrade_note=as_text(data.get("upgrade_note") or data.get("upgradeNote")),
            helper_agents=tuple(text for text in (as_text(value) for value in helpers) if text),
        )

    def active_systems(self, cohort: Cohort | None) -> list[SoulSystem]:
        if cohort is not Cohort.CHILD:
            return list(self.systems)
        return [system for system in self.systems if system.id not in self.child_skip_systems]

    def magic_code_legend(self) -> str:
        return "; ".join(f"{code.symbol} {code.label}: {code.meaning}" for code in self.magic_codes)


def load_advanced_expansion(path: str | Path | None = None) -> AdvancedExpansion | None:
    """Read the expansion settings; None when no file is configured or it cannot be read."""
    path = path or os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return None
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Unable to load advanced expansion settings", path=str(path), error=str(exc))
        return None
    if not isinstance(data, dict):
        logger.warning("Advanced expansion settings are not an object", path=str(path))
        return None
    return AdvancedExpansion.from_dict(data)


def missing_birth_fields(intake: OrderIntake) -> list[str]:
    birth = intake.birth
    fields = [("birth date", birth.date), ("birth time", birth.time), ("birth location", birth.location)]
    return [label for label, value in fields if not value]


def _missing_birth_line(intake: OrderIntake, note: str | None) -> str | None:
    missing = missing_birth_fields(intake)
    if not missing:
        return None
    return f"Missing data awareness ({', '.join(missing)}): {note or DEFAULT_MISSING_BIRTH}"


def build_advanced_directives(intake: OrderIntake, expansion: AdvancedExpansion | None) -> list[str]:
    """Directive lines appended to a full-tier prompt."""
    if expansion is None or not expansion.systems:
        lines = [FALLBACK_DIRECTIVE]
        missing = _missing_birth_line(intake, None)
        if missing:
            lines.append(missing)
        return lines

    cohort = intake.cohort
    lines = [
        "Advanced Soul Systems directives:",
        f'When you reach the "{expansion.title}" expansion immediately after the Destiny Matrix + Gene Keys '
        f"section, weave in the following directives without creating a list in the final copy. "
        f"{expansion.introduction}".rstrip(),
    ]
    if expansion.mediumship_style:
        lines.append(f"Mediumship tone: {expansion.mediumship_style}")
    if expansion.rhythm_integration:
        lines.append(f"Rhythm weaving: {expansion.rhythm_integration}")
    if expansion.evidential_examples:
        lines.append(f"Sensory evidence you can cite: {', '.join(expansion.evidential_examples)}.")
    if cohort is Cohort.CHILD and expansion.child_tone:
        lines.append(f"Child-friendly reminder: {expansion.child_tone}")

    lines.append("Modality prompts to blend together:")
    lines.extend(f"{system.label}: {system.describe(cohort)}" for system in expansion.active_systems(cohort))
    lines.append(
        "Show how each modality fortifies their aura color, chakra care, magnet routines, "
        "household rhythms, and psychic development path."
    )
    if expansion.callout_heading:
        callout = f'Close the section with a callout titled "{expansion.callout_heading}". {expansion.callout_instructions}'
        lines.append(callout.rstrip())
    magic_codes = f'Add a dedicated "{expansion.magic_codes_title}" page. {expansion.magic_codes_intro}'.rstrip()
    if expansion.magic_codes:
        magic_codes += f" Use the icons {expansion.magic_code_legend()}."
    lines.append(magic_codes)
    if expansion.upgrade_note:
        lines.append(expansion.upgrade_note)
    if expansion.helper_agents:
        helpers = "; ".join(expansion.helper_agents)
        lines.append(f"If layers feel complex, note that helper agents are available ({helpers}).")

    missing = _missing_birth_line(intake, expansion.missing_birth)
    if missing:
        lines.append(missing)
    lines.append(
        "Note that these advanced modalities are bundled into the Full Soul Blueprint now, "
        "with the option to request them later as standalone upgrades."
    )
    lines.append("Vary your language so none of the modality summaries repeat verbatim.")
    return lines
