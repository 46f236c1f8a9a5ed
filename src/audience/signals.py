"""Persona signals read from intake preferences.

Persona tags, focus keywords, preferred output format and category are
the inputs both the profiler and the bundle resolver score against.
"""

import re

from intake.intake import Cohort, OrderIntake, Tier
from shared.text import as_text, read_field, split_list, unique

KEYWORD_FIELDS = ("focus", "themes", "routine_keywords", "magnet_keywords", "support_needs", "daily_blocks", "goals")
HOUSEHOLD_FIELDS = ("household", "household_type", "family_structure", "family")
SUPPORT_FIELDS = ("diagnosis", "support_needs", "child_needs")
FOCUS_FIELDS = ("focus", "themes", "primary_need")
FORMAT_FIELDS = ("format", "magnet_format", "preferred_format", "output_style")
CATEGORY_FIELDS = ("bundle_category", "category", "preferred_category")

REPETITION_TAGS = frozenset({"adhd support", "neurodivergent child", "sensory"})
CUTTABLE_FORMATS = frozenset({"svg", "svg-sheet", "vinyl", "cling"})

_KEYWORD_SPLIT_RE = re.compile(r"[,\n+&]+")

_HOUSEHOLD_TAGS = (
    (re.compile(r"solo|single"), "solo mom"),
    (re.compile(r"family|household"), "family"),
    (re.compile(r"homeschool"), "homeschool"),
    (re.compile(r"partner"), "partner"),
    (re.compile(r"elder"), "elder support"),
)
_SUPPORT_TAGS = (
    (re.compile(r"adhd"), "adhd support"),
    (re.compile(r"autis|\basd\b|neuro"), "neurodivergent child"),
    (re.compile(r"sensory"), "sensory"),
)
_FOCUS_TAGS = (
    (re.compile(r"wellness|regulation"), "wellness"),
    (re.compile(r"deep|premium"), "premium"),
    (re.compile(r"\bfull\b"), "full"),
)
_FORMATS = (
    (re.compile(r"print"), "printable"),
    (re.compile(r"vinyl|whiteboard"), "vinyl"),
    (re.compile(r"cling"), "cling"),
    (re.compile(r"svg"), "svg"),
    (re.compile(r"digital"), "digital"),
)


def _text(intake: OrderIntake, fields: tuple[str, ...]) -> str:
    return " ".join(as_text(intake.prefs.get(name)) or "" for name in fields).strip().lower()


def detect_persona_tags(intake: OrderIntake) -> tuple[str, ...]:
    tags: list[str] = []
    for fields, table in ((HOUSEHOLD_FIELDS, _HOUSEHOLD_TAGS), (SUPPORT_FIELDS, _SUPPORT_TAGS), (FOCUS_FIELDS, _FOCUS_TAGS)):
        text = _text(intake, fields)
        tags.extend(tag for pattern, tag in table if text and pattern.search(text))

    format_text = _text(intake, FORMAT_FIELDS)
    if "cling" in format_text or "vinyl" in format_text:
        tags.append("household")
    if intake.tier is Tier.FULL:
        tags.extend(["premium", "full"])
    if intake.cohort is Cohort.CHILD:
        tags.append("toddler")
    return tuple(unique(tags))


def collect_keywords(intake: OrderIntake) -> tuple[str, ...]:
    keywords: list[str] = []
    for field_name in KEYWORD_FIELDS:
        for entry in split_list(intake.prefs.get(field_name)):
            keywords.extend(part.strip().lower() for part in _KEYWORD_SPLIT_RE.split(entry) if part.strip())
    return tuple(unique(keywords))


def resolve_preferred_format(intake: OrderIntake) -> str:
    text = _text(intake, FORMAT_FIELDS)
    for pattern, fmt in _FORMATS:
        if text and pattern.search(text):
            return fmt
    return "svg"


def resolve_preferred_category(intake: OrderIntake, tags: tuple[str, ...], keywords: tuple[str, ...]) -> str | None:
    explicit = read_field([intake.prefs], *CATEGORY_FIELDS)
    if explicit:
        return explicit
    if "wellness" in tags or any("regulation" in keyword for keyword in keywords):
        return "Wellness"
    if "family" in tags or "homeschool" in tags:
        return "Family"
    if "premium" in tags:
        return "Complete All-in-One"
    return None


def resolve_family_name(intake: OrderIntake) -> str | None:
    return read_field([intake.prefs], "family_name", "last_name", "household_name") or intake.customer.last_name


def resolve_child_name(intake: OrderIntake) -> str | None:
    return read_field([intake.prefs], "child_name", "kid_name", "recipient_name")


def resolve_selected_bundles(intake: OrderIntake) -> tuple[str, ...]:
    return tuple(split_list(intake.prefs.get("selected_bundles") or intake.prefs.get("bundle_selection")))


def resolve_tone(intake: OrderIntake) -> str | None:
    return as_text(intake.prefs.get("tone"))
