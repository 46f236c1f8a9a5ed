"""Per-icon personalization pass.

Each icon of the chosen bundle goes through, in order:
    label templates, text simplification, name substitution,
    high-contrast note, category descriptor, repeat cue,
    tone coercion and the style tag.
Icons whose declared ages exclude the audience cohort are dropped.
"""

import re
from dataclasses import dataclass

from audience.profile import PersonalizationContext, StyleLevel
from bundles.template import BundleIcon, BundleTemplate
from shared.text import collapse_whitespace, unique

HIGH_CONTRAST_NOTE = "Use a bold, high-contrast outline."
REPEAT_CUE = "Repeat this cue at the same time each day."
MAX_SIMPLE_LABEL_WORDS = 2
MAX_SIMPLE_DESCRIPTION_WORDS = 16

_CHILD_TOKEN_RE = re.compile(r"\b(child|kid|toddler)\b", re.IGNORECASE)
_FAMILY_TOKEN_RE = re.compile(r"\b(family|household)\b", re.IGNORECASE)
_FAMILY_LABEL_RE = re.compile(r"\b(family|household|circle)\b", re.IGNORECASE)
_SENTENCE_END_RE = re.compile(r"(?<=[.!?])\s+")

_TONE_ALIASES = {"earth": "earthy", "bold": "bright"}


@dataclass(frozen=True)
class IconRequest:
    slug: str
    label: str
    description: str
    tags: tuple[str, ...]
    tone: str
    category: str
    icon_size: float
    style_level: str
    audience: str
    high_contrast: bool = False

    def to_dict(self) -> dict:
        return {
            "slug": self.slug,
            "label": self.label,
            "description": self.description,
            "tags": list(self.tags),
            "tone": self.tone,
            "category": self.category,
            "icon_size": self.icon_size,
            "style_level": self.style_level,
            "audience": self.audience,
            "high_contrast": self.high_contrast,
        }


def apply_label_templates(icon: BundleIcon, context: PersonalizationContext) -> str:
    values = context.placeholder_values()
    for key, pattern in icon.templates.items():
        if key in values and "{value}" in pattern:
            return pattern.replace("{value}", values[key])
    return icon.label


def simplify_label(label: str) -> str:
    return " ".join(label.split()[:MAX_SIMPLE_LABEL_WORDS])


def simplify_description(description: str) -> str:
    first_sentence = _SENTENCE_END_RE.split(collapse_whitespace(description), maxsplit=1)[0]
    words = first_sentence.split()
    if len(words) <= MAX_SIMPLE_DESCRIPTION_WORDS:
        return first_sentence
    return " ".join(words[:MAX_SIMPLE_DESCRIPTION_WORDS]).rstrip(",;:") + "."


def substitute_names(label: str, context: PersonalizationContext) -> str:
    if context.child_name:
        label = _CHILD_TOKEN_RE.sub(context.child_name, label)

    family_name = context.family_name
    if not family_name or family_name.lower() in label.lower():
        return label
    if _FAMILY_LABEL_RE.search(label):
        remainder = collapse_whitespace(_FAMILY_TOKEN_RE.sub("", label))
        return f"{family_name} {remainder}".strip()
    if "solo mom" in context.persona_tags or "family" in context.persona_tags:
        return f"{family_name} {label}"
    return label


def _append_sentence(description: str, sentence: str) -> str:
    if sentence in description:
        return description
    return f"{description} {sentence}".strip()


def coerce_tone(tone: str | None, context: PersonalizationContext) -> str:
    tone = (tone or context.tone or "soft").lower()
    tone = _TONE_ALIASES.get(tone, tone)
    if context.style_level is StyleLevel.KID_FRIENDLY:
        return "bright"
    if context.style_level is StyleLevel.ELDER_ACCESSIBLE and tone == "bright":
        return "soft"
    return tone


def suits_cohort(icon: BundleIcon, context: PersonalizationContext) -> bool:
    return not icon.ages or context.cohort.value in icon.ages


def personalize_icon(icon: BundleIcon, template: BundleTemplate, context: PersonalizationContext) -> IconRequest:
    label = apply_label_templates(icon, context)
    description = icon.description or template.description
    if context.simplify_text:
        label = simplify_label(label)
        description = simplify_description(description)
    label = substitute_names(label, context)

    category = icon.section or template.category
    tags = list(icon.tags)
    if context.high_contrast:
        description = _append_sentence(description, HIGH_CONTRAST_NOTE)
    if context.emphasize_categories and not description.startswith(f"{category}:"):
        description = f"{category}: {description}"
    if context.needs_repetition:
        description = _append_sentence(description, REPEAT_CUE)
        tags.append("repeat-cue")
    tags.append(f"style:{context.style_level.value}")

    return IconRequest(
        slug=icon.slug,
        label=label,
        description=description,
        tags=tuple(unique(tags)),
        tone=coerce_tone(icon.tone, context),
        category=category,
        icon_size=context.icon_size,
        style_level=context.style_level.value,
        audience=context.primary_name,
        high_contrast=context.high_contrast,
    )


def personalize_bundle(template: BundleTemplate, context: PersonalizationContext) -> list[IconRequest]:
    return [personalize_icon(icon, template, context) for icon in template.icons if suits_cohort(icon, context)]
