"""Bundle synthesis — asks the structured generator for a custom bundle.

Synthesis is best-effort: any error, empty answer or malformed record is
logged and reported as "no bundle", and the resolver carries on.
"""

import json

import structlog

from audience.profile import PersonalizationContext
from bundles.template import BundleIcon, BundleTemplate
from intake.intake import OrderIntake
from shared.text import as_text, slugify, split_list, unique

logger = structlog.get_logger(__name__)

SYSTEM_PROMPT = (
    "You are the icon librarian for a family rhythm studio. You design small, "
    "printable icon bundles that help households keep daily, weekly and seasonal "
    "routines. Answer with a single JSON object and nothing else."
)

RESPONSE_INSTRUCTIONS = (
    "Design one bundle for the household summarized above. Return JSON shaped as "
    '{"name": str, "category": str, "description": str, "keywords": [str], '
    '"icons": [{"slug": str, "label": str, "description": str, "tags": [str], "tone": str}]}. '
    "Use between 4 and 10 icons with labels of at most three words."
)


def build_request_summary(intake: OrderIntake, context: PersonalizationContext) -> dict:
    return {
        "tier": intake.tier.value,
        "persona_tags": list(context.persona_tags),
        "keywords": list(context.keywords),
        "format": context.preferred_format,
        "category": context.preferred_category,
        "cohort": context.cohort.value,
        "style_level": context.style_level.value,
        "icon_size": context.icon_size,
    }


def build_prompts(intake: OrderIntake, context: PersonalizationContext) -> tuple[str, str]:
    user_prompt = json.dumps(build_request_summary(intake, context)) + "\n" + RESPONSE_INSTRUCTIONS
    return SYSTEM_PROMPT, user_prompt


def parse_generated_bundle(record, context: PersonalizationContext) -> BundleTemplate | None:
    """Turn a generator record into a template, or None when it is unusable."""
    if not isinstance(record, dict) or not isinstance(record.get("icons"), list):
        return None
    icons = tuple(
        BundleIcon.from_dict(icon)
        for icon in record["icons"]
        if isinstance(icon, dict) and as_text(icon.get("label"))
    )
    if not icons:
        return None

    name = as_text(record.get("name")) or "Custom Rhythm Bundle"
    return BundleTemplate(
        id=f"generated-{slugify(name, 'bundle')}",
        name=name,
        category=as_text(record.get("category")) or context.preferred_category or "Household",
        description=as_text(record.get("description")) or "",
        formats=tuple(unique([context.preferred_format, "svg", "digital"])),
        persona_tags=tuple(context.persona_tags),
        keywords=tuple(keyword.lower() for keyword in split_list(record.get("keywords")) or context.keywords),
        icons=icons,
        style_level=context.style_level,
        icon_size=context.icon_size,
    )


def synthesize_bundle(generator, intake: OrderIntake, context: PersonalizationContext) -> BundleTemplate | None:
    if generator is None:
        return None
    system_prompt, user_prompt = build_prompts(intake, context)
    try:
        record = generator.generate(system_prompt, user_prompt)
        template = parse_generated_bundle(record, context)
    except Exception as exc:
        logger.warning("Bundle generation failed", error=str(exc))
        return None

    if template is None:
        logger.warning("Bundle generator returned no usable icons")
    return template
