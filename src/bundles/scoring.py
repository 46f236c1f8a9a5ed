"""Template scoring and the meaningfulness gate.

Every candidate template is scored additively against the personalization
context:

    category matches preferred category         +6
    supports the preferred output format         +1
    each matching persona tag                    +2
    each exact keyword overlap                   +1
    style level equal to the context's           +2
    style level set but different                -1
    icon size within 0.05in                      +2  (size aligned)
    icon size within 0.15in                      +1  (size aligned)
    icon size more than 0.3in away               -1
    repetition needed and neurodivergent style   +1

A template with no persona-tag or keyword hits is a style-only match. It
is rejected when the context style is standard, and otherwise accepted
only if style, format and size all line up.
"""

from dataclasses import dataclass

from audience.profile import PersonalizationContext, StyleLevel
from bundles.template import BundleTemplate

MINIMUM_STORED_SCORE = 4


@dataclass(frozen=True)
class ScoreBreakdown:
    total: int = 0
    category_matched: bool = False
    format_matched: bool = False
    tag_hits: int = 0
    keyword_hits: int = 0
    style_matched: bool = False
    size_aligned: bool = False

    @property
    def style_only(self) -> bool:
        return self.tag_hits == 0 and self.keyword_hits == 0

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "category_matched": self.category_matched,
            "format_matched": self.format_matched,
            "tag_hits": self.tag_hits,
            "keyword_hits": self.keyword_hits,
            "style_matched": self.style_matched,
            "size_aligned": self.size_aligned,
        }


def score_template(template: BundleTemplate, context: PersonalizationContext) -> ScoreBreakdown:
    total = 0

    category_matched = bool(
        context.preferred_category and template.category.lower() == context.preferred_category.lower()
    )
    if category_matched:
        total += 6

    format_matched = context.preferred_format in template.formats
    if format_matched:
        total += 1

    template_tags = {tag.lower() for tag in template.persona_tags}
    tag_hits = sum(1 for tag in context.persona_tags if tag.lower() in template_tags)
    total += 2 * tag_hits

    template_keywords = {keyword.lower() for keyword in template.keywords}
    keyword_hits = sum(1 for keyword in context.keywords if keyword.lower() in template_keywords)
    total += keyword_hits

    style_matched = False
    if template.style_level is not None:
        if template.style_level is context.style_level:
            style_matched = True
            total += 2
        else:
            total -= 1

    size_aligned = False
    if template.icon_size is not None:
        difference = abs(template.icon_size - context.icon_size)
        if difference < 0.05:
            size_aligned = True
            total += 2
        elif difference < 0.15:
            size_aligned = True
            total += 1
        elif difference > 0.3:
            total -= 1

    if context.needs_repetition and template.style_level is StyleLevel.NEURODIVERGENT_SUPPORT:
        total += 1

    return ScoreBreakdown(
        total=total,
        category_matched=category_matched,
        format_matched=format_matched,
        tag_hits=tag_hits,
        keyword_hits=keyword_hits,
        style_matched=style_matched,
        size_aligned=size_aligned,
    )


def is_meaningful(breakdown: ScoreBreakdown, context: PersonalizationContext) -> bool:
    """Return True when a stored match is grounded in the order, not just in styling."""
    if not breakdown.style_only:
        return True
    if context.style_level is StyleLevel.STANDARD:
        return False
    return breakdown.style_matched and breakdown.format_matched and breakdown.size_aligned


def pick_best(
    templates: list[BundleTemplate],
    context: PersonalizationContext,
) -> tuple[BundleTemplate, ScoreBreakdown] | None:
    """Highest total wins; ties keep the first template encountered."""
    best: tuple[BundleTemplate, ScoreBreakdown] | None = None
    for template in templates:
        breakdown = score_template(template, context)
        if best is None or breakdown.total > best[1].total:
            best = (template, breakdown)
    return best
