"""Bundle plan resolver — chooses and personalizes the icon bundle for an order.

Decision (``decide_bundle``):
    1. Explicitly selected bundles win (one -> that template, several -> merged).
    2. Otherwise the best-scoring stored template, if it scores at least 4
       and passes the meaningfulness gate.
    3. Otherwise a synthesized bundle from the structured generator, which
       is appended to the runtime catalog.
    4. Otherwise the deterministic fallback bundle.

``resolve_bundle_plan`` then personalizes every icon. If cohort filtering
removes every icon of a non-fallback bundle, the fallback bundle is
substituted, so a plan always carries icon requests.
"""

from dataclasses import dataclass, field

import structlog

from audience.profile import PersonalizationContext
from audience.signals import CUTTABLE_FORMATS
from bundles.catalog import CatalogStore
from bundles.fallback import build_fallback_bundle
from bundles.personalization import IconRequest, personalize_bundle
from bundles.scoring import MINIMUM_STORED_SCORE, ScoreBreakdown, is_meaningful, pick_best
from bundles.synthesis import synthesize_bundle
from bundles.template import BundleSource, BundleTemplate
from intake.intake import FulfillmentType, OrderIntake
from shared.text import unique

logger = structlog.get_logger(__name__)

GENERATED_SCORE = 10
FALLBACK_SCORE = 5
SELECTED_SCORE = 80
MERGED_SCORE = 100


# ---------------------------------------------------------------------------
# Decision variants
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class StoredBundle:
    template: BundleTemplate
    score: int
    breakdown: ScoreBreakdown | None = None
    merged_from: tuple[str, ...] = ()
    source: BundleSource = field(default=BundleSource.STORED, init=False)


@dataclass(frozen=True)
class GeneratedBundle:
    template: BundleTemplate
    score: int = GENERATED_SCORE
    source: BundleSource = field(default=BundleSource.GENERATED, init=False)


@dataclass(frozen=True)
class FallbackBundle:
    template: BundleTemplate
    score: int = FALLBACK_SCORE
    source: BundleSource = field(default=BundleSource.FALLBACK, init=False)


BundleDecision = StoredBundle | GeneratedBundle | FallbackBundle


@dataclass(frozen=True)
class HelperTask:
    name: str
    instructions: str
    payload: dict

    def to_dict(self) -> dict:
        return {"name": self.name, "instructions": self.instructions, "payload": dict(self.payload)}


@dataclass(frozen=True)
class BundlePlan:
    bundle: BundleTemplate
    source: BundleSource
    score: int
    requests: tuple[IconRequest, ...]
    helpers: tuple[HelperTask, ...]
    format: str
    context: PersonalizationContext
    breakdown: ScoreBreakdown | None = None
    merged_from: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Decision
# ---------------------------------------------------------------------------
def merge_templates(templates: list[BundleTemplate]) -> BundleTemplate:
    icons = {}
    for template in templates:
        for icon in template.icons:
            icons.setdefault(icon.slug, icon)
    return BundleTemplate(
        id="merged-" + "-".join(template.id for template in templates),
        name=" + ".join(template.name for template in templates),
        category=templates[0].category,
        description=" ".join(template.description for template in templates if template.description),
        formats=tuple(unique(fmt for template in templates for fmt in template.formats)),
        persona_tags=tuple(unique(tag for template in templates for tag in template.persona_tags)),
        keywords=tuple(unique(keyword for template in templates for keyword in template.keywords)),
        icons=tuple(icons.values()),
        style_level=templates[0].style_level,
        icon_size=templates[0].icon_size,
    )


def _selected_bundle(context: PersonalizationContext, catalog: CatalogStore) -> StoredBundle | None:
    found: list[BundleTemplate] = []
    for reference in context.selected_bundles:
        template = catalog.find(reference)
        if template is None:
            logger.warning("Selected bundle not in catalog", reference=reference)
        elif template not in found:
            found.append(template)
    if not found:
        return None
    if len(found) == 1:
        return StoredBundle(template=found[0], score=SELECTED_SCORE)
    return StoredBundle(
        template=merge_templates(found),
        score=MERGED_SCORE,
        merged_from=tuple(template.id for template in found),
    )


def _persist_generated(template: BundleTemplate, catalog: CatalogStore) -> None:
    try:
        catalog.add(template)
    except Exception as exc:
        logger.warning("Could not persist generated bundle", template_id=template.id, error=str(exc))


def decide_bundle(
    intake: OrderIntake,
    context: PersonalizationContext,
    catalog: CatalogStore,
    generator=None,
) -> BundleDecision:
    selected = _selected_bundle(context, catalog)
    if selected is not None:
        return selected

    best = pick_best(catalog.templates(), context)
    if best is not None:
        template, breakdown = best
        if breakdown.total >= MINIMUM_STORED_SCORE and is_meaningful(breakdown, context):
            return StoredBundle(template=template, score=breakdown.total, breakdown=breakdown)
        logger.info(
            "Stored bundle rejected",
            template_id=template.id,
            score=breakdown.total,
            style_only=breakdown.style_only,
        )

    generated = synthesize_bundle(generator, intake, context)
    if generated is not None:
        _persist_generated(generated, catalog)
        return GeneratedBundle(template=generated)

    return FallbackBundle(template=build_fallback_bundle(intake, context))


# ---------------------------------------------------------------------------
# Plan
# ---------------------------------------------------------------------------
def resolve_output_format(intake: OrderIntake, context: PersonalizationContext) -> str:
    if intake.fulfillment_type is FulfillmentType.CRICUT_READY and context.preferred_format in {"svg", "digital"}:
        return "svg-sheet"
    return context.preferred_format


def build_helper_tasks(
    bundle: BundleTemplate,
    requests: list[IconRequest],
    context: PersonalizationContext,
    output_format: str,
) -> tuple[HelperTask, ...]:
    focus = list(context.persona_tags) or list(context.keywords) or [bundle.category.lower()]
    sorter = HelperTask(
        name="bundle-sorter",
        instructions=f"Tag {len(requests)} icons for {bundle.name} with persona keywords: {', '.join(focus)}",
        payload={"icons": [request.slug for request in requests], "tags": focus},
    )
    if output_format in CUTTABLE_FORMATS:
        formatter = HelperTask(
            name="icon-formatter",
            instructions="Prepare Cricut-ready SVG sheet (12x12) with bleed-safe margins and 0.125in spacing",
            payload={"layout": "cut-sheet", "format": output_format, "icon_size": context.icon_size},
        )
    else:
        formatter = HelperTask(
            name="icon-formatter",
            instructions="Lay out icons on US Letter and A4 printable sheets with crop marks",
            payload={"layout": "printable-sheet", "format": output_format, "icon_size": context.icon_size},
        )
    return (sorter, formatter)


def resolve_bundle_plan(
    intake: OrderIntake,
    context: PersonalizationContext,
    catalog: CatalogStore,
    generator=None,
) -> BundlePlan:
    decision = decide_bundle(intake, context, catalog, generator)
    requests = personalize_bundle(decision.template, context)

    if not requests and not isinstance(decision, FallbackBundle):
        logger.warning(
            "Personalization removed every icon, substituting fallback bundle",
            template_id=decision.template.id,
            cohort=context.cohort.value,
        )
        decision = FallbackBundle(template=build_fallback_bundle(intake, context))
        requests = personalize_bundle(decision.template, context)

    output_format = resolve_output_format(intake, context)
    plan = BundlePlan(
        bundle=decision.template,
        source=decision.source,
        score=decision.score,
        requests=tuple(requests),
        helpers=build_helper_tasks(decision.template, requests, context, output_format),
        format=output_format,
        context=context,
        breakdown=getattr(decision, "breakdown", None),
        merged_from=getattr(decision, "merged_from", ()),
    )
    logger.info(
        "Bundle plan resolved",
        bundle_id=plan.bundle.id,
        source=plan.source.value,
        score=plan.score,
        icons=len(plan.requests),
        format=plan.format,
    )
    return plan
