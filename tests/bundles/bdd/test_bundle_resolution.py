"""BDD tests for bundle plan resolution."""

from audience.profiler import build_personalization_context
from bundles.generation.fake_adapter import FakeBundleGenerator
from bundles.resolver import resolve_bundle_plan
from intake.normalization import normalize_intake
from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/bundle_resolution.feature")


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('an intake with household type "{household}" and focus "{focus}"'),
    target_fixture="form",
)
def household_intake(household, focus):
    return {"email": "plan@example.com", "household_type": household, "focus": focus}


@given(parsers.cfparse('an intake with focus "{focus}"'), target_fixture="form")
def focus_intake(focus):
    return {"email": "plan@example.com", "focus": focus}


@given(parsers.cfparse('the family name is "{family_name}"'), target_fixture="form")
def with_family_name(form, family_name):
    return {**form, "family_name": family_name}


@given(parsers.cfparse('the customer selected the bundle "{bundle_id}"'), target_fixture="form")
def with_selected_bundle(form, bundle_id):
    return {**form, "selected_bundles": bundle_id}


@given("no bundle generator is available", target_fixture="generator")
def no_generator():
    return None


@given("a bundle generator is available", target_fixture="generator")
def fake_generator():
    return FakeBundleGenerator()


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the bundle plan is resolved", target_fixture="plan")
def resolve_plan(form, generator, catalog):
    intake = normalize_intake(form, send_followup=False)
    context = build_personalization_context(intake)
    return resolve_bundle_plan(intake, context, catalog, generator)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the plan source is "{source}"'))
def plan_source(plan, source):
    assert plan.source.value == source


@then(parsers.cfparse('the bundle category is "{category}"'))
def bundle_category(plan, category):
    assert plan.bundle.category == category


@then(parsers.cfparse('the bundle id is "{bundle_id}"'))
def bundle_id(plan, bundle_id):
    assert plan.bundle.id == bundle_id


@then(parsers.cfparse("the plan has at least {count:d} icon requests"))
def request_count(plan, count):
    assert len(plan.requests) >= count


@then(parsers.cfparse('the helper tasks include "{name}"'))
def helper_included(plan, name):
    assert name in [helper.name for helper in plan.helpers]


@then(parsers.cfparse('at least one icon label contains "{text}"'))
def label_contains(plan, text):
    assert any(text in request.label.lower() for request in plan.requests)


@then("the generated bundle is kept in the catalog")
def generated_kept(plan, catalog):
    assert [template.id for template in catalog.runtime] == [plan.bundle.id]
