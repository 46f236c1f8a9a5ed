"""Tests for the audience profiler — names, cohorts, style levels and flags."""

import pytest
from audience.profile import PersonaOverride, StyleLevel
from audience.profiler import (
    PLACEHOLDER_NAME,
    build_audience_profiles,
    build_personalization_context,
    collect_audience_names,
)
from intake.intake import Cohort, CustomerProfile, OrderIntake, Tier


def _intake(prefs=None, first_name=None, household=(), cohort=None, tier=Tier.LITE):
    return OrderIntake(
        email="family@example.com",
        tier=tier,
        customer=CustomerProfile(first_name=first_name, household=tuple(household)),
        prefs=prefs or {},
        cohort=cohort,
    )


class TestAudienceNames:
    def test_placeholder_when_no_names(self):
        assert collect_audience_names(_intake()) == [PLACEHOLDER_NAME]

    def test_priority_order_and_dedup(self):
        intake = _intake(
            prefs={
                "child_name": "Leo",
                "audience_names": "Grandma Rose, maya",
                "profile": {"name": "Nia"},
            },
            first_name="Maya",
            household=["Sam", "leo"],
        )
        assert collect_audience_names(intake) == ["Maya", "Leo", "Sam", "Grandma Rose", "Nia"]

    def test_at_least_one_profile(self):
        profiles = build_audience_profiles(_intake())
        assert len(profiles) == 1
        assert profiles[0].name == PLACEHOLDER_NAME


class TestStyleDerivation:
    def test_standard_adult_defaults(self):
        profile = build_audience_profiles(_intake(first_name="Maya"))[0]
        assert profile.cohort == Cohort.ADULT
        assert profile.style_level == StyleLevel.STANDARD
        assert profile.icon_size == 0.95
        assert not profile.simplify_text
        assert not profile.high_contrast
        assert not profile.needs_repetition
        assert not profile.emphasize_categories
        assert profile.version == 1

    def test_child_cohort_is_kid_friendly(self):
        profile = build_audience_profiles(_intake(cohort=Cohort.CHILD))[0]
        assert profile.style_level == StyleLevel.KID_FRIENDLY
        assert profile.icon_size == 1.25
        assert profile.simplify_text
        assert not profile.high_contrast

    def test_elder_support_tag_forces_elder(self):
        profile = build_audience_profiles(_intake(prefs={"household_type": "Caring for an elder parent"}))[0]
        assert profile.cohort == Cohort.ELDER
        assert profile.style_level == StyleLevel.ELDER_ACCESSIBLE
        assert profile.icon_size == 1.25
        assert profile.simplify_text
        assert profile.high_contrast

    def test_focus_keywords_elder_wins_over_child(self):
        profile = build_audience_profiles(_intake(prefs={"focus": "kid chores, grandparent visits"}))[0]
        assert profile.cohort == Cohort.ELDER

    def test_focus_keyword_child(self):
        profile = build_audience_profiles(_intake(prefs={"focus": "kid chores"}))[0]
        assert profile.cohort == Cohort.CHILD
        assert profile.style_level == StyleLevel.KID_FRIENDLY

    def test_support_tag_couples_repetition_and_categories(self):
        profile = build_audience_profiles(_intake(prefs={"support_needs": "ADHD"}))[0]
        assert profile.style_level == StyleLevel.STANDARD
        assert profile.needs_repetition
        assert profile.emphasize_categories

    def test_explicit_style_for_adults(self):
        profile = build_audience_profiles(_intake(prefs={"style_level": "neurodivergent support"}))[0]
        assert profile.style_level == StyleLevel.NEURODIVERGENT_SUPPORT
        assert profile.icon_size == 1.1
        assert profile.needs_repetition
        assert profile.emphasize_categories

    def test_explicit_style_does_not_override_child_cohort(self):
        profile = build_audience_profiles(_intake(cohort=Cohort.CHILD, prefs={"style_level": "elder"}))[0]
        assert profile.style_level == StyleLevel.KID_FRIENDLY

    def test_explicit_icon_size(self):
        profile = build_audience_profiles(_intake(prefs={"icon_size": "1.5in"}))[0]
        assert profile.icon_size == 1.5


class TestOverrides:
    def test_preference_override_per_person(self):
        intake = _intake(
            first_name="Maya",
            household=["Rio"],
            prefs={"audience_overrides": {"rio": {"cohort": "child", "version": 3}}},
        )
        maya, rio = build_audience_profiles(intake)
        assert maya.cohort == Cohort.ADULT
        assert rio.cohort == Cohort.CHILD
        assert rio.style_level == StyleLevel.KID_FRIENDLY
        assert rio.version == 3

    def test_configured_override(self):
        overrides = {"Maya": PersonaOverride(style_level=StyleLevel.ELDER_ACCESSIBLE, icon_size=1.4)}
        profile = build_audience_profiles(_intake(first_name="Maya"), overrides)[0]
        assert profile.style_level == StyleLevel.ELDER_ACCESSIBLE
        assert profile.icon_size == 1.4

    def test_preference_override_beats_configured(self):
        intake = _intake(first_name="Maya", prefs={"audience_overrides": {"Maya": {"cohort": "elder"}}})
        overrides = {"maya": PersonaOverride(cohort=Cohort.CHILD)}
        profile = build_audience_profiles(intake, overrides)[0]
        assert profile.cohort == Cohort.ELDER

    def test_profile_versions(self):
        intake = _intake(first_name="Maya", household=["Rio"], prefs={"profile_versions": {"Maya": "2", "rio": "x"}})
        maya, rio = build_audience_profiles(intake)
        assert maya.version == 2
        assert rio.version == 1

    @pytest.mark.parametrize("version", ["v2", [2], {"n": 2}, float("inf")])
    def test_non_numeric_override_version_is_ignored(self, version):
        intake = _intake(
            first_name="Ana",
            prefs={"audience_overrides": {"Ana": {"cohort": "child", "version": version}}},
        )
        context = build_personalization_context(intake)
        profile = context.audiences[0]
        assert profile.cohort == Cohort.CHILD
        assert profile.version == 1


class TestPersonalizationContext:
    def test_primary_profile_flattens(self):
        context = build_personalization_context(_intake(first_name="Maya", household=["Rio"], cohort=Cohort.ELDER))
        assert context.primary_name == "Maya"
        assert context.style_level == StyleLevel.ELDER_ACCESSIBLE
        assert context.icon_size == 1.25
        assert len(context.audiences) == 2

    @pytest.mark.parametrize(
        "prefs, expected_format",
        [
            ({}, "svg"),
            ({"format": "Printable sheets"}, "printable"),
            ({"magnet_format": "whiteboard vinyl"}, "vinyl"),
            ({"preferred_format": "window cling"}, "cling"),
        ],
    )
    def test_preferred_format(self, prefs, expected_format):
        assert build_personalization_context(_intake(prefs=prefs)).preferred_format == expected_format

    def test_vinyl_marks_household(self):
        context = build_personalization_context(_intake(prefs={"format": "vinyl"}))
        assert "household" in context.persona_tags

    def test_preferred_category_resolution(self):
        assert build_personalization_context(_intake(prefs={"category": "Kids"})).preferred_category == "Kids"
        assert build_personalization_context(_intake(prefs={"focus": "regulation"})).preferred_category == "Wellness"
        assert (
            build_personalization_context(_intake(prefs={"household_type": "homeschool"})).preferred_category
            == "Family"
        )
        assert build_personalization_context(_intake(tier=Tier.FULL)).preferred_category == "Complete All-in-One"
        assert build_personalization_context(_intake()).preferred_category is None

    def test_persona_tags_from_tier_and_cohort(self):
        context = build_personalization_context(_intake(tier=Tier.FULL, cohort=Cohort.CHILD))
        assert {"premium", "full", "toddler"} <= set(context.persona_tags)

    def test_keywords_split_on_plus_and_ampersand(self):
        context = build_personalization_context(_intake(prefs={"focus": "Play + Morning basket & chores"}))
        assert context.keywords == ("play", "morning basket", "chores")

    def test_placeholder_values(self):
        context = build_personalization_context(
            _intake(first_name="Maya", prefs={"family_name": "Garcia", "child_name": "Leo"})
        )
        assert context.placeholder_values() == {
            "name": "Maya",
            "primary_name": "Maya",
            "family_name": "Garcia",
            "child_name": "Leo",
        }

    def test_style_level_from_text(self):
        assert StyleLevel.from_text("Kid friendly") == StyleLevel.KID_FRIENDLY
        assert StyleLevel.from_text("accessible") == StyleLevel.ELDER_ACCESSIBLE
        assert StyleLevel.from_text("sensory") == StyleLevel.NEURODIVERGENT_SUPPORT
        assert StyleLevel.from_text("fancy") is None
