import pytest
from audience.profile import STYLE_TEXT_FLAGS, AudienceProfile, PersonalizationContext, StyleLevel
from bundles.catalog import CatalogStore
from intake.intake import Cohort


@pytest.fixture()
def make_context():
    """Build a personalization context without going through the profiler."""

    def _make(
        style=StyleLevel.STANDARD,
        icon_size=0.95,
        cohort=Cohort.ADULT,
        tags=(),
        keywords=(),
        fmt="svg",
        category=None,
        needs_repetition=False,
        **kwargs,
    ):
        simplify_text, high_contrast = STYLE_TEXT_FLAGS[style]
        profile = AudienceProfile(
            name=kwargs.pop("name", "Primary"),
            cohort=cohort,
            style_level=style,
            icon_size=icon_size,
            simplify_text=simplify_text,
            high_contrast=high_contrast,
            needs_repetition=needs_repetition,
            emphasize_categories=needs_repetition,
        )
        return PersonalizationContext(
            audiences=(profile,),
            persona_tags=tuple(tags),
            keywords=tuple(keywords),
            preferred_format=fmt,
            preferred_category=category,
            **kwargs,
        )

    return _make


@pytest.fixture()
def catalog():
    return CatalogStore()
