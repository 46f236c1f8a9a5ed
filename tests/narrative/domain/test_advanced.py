"""Tests for the Advanced Soul Systems directives appended to full-tier prompts."""

import json

import pytest
from intake.intake import BirthData, Cohort, OrderIntake, Tier
from narrative.advanced import (
    FALLBACK_DIRECTIVE,
    AdvancedExpansion,
    build_advanced_directives,
    load_advanced_expansion,
    missing_birth_fields,
)
from narrative.prompt import build_blueprint_prompt

SETTINGS = {
    "section": {
        "title": "Advanced Soul Systems",
        "introduction": "Blend the modalities into one story.",
        "mediumshipStyle": "Gentle and evidential.",
        "evidentialExamples": ["scent of cedar", "a humming kettle"],
    },
    "systems": [
        {"id": "enneagram", "label": "Enneagram", "narrative": "Name the core type.", "childTone": "Keep it playful."},
        {"id": "akashic", "label": "Akashic Records", "narrative": "Read the soul archive."},
    ],
    "summary": {"calloutHeading": "Soul Systems at a Glance", "instructions": "Three short bullets."},
    "magicCodes": {
        "title": "Magic Codes Key",
        "intro": "A legend for the icons.",
        "icons": [{"symbol": "✶", "label": "Spark", "meaning": "start fresh"}],
    },
    "automation": {
        "childRules": {"skipSystems": ["akashic"], "tone": "Speak to a curious eight-year-old."},
        "fallbacks": {"missingBirth": "Use the intuitive bridge."},
    },
    "upgradeNote": "Standalone upgrades are available later.",
    "helperAgents": {"rhythm": "Rhythm helper", "icons": "Icon helper"},
}


@pytest.fixture
def expansion():
    return AdvancedExpansion.from_dict(SETTINGS)


def _intake(cohort=None, birth=None):
    return OrderIntake(email="maya@example.com", tier=Tier.FULL, cohort=cohort, birth=birth or BirthData())


class TestLoading:
    def test_reads_file_named_by_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "advanced.json"
        path.write_text(json.dumps(SETTINGS), encoding="utf-8")
        monkeypatch.setenv("NARRATIVE_ADVANCED_CONFIG", str(path))
        loaded = load_advanced_expansion()
        assert [system.label for system in loaded.systems] == ["Enneagram", "Akashic Records"]
        assert loaded.child_skip_systems == {"akashic"}

    def test_unset_means_no_settings(self):
        assert load_advanced_expansion() is None

    @pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
    def test_unreadable_settings_are_ignored(self, tmp_path, content):
        path = tmp_path / "advanced.json"
        path.write_text(content, encoding="utf-8")
        assert load_advanced_expansion(path) is None

    def test_missing_file_is_ignored(self, tmp_path):
        assert load_advanced_expansion(tmp_path / "absent.json") is None


class TestDirectives:
    def test_adult_directives(self, expansion):
        lines = build_advanced_directives(_intake(birth=BirthData(date="1990-04-12")), expansion)
        text = "\n".join(lines)
        assert lines[0] == "Advanced Soul Systems directives:"
        assert "Mediumship tone: Gentle and evidential." in lines
        assert "Sensory evidence you can cite: scent of cedar, a humming kettle." in lines
        assert "Enneagram: Name the core type." in lines
        assert "Akashic Records: Read the soul archive." in lines
        assert 'Close the section with a callout titled "Soul Systems at a Glance". Three short bullets.' in lines
        assert 'Add a dedicated "Magic Codes Key" page. A legend for the icons. Use the icons ✶ Spark: start fresh.' in lines
        assert "Missing data awareness (birth time, birth location): Use the intuitive bridge." in lines
        assert "Child-friendly reminder" not in text

    def test_child_tone_and_skipped_systems(self, expansion):
        lines = build_advanced_directives(_intake(cohort=Cohort.CHILD), expansion)
        assert "Child-friendly reminder: Speak to a curious eight-year-old." in lines
        assert "Enneagram: Name the core type. Keep it playful." in lines
        assert not any(line.startswith("Akashic Records:") for line in lines)

    def test_fallback_without_settings(self):
        lines = build_advanced_directives(_intake(), None)
        assert lines[0] == FALLBACK_DIRECTIVE
        assert lines[1].startswith("Missing data awareness (birth date, birth time, birth location):")

    def test_missing_birth_fields(self):
        assert missing_birth_fields(_intake(birth=BirthData(date="1990-04-12", time="06:00"))) == ["birth location"]
        assert missing_birth_fields(_intake()) == ["birth date", "birth time", "birth location"]

    def test_prompt_uses_given_settings(self, expansion):
        prompt = build_blueprint_prompt(_intake(), expansion)
        assert "Modality prompts to blend together:" in prompt
        assert FALLBACK_DIRECTIVE not in prompt
