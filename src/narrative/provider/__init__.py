"""Narrative provider registry — the ordered provider list used for blueprints.

NARRATIVE_PROVIDERS lists provider ids in fallback order
(default "codex,claude,gemini"); every id is served by a fake provider
unless NARRATIVE_PROVIDER_ADAPTER selects another adapter family.
"""

import os

DEFAULT_PROVIDER_ORDER = "codex,claude,gemini"

_provider_instances: list | None = None


def get_narrative_providers() -> list:
    """Return the configured providers in fallback order (singleton list)."""
    global _provider_instances
    if _provider_instances is None:
        adapter = os.environ.get("NARRATIVE_PROVIDER_ADAPTER", "fake")
        order = [
            provider_id.strip()
            for provider_id in os.environ.get("NARRATIVE_PROVIDERS", DEFAULT_PROVIDER_ORDER).split(",")
            if provider_id.strip()
        ]
        if adapter == "fake":
            from narrative.provider.fake_adapter import FakeNarrativeProvider

            _provider_instances = [FakeNarrativeProvider(provider_id) for provider_id in order]
        else:
            raise ValueError(f"Unknown narrative provider adapter: {adapter}")
    return _provider_instances


def set_narrative_providers(providers: list) -> None:
    global _provider_instances
    _provider_instances = list(providers)


def reset_narrative_providers():
    """Reset the provider list (useful for testing)."""
    global _provider_instances
    _provider_instances = None
