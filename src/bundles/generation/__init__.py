"""Bundle generator registry — pluggable structured bundle synthesis."""

import os

_generator_instance = None


def get_bundle_generator():
    """Return the configured bundle generator (singleton).

    Uses FakeBundleGenerator by default. BUNDLE_GENERATOR_ADAPTER=none
    disables generation so the resolver goes straight to the fallback.
    """
    global _generator_instance
    if _generator_instance is None:
        adapter = os.environ.get("BUNDLE_GENERATOR_ADAPTER", "fake")
        if adapter == "none":
            return None
        if adapter == "fake":
            from bundles.generation.fake_adapter import FakeBundleGenerator

            _generator_instance = FakeBundleGenerator()
        else:
            raise ValueError(f"Unknown bundle generator adapter: {adapter}")
    return _generator_instance


def set_bundle_generator(generator) -> None:
    global _generator_instance
    _generator_instance = generator


def reset_bundle_generator():
    """Reset the generator singleton (useful for testing)."""
    global _generator_instance
    _generator_instance = None
