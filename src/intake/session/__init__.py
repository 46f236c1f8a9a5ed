"""Session source registry — pluggable checkout session retrieval."""

import os

_session_source_instance = None


def get_session_source():
    """Return the configured session source (singleton).

    Uses FakeSessionSource by default. In production, configure via
    SESSION_SOURCE_ADAPTER environment variable.
    """
    global _session_source_instance
    if _session_source_instance is None:
        adapter = os.environ.get("SESSION_SOURCE_ADAPTER", "fake")
        if adapter == "fake":
            from intake.session.fake_adapter import FakeSessionSource

            _session_source_instance = FakeSessionSource()
        else:
            raise ValueError(f"Unknown session source adapter: {adapter}")
    return _session_source_instance


def set_session_source(source) -> None:
    """Install a specific session source (used by tests and app wiring)."""
    global _session_source_instance
    _session_source_instance = source


def reset_session_source():
    """Reset the session source singleton (useful for testing)."""
    global _session_source_instance
    _session_source_instance = None
