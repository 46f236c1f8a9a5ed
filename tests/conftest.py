import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config environment before any domain is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/bdd/" in str(test_path):
            item.add_marker(pytest.mark.bdd)


@pytest.fixture(autouse=True)
def reset_adapters(monkeypatch):
    """Give every test fresh fake adapters and an isolated catalog."""
    from bundles.generation import reset_bundle_generator
    from fulfillment.services import reset_bundle_library, reset_catalog
    from fulfillment.storage import reset_storage
    from intake.session import reset_session_source
    from narrative.provider import reset_narrative_providers
    from notifications.channel import reset_channels

    monkeypatch.delenv("FULFILLMENT_SKU_MAP", raising=False)
    monkeypatch.delenv("FULFILLMENT_RUNTIME_CATALOG", raising=False)
    monkeypatch.delenv("FULFILLMENT_BUNDLE_LIBRARY", raising=False)
    monkeypatch.delenv("NARRATIVE_ADVANCED_CONFIG", raising=False)

    resets = (
        reset_channels,
        reset_storage,
        reset_session_source,
        reset_bundle_generator,
        reset_narrative_providers,
        reset_catalog,
        reset_bundle_library,
    )
    for reset in resets:
        reset()
    yield
    for reset in resets:
        reset()
