"""Storage adapter registry — document store and tabular log.

Fake adapters are used by default; DOCUMENT_STORE_ADAPTER and
LOG_STORE_ADAPTER select others in production.
"""

import os

_document_store_instance = None
_log_store_instance = None


def get_document_store():
    """Return the configured document store (singleton)."""
    global _document_store_instance
    if _document_store_instance is None:
        adapter = os.environ.get("DOCUMENT_STORE_ADAPTER", "fake")
        if adapter == "fake":
            from fulfillment.storage.fake_document_store import FakeDocumentStore

            _document_store_instance = FakeDocumentStore()
        else:
            raise ValueError(f"Unknown document store adapter: {adapter}")
    return _document_store_instance


def get_log_store():
    """Return the configured tabular log store (singleton)."""
    global _log_store_instance
    if _log_store_instance is None:
        adapter = os.environ.get("LOG_STORE_ADAPTER", "fake")
        if adapter == "fake":
            from fulfillment.storage.fake_log_store import FakeLogStore

            _log_store_instance = FakeLogStore()
        else:
            raise ValueError(f"Unknown log store adapter: {adapter}")
    return _log_store_instance


def set_document_store(store) -> None:
    global _document_store_instance
    _document_store_instance = store


def set_log_store(store) -> None:
    global _log_store_instance
    _log_store_instance = store


def reset_storage():
    """Reset both storage singletons (useful for testing)."""
    global _document_store_instance, _log_store_instance
    _document_store_instance = None
    _log_store_instance = None
