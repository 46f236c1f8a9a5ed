"""Fake document store — an in-memory folder tree for testing and development."""

from uuid import uuid4

from fulfillment.storage.document_port import (
    DOCUMENT_MIME_TYPE,
    FOLDER_MIME_TYPE,
    PDF_MIME_TYPE,
    DocumentStorePort,
    StoredFile,
)


class FakeDocumentStore(DocumentStorePort):
    """Document store that keeps files and contents in dictionaries.

    ``configure(fail_on=...)`` makes the named operation raise, which is how
    tests simulate a collaborator failing mid-pipeline.
    """

    def __init__(self):
        self.files: dict[str, StoredFile] = {}
        self.contents: dict[str, bytes] = {}
        self.calls: list[str] = []
        self.fail_on: set[str] = set()
        self.failures_remaining: int | None = None
        self.failure_reason = "Document store unavailable"

    def configure(
        self,
        fail_on: set[str] | None = None,
        failures: int | None = None,
        failure_reason: str = "Document store unavailable",
    ):
        """Make the listed operations raise, ``failures`` times (None for always)."""
        self.fail_on = set(fail_on or ())
        self.failures_remaining = failures
        self.failure_reason = failure_reason

    def _record(self, operation: str) -> None:
        self.calls.append(operation)
        if operation not in self.fail_on:
            return
        if self.failures_remaining is None:
            raise ConnectionError(self.failure_reason)
        if self.failures_remaining > 0:
            self.failures_remaining -= 1
            raise ConnectionError(self.failure_reason)

    def _store(self, name: str, mime_type: str, parent_id: str | None) -> StoredFile:
        file_id = f"file-{uuid4().hex[:12]}"
        stored = StoredFile(
            id=file_id,
            name=name,
            url=f"https://docs.example.com/{file_id}",
            mime_type=mime_type,
            parent_id=parent_id,
        )
        self.files[file_id] = stored
        return stored

    def ensure_folder(self, parent_id: str, name: str) -> StoredFile:
        self._record("ensure_folder")
        for existing in self.list_files(parent_id, name):
            if existing.mime_type == FOLDER_MIME_TYPE:
                return existing
        return self._store(name, FOLDER_MIME_TYPE, parent_id)

    def create_document(self, title: str, parent_id: str) -> StoredFile:
        self._record("create_document")
        document = self._store(title, DOCUMENT_MIME_TYPE, parent_id)
        self.contents[document.id] = b""
        return document

    def insert_text(self, document_id: str, text: str) -> None:
        self._record("insert_text")
        self.contents[document_id] = self.contents.get(document_id, b"") + text.encode("utf-8")

    def export_document(self, document_id: str, mime_type: str = PDF_MIME_TYPE) -> bytes:
        self._record("export_document")
        return b"%PDF-fake\n" + self.contents.get(document_id, b"")

    def create_file(self, name: str, mime_type: str, content: bytes, parent_id: str) -> StoredFile:
        self._record("create_file")
        stored = self._store(name, mime_type, parent_id)
        self.contents[stored.id] = content
        return stored

    def copy_file(self, file_id: str, name: str, parent_id: str) -> StoredFile:
        self._record("copy_file")
        source = self.files.get(file_id)
        mime_type = source.mime_type if source else DOCUMENT_MIME_TYPE
        copy = self._store(name, mime_type, parent_id)
        self.contents[copy.id] = self.contents.get(file_id, b"")
        return copy

    def list_files(self, parent_id: str, name: str | None = None) -> list[StoredFile]:
        return [
            stored
            for stored in self.files.values()
            if stored.parent_id == parent_id and (name is None or stored.name == name)
        ]

    def folders_named(self, name: str) -> list[StoredFile]:
        return [stored for stored in self.files.values() if stored.name == name and stored.mime_type == FOLDER_MIME_TYPE]

    def reset(self):
        """Drop every stored file and restore default behavior."""
        self.files.clear()
        self.contents.clear()
        self.calls.clear()
        self.fail_on = set()
        self.failures_remaining = None
        self.failure_reason = "Document store unavailable"
