"""Document store port (abstract interface).

Defines the contract for the folder/document/file store that holds every
artifact of an order. Folder creation must be find-by-name-under-parent
else create, so repeated pipeline attempts reuse the same folders.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

FOLDER_MIME_TYPE = "application/vnd.folder"
DOCUMENT_MIME_TYPE = "application/vnd.document"
PDF_MIME_TYPE = "application/pdf"


@dataclass(frozen=True)
class StoredFile:
    """A folder, document or file in the store."""

    id: str
    name: str
    url: str
    mime_type: str
    parent_id: str | None = None


class DocumentStorePort(ABC):
    """Abstract document store interface."""

    @abstractmethod
    def ensure_folder(self, parent_id: str, name: str) -> StoredFile:
        """Return the folder named ``name`` under ``parent_id``, creating it if absent."""
        ...

    @abstractmethod
    def create_document(self, title: str, parent_id: str) -> StoredFile:
        """Create an empty text document."""
        ...

    @abstractmethod
    def insert_text(self, document_id: str, text: str) -> None:
        """Append text to a document."""
        ...

    @abstractmethod
    def export_document(self, document_id: str, mime_type: str = PDF_MIME_TYPE) -> bytes:
        """Export a document's rendered content."""
        ...

    @abstractmethod
    def create_file(self, name: str, mime_type: str, content: bytes, parent_id: str) -> StoredFile:
        """Upload a file."""
        ...

    @abstractmethod
    def copy_file(self, file_id: str, name: str, parent_id: str) -> StoredFile:
        """Copy an existing file (for example a template) under a new name."""
        ...

    @abstractmethod
    def list_files(self, parent_id: str, name: str | None = None) -> list[StoredFile]:
        """List children of a folder, optionally filtered by exact name."""
        ...
