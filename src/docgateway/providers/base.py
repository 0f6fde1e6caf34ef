"""Document provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import BinaryIO, Optional

from docgateway.models import DocumentNode
from docgateway.util.uri import DocumentUri


class DocumentProvider(ABC):
    """
    Storage backend serving one URI authority.

    Providers never check grants; the ContentResolver does that before
    delegating. Failures are raised as docgateway errors
    (NotFoundError, PermissionDeniedError, ProviderIOError, ...).
    """

    authority: str
    supports_persistable_grants: bool = True

    @abstractmethod
    def query_document(self, uri: DocumentUri) -> Optional[DocumentNode]:
        """Return the node for `uri`, or None if it does not exist."""

    @abstractmethod
    def list_children(self, parent: DocumentNode) -> list[DocumentNode]:
        """Return the immediate children of a directory node (unordered)."""

    @abstractmethod
    def is_child_document(self, parent_document_id: str, document_id: str) -> bool:
        """True if `document_id` is a descendant of `parent_document_id`."""

    @abstractmethod
    def open_input_stream(self, uri: DocumentUri) -> BinaryIO:
        """Open a document for reading. The caller must close the stream."""
