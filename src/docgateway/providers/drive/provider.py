"""DriveDocumentProvider: Google Drive folders and files as documents."""

from __future__ import annotations

import io
from typing import BinaryIO, Optional

from docgateway.errors import NotFoundError, UnsupportedOperationError
from docgateway.models import UNKNOWN_LENGTH, DocumentNode
from docgateway.providers.base import DocumentProvider
from docgateway.util.mime import DRIVE_FOLDER_MIME, is_download_disallowed
from docgateway.util.uri import DocumentUri, build_document_uri, get_document_id

from .controller import DriveController, DriveItem

DRIVE_AUTHORITY: str = "com.google.android.apps.docs.storage"

# Bound on parent hops when checking tree membership.
_MAX_ANCESTRY_DEPTH = 64


class DriveDocumentProvider(DocumentProvider):
    """Drive file ids are used directly as document ids."""

    def __init__(self, controller: DriveController, *, authority: str = DRIVE_AUTHORITY) -> None:
        self._controller = controller
        self.authority = authority

    def query_document(self, uri: DocumentUri) -> Optional[DocumentNode]:
        try:
            item = self._controller.get(get_document_id(uri))
        except NotFoundError:
            return None
        if item.trashed:
            return None
        return self._node(uri, item)

    def list_children(self, parent: DocumentNode) -> list[DocumentNode]:
        if not parent.is_directory:
            raise UnsupportedOperationError("Not a directory", details={"uri": str(parent.uri)})

        children = self._controller.list_children(get_document_id(parent.uri))
        return [self._node(self._child_uri(parent.uri, item.file_id), item) for item in children]

    def is_child_document(self, parent_document_id: str, document_id: str) -> bool:
        current = [document_id]
        for _ in range(_MAX_ANCESTRY_DEPTH):
            parents: list[str] = []
            for file_id in current:
                try:
                    parents.extend(self._controller.get(file_id).parents)
                except NotFoundError:
                    continue
            if parent_document_id in parents:
                return True
            if not parents:
                return False
            current = parents
        return False

    def open_input_stream(self, uri: DocumentUri) -> BinaryIO:
        file_id = get_document_id(uri)
        item = self._controller.get(file_id)
        if is_download_disallowed(item.mime_type):
            raise UnsupportedOperationError(
                "Folders and Google-apps documents cannot be downloaded",
                details={"uri": str(uri), "mime_type": item.mime_type},
            )
        return io.BytesIO(self._controller.download_bytes(file_id))

    def _child_uri(self, parent_uri: DocumentUri, file_id: str) -> DocumentUri:
        if parent_uri.is_tree_based:
            return DocumentUri(
                self.authority,
                tree_document_id=parent_uri.tree_document_id,
                document_id=file_id,
            )
        return build_document_uri(self.authority, file_id)

    @staticmethod
    def _node(uri: DocumentUri, item: DriveItem) -> DocumentNode:
        is_dir = item.mime_type == DRIVE_FOLDER_MIME
        return DocumentNode(
            uri=uri,
            name=item.name or None,
            mime_type=item.mime_type or None,
            is_directory=is_dir,
            is_file=not is_dir,
            length=item.size if item.size is not None else UNKNOWN_LENGTH,
        )
