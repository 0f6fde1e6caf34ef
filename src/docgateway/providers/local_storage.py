"""LocalStorageProvider: exposes a directory as an external-storage volume."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Optional

from docgateway.errors import (
    InvalidUriError,
    NotFoundError,
    PermissionDeniedError,
    ProviderIOError,
    UnsupportedOperationError,
)
from docgateway.models import DocumentNode
from docgateway.util.mime import DIRECTORY_MIME, guess_mime_type
from docgateway.util.uri import (
    DocumentUri,
    build_document_uri,
    build_tree_uri,
    get_document_id,
)

from .base import DocumentProvider

logger = logging.getLogger(__name__)

EXTERNAL_STORAGE_AUTHORITY: str = "com.android.externalstorage.documents"


class LocalStorageProvider(DocumentProvider):
    """
    Serve documents from a local directory.

    Document ids are "<volume>:<relative posix path>"; the volume root itself
    is "<volume>:". Ids that would escape the root are rejected.
    """

    def __init__(
        self,
        root: str | os.PathLike[str],
        *,
        volume: str = "primary",
        authority: str = EXTERNAL_STORAGE_AUTHORITY,
    ) -> None:
        if not volume or ":" in volume:
            raise ValueError("volume must be a non-empty string without ':'")
        self._root = Path(root).resolve()
        if not self._root.is_dir():
            raise ValueError(f"root must be an existing directory: {root}")
        self._volume = volume
        self.authority = authority

    @property
    def root(self) -> Path:
        return self._root

    # ----------------------------
    # Id <-> path mapping
    # ----------------------------
    def document_id_for(self, path: str | os.PathLike[str]) -> str:
        resolved = Path(path).resolve()
        try:
            rel = resolved.relative_to(self._root)
        except ValueError as exc:
            raise InvalidUriError(
                "Path is outside the storage root",
                details={"path": str(path)},
                cause=exc,
            ) from exc
        rel_text = rel.as_posix()
        return f"{self._volume}:{'' if rel_text == '.' else rel_text}"

    def tree_uri_for(self, path: str | os.PathLike[str]) -> DocumentUri:
        return build_tree_uri(self.authority, self.document_id_for(path))

    def path_for(self, document_id: str) -> Path:
        volume, sep, rel = document_id.partition(":")
        if not sep or volume != self._volume:
            raise InvalidUriError("Unknown storage volume", details={"document_id": document_id})

        rel_path = PurePosixPath(rel)
        if rel_path.is_absolute() or ".." in rel_path.parts:
            raise InvalidUriError("Document id escapes the storage root", details={"document_id": document_id})

        path = self._root.joinpath(*rel_path.parts)
        try:
            real = os.path.realpath(path)
        except ValueError as exc:
            raise InvalidUriError(
                "Document id is not a valid path",
                details={"document_id": document_id},
                cause=exc,
            ) from exc
        if os.path.commonpath([real, str(self._root)]) != str(self._root):
            raise InvalidUriError("Document id escapes the storage root", details={"document_id": document_id})
        return path

    # ----------------------------
    # DocumentProvider
    # ----------------------------
    def query_document(self, uri: DocumentUri) -> Optional[DocumentNode]:
        path = self.path_for(get_document_id(uri))
        try:
            st = os.stat(path)
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise _map_os_error(exc, path) from exc
        return self._node(uri, path, st)

    def list_children(self, parent: DocumentNode) -> list[DocumentNode]:
        if not parent.is_directory:
            raise UnsupportedOperationError("Not a directory", details={"uri": str(parent.uri)})

        parent_path = self.path_for(get_document_id(parent.uri))
        children: list[DocumentNode] = []
        try:
            with os.scandir(parent_path) as it:
                for entry in it:
                    try:
                        st = entry.stat()
                    except FileNotFoundError:
                        logger.debug("Skipping dangling entry %s", entry.path)
                        continue
                    child_path = Path(entry.path)
                    try:
                        child_id = self.document_id_for(child_path)
                    except InvalidUriError:
                        logger.debug("Skipping entry resolving outside the root: %s", entry.path)
                        continue
                    child_uri = self._child_uri(parent.uri, child_id)
                    children.append(self._node(child_uri, child_path, st))
        except OSError as exc:
            raise _map_os_error(exc, parent_path) from exc
        return children

    def is_child_document(self, parent_document_id: str, document_id: str) -> bool:
        parent = os.path.realpath(self.path_for(parent_document_id))
        child = os.path.realpath(self.path_for(document_id))
        return child != parent and os.path.commonpath([parent, child]) == parent

    def open_input_stream(self, uri: DocumentUri) -> BinaryIO:
        path = self.path_for(get_document_id(uri))
        try:
            return open(path, "rb")
        except IsADirectoryError as exc:
            raise UnsupportedOperationError(
                "Directories cannot be opened as a byte stream",
                details={"path": str(path)},
                cause=exc,
            ) from exc
        except OSError as exc:
            raise _map_os_error(exc, path) from exc

    # ----------------------------
    # Internals
    # ----------------------------
    def _child_uri(self, parent_uri: DocumentUri, document_id: str) -> DocumentUri:
        if parent_uri.is_tree_based:
            return DocumentUri(
                self.authority,
                tree_document_id=parent_uri.tree_document_id,
                document_id=document_id,
            )
        return build_document_uri(self.authority, document_id)

    def _node(self, uri: DocumentUri, path: Path, st: os.stat_result) -> DocumentNode:
        is_dir = stat.S_ISDIR(st.st_mode)
        is_file = stat.S_ISREG(st.st_mode)
        name = path.name or None
        if is_dir:
            mime_type: Optional[str] = DIRECTORY_MIME
        else:
            mime_type = guess_mime_type(path.name) if is_file else None
        return DocumentNode(
            uri=uri,
            name=name,
            mime_type=mime_type,
            is_directory=is_dir,
            is_file=is_file,
            length=st.st_size if is_file else 0,
        )


def _map_os_error(exc: OSError, path: Path) -> Exception:
    details = {"path": str(path)}
    if isinstance(exc, FileNotFoundError):
        return NotFoundError("Document not found", details=details, cause=exc)
    if isinstance(exc, PermissionError):
        return PermissionDeniedError("Access denied by the filesystem", details=details, cause=exc)
    return ProviderIOError("Filesystem error", details=details, cause=exc)
