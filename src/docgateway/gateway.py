"""StorageAccessGateway: permission persistence, byte reads, tree listing, folder picking."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from docgateway.config import GatewayConfig
from docgateway.errors import (
    GatewayError,
    InvalidStateError,
    ListFailedError,
)
from docgateway.models import DocumentDescriptor, DocumentNode
from docgateway.picker import (
    RESULT_OK,
    CompletionHandle,
    FolderPicker,
    PendingPickerSlot,
)
from docgateway.resolver import (
    FLAG_GRANT_PERSISTABLE_URI_PERMISSION,
    FLAG_GRANT_PREFIX_URI_PERMISSION,
    FLAG_GRANT_READ_URI_PERMISSION,
    ContentResolver,
)
from docgateway.util.uri import (
    DocumentUri,
    build_document_uri_using_tree,
    get_tree_document_id,
    is_blank,
    is_tree_uri,
)

logger = logging.getLogger(__name__)

PICKER_FLAGS: int = (
    FLAG_GRANT_READ_URI_PERMISSION
    | FLAG_GRANT_PERSISTABLE_URI_PERMISSION
    | FLAG_GRANT_PREFIX_URI_PERMISSION
)


class StorageAccessGateway:
    """
    Single entry point to permission-scoped document storage.

    Every operation except the folder pick runs synchronously on the calling
    thread. Storage failures never escape as raw exceptions: each operation
    turns them into its own sentinel (False / None / []) or, for
    list_children and walk_tree, into ListFailedError.
    """

    def __init__(
        self,
        resolver: ContentResolver,
        *,
        picker: Optional[FolderPicker] = None,
        config: Optional[GatewayConfig] = None,
    ) -> None:
        self._resolver = resolver
        self._picker = picker
        self._config = config or GatewayConfig()
        self._pending = PendingPickerSlot()

    @property
    def config(self) -> GatewayConfig:
        return self._config

    @property
    def picker_pending(self) -> bool:
        return self._pending.is_pending

    # ----------------------------
    # Permissions
    # ----------------------------
    def persist_permission(self, uri: Optional[str]) -> bool:
        """
        Make read access to `uri` survive restarts.

        Returns True if a read grant already exists for exactly this URI or
        was taken now; False for blank input or when the grant is refused.
        """
        if is_blank(uri):
            return False

        try:
            parsed = DocumentUri.parse(uri)  # type: ignore[arg-type]
            key = str(parsed)
            for grant in self._resolver.get_persisted_uri_permissions():
                if grant.uri == key and grant.read:
                    return True
            self._resolver.take_persistable_uri_permission(parsed, FLAG_GRANT_READ_URI_PERMISSION)
            logger.info("Persisted read grant for %s", key)
            return True
        except GatewayError as exc:
            logger.info("Could not persist grant for %s (%s): %s", uri, exc.code, exc)
            return False

    # ----------------------------
    # Content
    # ----------------------------
    def read_bytes(self, uri: Optional[str]) -> Optional[bytes]:
        """
        Read a document fully.

        A bare tree URI is opened through its root document. Returns None for
        blank input and when the document cannot be opened or read.
        """
        if is_blank(uri):
            return None

        try:
            parsed = DocumentUri.parse(uri)  # type: ignore[arg-type]
            if is_tree_uri(parsed):
                parsed = build_document_uri_using_tree(parsed, get_tree_document_id(parsed))
            with self._resolver.open_input_stream(parsed) as stream:
                return stream.read()
        except GatewayError as exc:
            logger.info("Could not open %s (%s): %s", uri, exc.code, exc)
            return None
        except OSError as exc:
            logger.warning("Read failed for %s: %s", uri, exc)
            return None

    # ----------------------------
    # Listing
    # ----------------------------
    def list_children(
        self,
        tree_uri: Optional[str],
        parent_uri: Optional[str],
    ) -> list[DocumentDescriptor]:
        """
        Immediate children of `parent_uri`, sorted by name (case-insensitive).

        Raises:
            ListFailedError: the parent cannot be resolved, is not a folder,
                or listing fails. An empty folder yields [] instead.
        """
        if is_blank(tree_uri) or is_blank(parent_uri):
            return []

        try:
            tree = DocumentUri.parse(tree_uri)  # type: ignore[arg-type]
            parent_ref = DocumentUri.parse(parent_uri)  # type: ignore[arg-type]
            if parent_ref == tree:
                parent = self._resolve_tree_root(tree)
            else:
                parent = self._resolver.query_document(parent_ref)

            if parent is None:
                raise ListFailedError("Parent document not found", details={"uri": parent_uri})
            if not parent.is_directory:
                raise ListFailedError("Parent document is not a folder", details={"uri": parent_uri})

            children = self._resolver.list_children(parent)
        except ListFailedError:
            raise
        except GatewayError as exc:
            raise ListFailedError(
                str(exc),
                details={"uri": parent_uri, "reason": exc.code},
                cause=exc,
            ) from exc

        return self._sorted_descriptors(children)

    def walk_tree(self, tree_uri: Optional[str]) -> list[DocumentDescriptor]:
        """
        Every file under the tree, depth-first; folders are walked, not emitted.

        The result is sorted by name (case-insensitive) across the whole tree.

        Raises:
            ListFailedError: the root cannot be resolved or any folder fails
                to list.
        """
        if is_blank(tree_uri):
            return []

        files: list[DocumentNode] = []
        try:
            root = self._resolve_tree_root(DocumentUri.parse(tree_uri))  # type: ignore[arg-type]
            if root is None:
                raise ListFailedError("Tree root not found", details={"uri": tree_uri})

            stack = [root]
            while stack:
                node = stack.pop()
                if node.is_file:
                    files.append(node)
                elif node.is_directory:
                    stack.extend(reversed(self._resolver.list_children(node)))
        except ListFailedError:
            raise
        except GatewayError as exc:
            raise ListFailedError(
                str(exc),
                details={"uri": tree_uri, "reason": exc.code},
                cause=exc,
            ) from exc

        return self._sorted_descriptors(files)

    def list_recursively(self, tree_uri: Optional[str]) -> list[DocumentDescriptor]:
        """Best-effort walk_tree: any failure yields [] rather than a partial result."""
        if is_blank(tree_uri):
            return []
        try:
            return self.walk_tree(tree_uri)
        except ListFailedError as exc:
            logger.warning("Recursive listing of %s failed: %s", tree_uri, exc)
            return []

    # ----------------------------
    # Folder picker
    # ----------------------------
    def request_folder(self, on_complete: CompletionHandle) -> None:
        """
        Start an interactive folder pick; `on_complete` runs exactly once.

        Raises:
            PickerInProgressError: a pick is already pending (the pending one
                is left untouched).
            InvalidStateError: no picker is configured.
        """
        if self._picker is None:
            raise InvalidStateError("No folder picker configured")

        self._pending.occupy(on_complete)
        try:
            self._picker.launch(self._config.picker_request_code, PICKER_FLAGS, self.on_activity_result)
        except Exception:
            self._pending.take()
            raise
        logger.debug("Folder picker launched")

    async def pick_folder(self) -> Optional[str]:
        """Pick a folder; resolves to its tree URI, or None if cancelled."""
        future: asyncio.Future[Optional[str]] = asyncio.get_running_loop().create_future()

        def _complete(uri: Optional[str]) -> None:
            if not future.done():
                future.set_result(uri)

        self.request_folder(_complete)
        return await future

    def on_activity_result(self, request_code: int, result_code: int, data_uri: Optional[str]) -> bool:
        """
        Deliver a picker outcome. Returns False if `request_code` is not ours.

        The pending slot is cleared before the handle runs, so the handle may
        start a new pick right away.
        """
        if request_code != self._config.picker_request_code:
            return False

        handle = self._pending.take()
        if handle is None:
            logger.debug("Picker result arrived with nothing pending")
            return True

        if result_code != RESULT_OK or is_blank(data_uri):
            handle(None)
            return True

        if self._config.persist_picked_tree:
            try:
                self._resolver.take_persistable_uri_permission(data_uri, FLAG_GRANT_READ_URI_PERMISSION)  # type: ignore[arg-type]
            except GatewayError as exc:
                logger.warning("Picked folder %s is usable for this session only: %s", data_uri, exc)

        handle(data_uri)
        return True

    # ----------------------------
    # Internals
    # ----------------------------
    def _resolve_tree_root(self, tree: DocumentUri) -> Optional[DocumentNode]:
        root_uri = build_document_uri_using_tree(tree, get_tree_document_id(tree))
        return self._resolver.query_document(root_uri)

    def _sorted_descriptors(self, nodes: list[DocumentNode]) -> list[DocumentDescriptor]:
        placeholder = self._config.unnamed_placeholder
        descriptors = [DocumentDescriptor.from_node(n, placeholder=placeholder) for n in nodes]
        descriptors.sort(key=lambda d: d.sort_key)
        return descriptors
