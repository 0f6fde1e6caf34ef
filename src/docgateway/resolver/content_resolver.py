"""ContentResolver: routes content URIs to providers and enforces grants."""

from __future__ import annotations

import logging
from typing import BinaryIO, Optional

from docgateway.errors import (
    InvalidUriError,
    PermissionDeniedError,
    UnsupportedOperationError,
)
from docgateway.models import DocumentNode, PermissionGrant
from docgateway.providers.base import DocumentProvider
from docgateway.util.uri import DocumentUri

from .permission_store import PermissionStore

logger = logging.getLogger(__name__)

FLAG_GRANT_READ_URI_PERMISSION: int = 0x00000001
FLAG_GRANT_WRITE_URI_PERMISSION: int = 0x00000002
FLAG_GRANT_PERSISTABLE_URI_PERMISSION: int = 0x00000040
FLAG_GRANT_PREFIX_URI_PERMISSION: int = 0x00000080

_MODE_FLAGS = FLAG_GRANT_READ_URI_PERMISSION | FLAG_GRANT_WRITE_URI_PERMISSION


class ContentResolver:
    """
    Process-wide entry point to document storage.

    Holds two kinds of grants:
        - transient grants, issued by a picker for the lifetime of the process;
        - persisted grants, kept in a PermissionStore across restarts.

    A grant on a tree URI covers every document addressed through that tree.
    """

    def __init__(self, store: Optional[PermissionStore] = None) -> None:
        self._store = store if store is not None else PermissionStore()
        self._providers: dict[str, DocumentProvider] = {}
        self._transient: dict[DocumentUri, int] = {}

    @property
    def store(self) -> PermissionStore:
        return self._store

    def register_provider(self, provider: DocumentProvider) -> None:
        if provider.authority in self._providers:
            raise ValueError(f"Provider already registered for {provider.authority!r}")
        self._providers[provider.authority] = provider

    # ----------------------------
    # Grants
    # ----------------------------
    def grant_uri_permission(self, uri: str | DocumentUri, flags: int) -> None:
        """Record a transient grant (what a picker hands out on selection)."""
        parsed = _as_uri(uri)
        self._transient[parsed] = self._transient.get(parsed, 0) | flags

    def get_persisted_uri_permissions(self) -> list[PermissionGrant]:
        return self._store.list_grants()

    def take_persistable_uri_permission(self, uri: str | DocumentUri, flags: int) -> PermissionGrant:
        """
        Persist a grant previously handed out with the persistable flag.

        Raises:
            InvalidUriError: malformed URI or no provider for its authority.
            UnsupportedOperationError: provider does not keep persisted grants,
                or flags request no read/write mode.
            PermissionDeniedError: no persistable grant covers the URI.
        """
        parsed = _as_uri(uri)
        provider = self._provider_for(parsed)
        if not provider.supports_persistable_grants:
            raise UnsupportedOperationError(
                "Provider does not support persisted grants",
                details={"uri": str(parsed), "authority": parsed.authority},
            )

        modes = flags & _MODE_FLAGS
        if not modes:
            raise UnsupportedOperationError(
                "Requested flags carry no read/write mode",
                details={"flags": flags},
            )

        if not self._has_persistable_grant(parsed, modes):
            raise PermissionDeniedError(
                "No persistable permission grants found for URI",
                details={"uri": str(parsed)},
            )

        return self._store.put(
            str(parsed),
            read=bool(modes & FLAG_GRANT_READ_URI_PERMISSION),
            write=bool(modes & FLAG_GRANT_WRITE_URI_PERMISSION),
        )

    # ----------------------------
    # Document access
    # ----------------------------
    def query_document(self, uri: str | DocumentUri) -> Optional[DocumentNode]:
        parsed = _as_uri(uri)
        provider = self._enforce_read(parsed)
        return provider.query_document(parsed)

    def list_children(self, parent: DocumentNode) -> list[DocumentNode]:
        provider = self._enforce_read(parent.uri)
        return provider.list_children(parent)

    def open_input_stream(self, uri: str | DocumentUri) -> BinaryIO:
        parsed = _as_uri(uri)
        provider = self._enforce_read(parsed)
        return provider.open_input_stream(parsed)

    # ----------------------------
    # Internals
    # ----------------------------
    def _provider_for(self, uri: DocumentUri) -> DocumentProvider:
        provider = self._providers.get(uri.authority)
        if provider is None:
            raise InvalidUriError(
                "No provider for URI authority",
                details={"uri": str(uri), "authority": uri.authority},
            )
        return provider

    def _enforce_read(self, uri: DocumentUri) -> DocumentProvider:
        provider = self._provider_for(uri)

        if not self._has_read_access(uri):
            raise PermissionDeniedError(
                "Permission denial: no read grant covers URI",
                details={"uri": str(uri)},
            )

        tree_id = uri.tree_document_id
        if tree_id is not None and uri.document_id is not None and uri.document_id != tree_id:
            if not provider.is_child_document(tree_id, uri.document_id):
                raise PermissionDeniedError(
                    "Document is not a descendant of the granted tree",
                    details={"uri": str(uri)},
                )
        return provider

    def _has_read_access(self, uri: DocumentUri) -> bool:
        for granted, flags in self._transient.items():
            if flags & FLAG_GRANT_READ_URI_PERMISSION and _covers(granted, uri):
                return True
        for grant in self._store.list_grants():
            if not grant.read:
                continue
            try:
                granted = DocumentUri.parse(grant.uri)
            except InvalidUriError:
                logger.warning("Ignoring persisted grant with malformed URI: %s", grant.uri)
                continue
            if _covers(granted, uri):
                return True
        return False

    def _has_persistable_grant(self, uri: DocumentUri, modes: int) -> bool:
        for granted, flags in self._transient.items():
            if not flags & FLAG_GRANT_PERSISTABLE_URI_PERMISSION:
                continue
            if flags & modes != modes:
                continue
            if _covers(granted, uri):
                return True
        return False


def _as_uri(uri: str | DocumentUri) -> DocumentUri:
    if isinstance(uri, DocumentUri):
        return uri
    return DocumentUri.parse(uri)


def _covers(granted: DocumentUri, target: DocumentUri) -> bool:
    if granted == target:
        return True
    if granted.authority != target.authority:
        return False
    return granted.is_tree and target.tree_document_id == granted.tree_document_id
