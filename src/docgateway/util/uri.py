"""Content URIs for permission-scoped documents."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote, unquote, urlsplit

from docgateway.errors import InvalidUriError

CONTENT_SCHEME: str = "content"

_PATH_TREE = "tree"
_PATH_DOCUMENT = "document"


@dataclass(frozen=True)
class DocumentUri:
    """
    Parsed form of a content URI.

    Shapes:
        - content://<authority>/tree/<treeDocId>
        - content://<authority>/tree/<treeDocId>/document/<docId>
        - content://<authority>/document/<docId>

    Ids are kept decoded; they are percent-encoded again by __str__.
    """

    authority: str
    tree_document_id: Optional[str] = None
    document_id: Optional[str] = None

    @classmethod
    def parse(cls, value: str) -> DocumentUri:
        if not isinstance(value, str) or not value.strip():
            raise InvalidUriError("URI must be a non-empty string")

        try:
            parts = urlsplit(value.strip())
        except ValueError as exc:
            raise InvalidUriError("Malformed URI", details={"uri": value}, cause=exc) from exc

        if parts.scheme != CONTENT_SCHEME:
            raise InvalidUriError("Unsupported URI scheme", details={"uri": value})
        if not parts.netloc:
            raise InvalidUriError("URI has no authority", details={"uri": value})
        if parts.query or parts.fragment:
            raise InvalidUriError("URI must not carry a query or fragment", details={"uri": value})

        segments = [unquote(s) for s in parts.path.split("/")[1:]]
        if any(not s for s in segments):
            raise InvalidUriError("URI has empty path segments", details={"uri": value})
        if any(_has_control_chars(s) for s in segments):
            raise InvalidUriError("URI path contains control characters", details={"uri": value})

        if len(segments) == 2 and segments[0] == _PATH_TREE:
            return cls(parts.netloc, tree_document_id=segments[1])
        if len(segments) == 4 and segments[0] == _PATH_TREE and segments[2] == _PATH_DOCUMENT:
            return cls(parts.netloc, tree_document_id=segments[1], document_id=segments[3])
        if len(segments) == 2 and segments[0] == _PATH_DOCUMENT:
            return cls(parts.netloc, document_id=segments[1])

        raise InvalidUriError("Not a document or tree URI", details={"uri": value})

    @property
    def is_tree(self) -> bool:
        """True only for a bare tree URI (no document segment)."""
        return self.tree_document_id is not None and self.document_id is None

    @property
    def is_tree_based(self) -> bool:
        return self.tree_document_id is not None

    def __str__(self) -> str:
        out = f"{CONTENT_SCHEME}://{self.authority}"
        if self.tree_document_id is not None:
            out += f"/{_PATH_TREE}/{quote(self.tree_document_id, safe='')}"
        if self.document_id is not None:
            out += f"/{_PATH_DOCUMENT}/{quote(self.document_id, safe='')}"
        return out


def _has_control_chars(segment: str) -> bool:
    return any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in segment)


def is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def is_tree_uri(uri: DocumentUri) -> bool:
    return uri.is_tree


def get_tree_document_id(uri: DocumentUri) -> str:
    if uri.tree_document_id is None:
        raise InvalidUriError("Not a tree URI", details={"uri": str(uri)})
    return uri.tree_document_id


def get_document_id(uri: DocumentUri) -> str:
    """Document id of `uri`; for a bare tree URI this is the tree's own root id."""
    if uri.document_id is not None:
        return uri.document_id
    return get_tree_document_id(uri)


def build_tree_uri(authority: str, document_id: str) -> DocumentUri:
    return DocumentUri(authority, tree_document_id=document_id)


def build_document_uri(authority: str, document_id: str) -> DocumentUri:
    return DocumentUri(authority, document_id=document_id)


def build_document_uri_using_tree(tree_uri: DocumentUri, document_id: str) -> DocumentUri:
    return DocumentUri(
        tree_uri.authority,
        tree_document_id=get_tree_document_id(tree_uri),
        document_id=document_id,
    )
