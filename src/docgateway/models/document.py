"""Data models for documents and grants."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from docgateway.util.uri import DocumentUri

UNKNOWN_LENGTH: int = -1


@dataclass(slots=True)
class DocumentNode:
    """
    A document as reported by a provider.

    Notes:
        - name and mime_type may be None when the provider reports nothing.
        - length is UNKNOWN_LENGTH (-1) when the size is not known.
    """

    uri: DocumentUri
    name: Optional[str]
    mime_type: Optional[str]
    is_directory: bool
    is_file: bool
    length: int = UNKNOWN_LENGTH


@dataclass(slots=True, frozen=True)
class DocumentDescriptor:
    """One listing entry returned by the gateway. Built fresh on every call."""

    name: str
    uri: str
    is_directory: bool
    is_file: bool
    mime_type: Optional[str] = None
    size: Optional[int] = None

    @classmethod
    def from_node(cls, node: DocumentNode, *, placeholder: str) -> DocumentDescriptor:
        size = None
        if node.is_file and node.length >= 0:
            size = node.length
        return cls(
            name=node.name or placeholder,
            uri=str(node.uri),
            is_directory=node.is_directory,
            is_file=node.is_file,
            mime_type=node.mime_type,
            size=size,
        )

    @property
    def sort_key(self) -> str:
        return self.name.lower()

    def to_child_record(self) -> dict[str, Any]:
        return {
            "uri": self.uri,
            "name": self.name,
            "isDirectory": self.is_directory,
            "isFile": self.is_file,
            "mimeType": self.mime_type,
        }

    def to_tree_record(self) -> dict[str, Any]:
        return {
            "displayName": self.name,
            "uri": self.uri,
            "size": self.size,
            "mimeType": self.mime_type,
        }


@dataclass(slots=True)
class PermissionGrant:
    """A URI grant. Persisted grants carry the time (ms since epoch) they were taken."""

    uri: str
    read: bool
    write: bool = False
    persisted_time: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "uri": self.uri,
            "read": self.read,
            "write": self.write,
            "persisted_time": self.persisted_time,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PermissionGrant:
        uri = data.get("uri")
        if not isinstance(uri, str) or not uri:
            raise ValueError("grant 'uri' must be a non-empty string")
        persisted_time = data.get("persisted_time", 0)
        return cls(
            uri=uri,
            read=bool(data.get("read", False)),
            write=bool(data.get("write", False)),
            persisted_time=persisted_time if isinstance(persisted_time, int) else 0,
        )
