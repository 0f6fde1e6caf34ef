"""Persisted URI grants, optionally backed by a JSON file."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from typing import Optional

from docgateway.errors import ProviderIOError
from docgateway.models import PermissionGrant

logger = logging.getLogger(__name__)


class PermissionStore:
    """
    Grants that survive process restarts.

    With `path=None` the store lives in memory only. Otherwise it is loaded
    on construction and rewritten atomically on every change.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        self._path = path
        self._grants: dict[str, PermissionGrant] = {}
        if path is not None:
            self._load(path)

    @property
    def path(self) -> Optional[str]:
        return self._path

    def list_grants(self) -> list[PermissionGrant]:
        return list(self._grants.values())

    def get(self, uri: str) -> Optional[PermissionGrant]:
        return self._grants.get(uri)

    def put(self, uri: str, *, read: bool, write: bool = False) -> PermissionGrant:
        """
        Record a grant for `uri`.

        An existing grant is widened in place (modes are OR-ed), never
        duplicated. If the store cannot be written the change is rolled back.
        """
        existing = self._grants.get(uri)
        if existing is not None:
            if (existing.read or not read) and (existing.write or not write):
                return existing
            previous = (existing.read, existing.write)
            existing.read = existing.read or read
            existing.write = existing.write or write
            try:
                self._save()
            except ProviderIOError:
                existing.read, existing.write = previous
                raise
            return existing

        grant = PermissionGrant(
            uri=uri,
            read=read,
            write=write,
            persisted_time=int(time.time() * 1000),
        )
        self._grants[uri] = grant
        try:
            self._save()
        except ProviderIOError:
            del self._grants[uri]
            raise
        logger.debug("Persisted grant for %s (read=%s, write=%s)", uri, read, write)
        return grant

    def _load(self, path: str) -> None:
        if not os.path.exists(path):
            return

        try:
            with open(path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, ValueError) as exc:
            raise ProviderIOError(
                "Failed to load permission store",
                details={"path": path},
                cause=exc,
            ) from exc

        for item in payload.get("grants", []) if isinstance(payload, dict) else []:
            try:
                grant = PermissionGrant.from_dict(item)
            except (TypeError, ValueError, AttributeError):
                logger.warning("Skipping malformed grant entry in %s: %r", path, item)
                continue
            self._grants[grant.uri] = grant

    def _save(self) -> None:
        if self._path is None:
            return

        directory = os.path.dirname(self._path)
        payload = {"grants": [g.to_dict() for g in self._grants.values()]}
        tmp_path: Optional[str] = None
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory or ".", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_path, self._path)
            tmp_path = None
        except OSError as exc:
            raise ProviderIOError(
                "Failed to save permission store",
                details={"path": self._path},
                cause=exc,
            ) from exc
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
