"""Folder picker UI and the single pending-pick slot."""

from __future__ import annotations

import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Optional

from docgateway.errors import GatewayError, PickerInProgressError
from docgateway.providers.local_storage import LocalStorageProvider
from docgateway.resolver import ContentResolver

logger = logging.getLogger(__name__)

RESULT_OK: int = -1
RESULT_CANCELED: int = 0

# Receives the picked tree URI, or None when nothing was picked.
CompletionHandle = Callable[[Optional[str]], None]

# (request_code, result_code, data_uri)
PickerCallback = Callable[[int, int, Optional[str]], None]


class PendingPickerSlot:
    """Holds at most one outstanding completion handle."""

    def __init__(self) -> None:
        self._handle: Optional[CompletionHandle] = None

    @property
    def is_pending(self) -> bool:
        return self._handle is not None

    def occupy(self, handle: CompletionHandle) -> None:
        if self._handle is not None:
            raise PickerInProgressError("A folder selection is already in progress")
        self._handle = handle

    def take(self) -> Optional[CompletionHandle]:
        """Clear the slot and return what it held."""
        handle, self._handle = self._handle, None
        return handle


class FolderPicker(ABC):
    """
    Interactive folder selection.

    launch() must return promptly; the selection is reported later, exactly
    once, through `complete(request_code, result_code, data_uri)`. A picker
    that reports RESULT_OK is responsible for granting the URI it returns.
    """

    @abstractmethod
    def launch(self, request_code: int, flags: int, complete: PickerCallback) -> None:
        ...


class StaticFolderPicker(FolderPicker):
    """
    Select a preset tree without asking (scripted runs, known Drive folders).

    With tree_uri=None every launch reports a cancellation. Completion is
    scheduled on the running loop when there is one, so launch() never
    delivers re-entrantly.
    """

    def __init__(self, resolver: ContentResolver, tree_uri: Optional[str]) -> None:
        self._resolver = resolver
        self._tree_uri = tree_uri

    def launch(self, request_code: int, flags: int, complete: PickerCallback) -> None:
        if self._tree_uri is None:
            args: tuple[int, int, Optional[str]] = (request_code, RESULT_CANCELED, None)
        else:
            self._resolver.grant_uri_permission(self._tree_uri, flags)
            args = (request_code, RESULT_OK, self._tree_uri)

        try:
            asyncio.get_running_loop().call_soon(complete, *args)
        except RuntimeError:
            complete(*args)


class PromptFolderPicker(FolderPicker):
    """
    Ask for a directory path on the terminal.

    The question runs on a worker thread; when launched from inside an event
    loop, the result is handed back on that loop's thread.
    """

    def __init__(
        self,
        resolver: ContentResolver,
        provider: LocalStorageProvider,
        *,
        prompt: Callable[[str], str] = input,
    ) -> None:
        self._resolver = resolver
        self._provider = provider
        self._prompt = prompt

    def launch(self, request_code: int, flags: int, complete: PickerCallback) -> None:
        try:
            loop: Optional[asyncio.AbstractEventLoop] = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        def deliver(result_code: int, data_uri: Optional[str]) -> None:
            if loop is not None:
                loop.call_soon_threadsafe(complete, request_code, result_code, data_uri)
            else:
                complete(request_code, result_code, data_uri)

        thread = threading.Thread(
            target=self._run,
            args=(flags, deliver),
            name="docgateway-folder-picker",
            daemon=True,
        )
        thread.start()

    def _run(self, flags: int, deliver: Callable[[int, Optional[str]], None]) -> None:
        try:
            answer = self._prompt(f"Folder under {self._provider.root} (empty to cancel): ")
        except EOFError:
            answer = ""

        if not answer.strip():
            deliver(RESULT_CANCELED, None)
            return

        path = Path(answer.strip()).expanduser()
        if not path.is_absolute():
            path = self._provider.root / path
        if not path.is_dir():
            logger.warning("Not a directory, treating pick as cancelled: %s", path)
            deliver(RESULT_CANCELED, None)
            return

        try:
            tree_uri = self._provider.tree_uri_for(path)
        except GatewayError as exc:
            logger.warning("Cannot pick %s: %s", path, exc)
            deliver(RESULT_CANCELED, None)
            return

        self._resolver.grant_uri_permission(tree_uri, flags)
        deliver(RESULT_OK, str(tree_uri))
