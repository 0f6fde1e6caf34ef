"""Folder picker exports for docgateway."""

from __future__ import annotations

from .tree_picker import (
    RESULT_CANCELED,
    RESULT_OK,
    CompletionHandle,
    FolderPicker,
    PendingPickerSlot,
    PickerCallback,
    PromptFolderPicker,
    StaticFolderPicker,
)

__all__ = [
    "RESULT_OK",
    "RESULT_CANCELED",
    "CompletionHandle",
    "PickerCallback",
    "FolderPicker",
    "PendingPickerSlot",
    "PromptFolderPicker",
    "StaticFolderPicker",
]
