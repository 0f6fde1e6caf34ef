"""Gateway configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_UNNAMED_PLACEHOLDER: str = "Sem nome"
DEFAULT_PICKER_REQUEST_CODE: int = 8404


@dataclass(slots=True, frozen=True)
class GatewayConfig:
    """
    Settings for StorageAccessGateway.

    unnamed_placeholder: display name used when a provider reports none.
    picker_request_code: request code tagging folder-picker launches; results
        carrying any other code are ignored.
    persist_picked_tree: take a persisted read grant on a freshly picked folder.
    permissions_file: JSON file for persisted grants (None keeps them in memory).
    """

    unnamed_placeholder: str = DEFAULT_UNNAMED_PLACEHOLDER
    picker_request_code: int = DEFAULT_PICKER_REQUEST_CODE
    persist_picked_tree: bool = True
    permissions_file: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.unnamed_placeholder, str) or not self.unnamed_placeholder.strip():
            raise ValueError("GatewayConfig.unnamed_placeholder must be a non-empty string")
        if not isinstance(self.picker_request_code, int) or self.picker_request_code < 0:
            raise ValueError("GatewayConfig.picker_request_code must be a non-negative int")
        if self.permissions_file is not None and not str(self.permissions_file).strip():
            raise ValueError("GatewayConfig.permissions_file must be None or a non-empty path")
