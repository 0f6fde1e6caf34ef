"""OAuth credentials for the Drive document provider."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Sequence

from docgateway.errors import AuthError

DRIVE_READONLY_SCOPE: str = "https://www.googleapis.com/auth/drive.readonly"


@dataclass(slots=True, frozen=True)
class DriveAuth:
    """
    Paths for the installed-app OAuth flow.

    client_secrets_file: OAuth client secrets JSON.
    token_file: authorized-user token JSON (created/updated on refresh).
    """

    client_secrets_file: str
    token_file: str
    scopes: tuple[str, ...] = (DRIVE_READONLY_SCOPE,)

    def __post_init__(self) -> None:
        for key in ("client_secrets_file", "token_file"):
            value = getattr(self, key)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"DriveAuth.{key} must be a non-empty string")
        if not self.scopes or not all(isinstance(s, str) and s.strip() for s in self.scopes):
            raise ValueError("DriveAuth.scopes must be a non-empty sequence of strings")


class OAuthClient:
    """Load, refresh, or obtain OAuth credentials and build the Drive service."""

    def __init__(self, auth: DriveAuth) -> None:
        self._auth = auth

    def get_credentials(self):
        """
        Return valid google.oauth2 credentials.

        Loads token_file if present and refreshes it when expired; otherwise
        runs the local-server OAuth flow. The token is saved after refresh or
        flow.

        Raises:
            AuthError: on load/refresh/flow failures.
        """
        try:
            from google.auth.transport.requests import Request
            from google.oauth2.credentials import Credentials
            from google_auth_oauthlib.flow import InstalledAppFlow
        except ImportError as exc:  # pragma: no cover
            raise AuthError(
                "Google auth libraries are not available",
                details={"hint": "Install google-auth and google-auth-oauthlib"},
                cause=exc,
            ) from exc

        scopes = list(self._auth.scopes)
        token_file = self._auth.token_file

        if os.path.exists(token_file):
            try:
                creds = Credentials.from_authorized_user_file(token_file, scopes=scopes)
            except (OSError, ValueError) as exc:
                raise AuthError(
                    "Failed to load token_file",
                    details={"token_file": token_file},
                    cause=exc,
                ) from exc

            if creds.valid:
                return creds
            if creds.expired and creds.refresh_token:
                try:
                    creds.refresh(Request())
                except Exception as exc:
                    raise AuthError(
                        "Failed to refresh OAuth credentials",
                        details={"token_file": token_file},
                        cause=exc,
                    ) from exc
                self._save(creds)
                return creds

        try:
            flow = InstalledAppFlow.from_client_secrets_file(
                self._auth.client_secrets_file,
                scopes=scopes,
            )
            creds = flow.run_local_server(port=0)
        except Exception as exc:
            raise AuthError(
                "OAuth authorization flow failed",
                details={"client_secrets_file": self._auth.client_secrets_file},
                cause=exc,
            ) from exc
        self._save(creds)
        return creds

    def build_drive_service(self):
        """Build a Drive v3 service resource (googleapiclient.discovery.Resource)."""
        from googleapiclient.discovery import build

        creds = self.get_credentials()
        try:
            return build("drive", "v3", credentials=creds, cache_discovery=False)
        except Exception as exc:
            raise AuthError("Failed to build Drive service", cause=exc) from exc

    def _save(self, creds) -> None:
        token_file = self._auth.token_file
        token_dir = os.path.dirname(token_file)
        if token_dir:
            os.makedirs(token_dir, exist_ok=True)
        try:
            with open(token_file, "w", encoding="utf-8") as f:
                f.write(creds.to_json())
        except OSError as exc:
            raise AuthError(
                "Failed to save OAuth token file",
                details={"token_file": token_file},
                cause=exc,
            ) from exc


def scopes_from_text(value: str) -> Sequence[str]:
    """Split a comma-separated scope list, dropping blanks."""
    return tuple(s.strip() for s in value.split(",") if s.strip())
