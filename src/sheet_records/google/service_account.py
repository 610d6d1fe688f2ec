"""Google Service Account authentication.

Service accounts authenticate server-to-server without user interaction.
A spreadsheet must be shared with the service account's email address
before the account can read or write it.

The key is read either from a JSON file or from the JSON text held in the
SERVICE_ACCOUNT_JSON environment variable:

Example:
    >>> auth = GoogleServiceAccount.from_env(scopes=["sheets"])
    >>> sheets_service = auth.build_service("sheets", "v4")
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from google.oauth2 import service_account
from googleapiclient.discovery import build

from sheet_records.config import GOOGLE_SERVICE_ACCOUNT, SERVICE_ACCOUNT_JSON_VAR
from sheet_records.google.exceptions import CredentialsNotFoundError, GoogleAuthError
from sheet_records.google.scopes import resolve_scopes

logger = logging.getLogger(__name__)


class GoogleServiceAccount:
    """Google Service Account credentials for the Sheets API."""

    def __init__(
        self,
        key_path: str | Path | None = None,
        scopes: list[str] | None = None,
        key_info: dict[str, Any] | None = None,
    ):
        """Initialize service account authentication.

        Args:
            key_path: Path to the JSON key file. Defaults to google/service_account_key.json.
                      Ignored when ``key_info`` is given.
            scopes: Scope names (e.g., ["sheets"]) or full URLs. Defaults to ["sheets"].
            key_info: Parsed key JSON, as an alternative to a key file.

        Raises:
            CredentialsNotFoundError: If the key file is not found.
            GoogleAuthError: If the key is invalid.
        """
        self.key_path = Path(key_path) if key_path else GOOGLE_SERVICE_ACCOUNT
        self.scopes = resolve_scopes(scopes or ["sheets"])

        if key_info is None:
            key_info = self._load_key_file(self.key_path)
        else:
            self.key_path = None

        if key_info.get("type") != "service_account":
            raise GoogleAuthError(
                f"Invalid key: expected type 'service_account', got '{key_info.get('type')}'"
            )

        self.client_email = key_info.get("client_email", "")
        self.project_id = key_info.get("project_id", "")

        try:
            self._credentials = service_account.Credentials.from_service_account_info(
                key_info,
                scopes=self.scopes,
            )
        except ValueError as e:
            raise GoogleAuthError(f"Invalid service account key: {e}") from e

        logger.info(f"Service account initialized: {self.client_email}")

    @classmethod
    def from_env(
        cls,
        scopes: list[str] | None = None,
        var_name: str = SERVICE_ACCOUNT_JSON_VAR,
    ) -> GoogleServiceAccount:
        """Build from key JSON held in an environment variable.

        Raises:
            CredentialsNotFoundError: If the variable is not set.
            GoogleAuthError: If the variable does not hold valid key JSON.
        """
        raw = os.environ.get(var_name)
        if not raw:
            raise CredentialsNotFoundError(f"${var_name}")

        try:
            key_info = json.loads(raw)
        except json.JSONDecodeError as e:
            raise GoogleAuthError(f"Invalid JSON in ${var_name}: {e}") from e

        return cls(scopes=scopes, key_info=key_info)

    @staticmethod
    def _load_key_file(key_path: Path) -> dict[str, Any]:
        if not key_path.exists():
            raise CredentialsNotFoundError(str(key_path))

        try:
            with open(key_path) as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise GoogleAuthError(f"Invalid JSON in key file: {e}") from e

    @property
    def credentials(self):
        """Get the service account credentials."""
        return self._credentials

    @property
    def email(self) -> str:
        """Service account email address; share spreadsheets with it."""
        return self.client_email

    def build_service(self, service_name: str = "sheets", version: str = "v4"):
        """Build a Google API service with the service account credentials."""
        return build(service_name, version, credentials=self._credentials, cache_discovery=False)

    def get_info(self) -> dict:
        """Get information about the service account."""
        return {
            "type": "service_account",
            "email": self.client_email,
            "project_id": self.project_id,
            "scopes": self.scopes,
            "key_path": str(self.key_path) if self.key_path else None,
        }
