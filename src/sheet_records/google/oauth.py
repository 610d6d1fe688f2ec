"""Installed-app OAuth for the Sheets API using Authlib.

Used when a spreadsheet is owned by a person rather than shared with a
service account. The token is cached on disk (google/token.json by default)
in the format google-auth writes, and refreshed when it expires.
"""

import json
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

from authlib.integrations.requests_client import OAuth2Session
from authlib.oauth2 import OAuth2Error
from google.oauth2.credentials import Credentials as GoogleCredentials
from googleapiclient.discovery import build

from sheet_records.config import GOOGLE_CREDENTIALS, GOOGLE_TOKEN
from sheet_records.google.exceptions import (
    CredentialsNotFoundError,
    ScopeMismatchError,
    TokenError,
)
from sheet_records.google.scopes import resolve_scopes

logger = logging.getLogger(__name__)


class GoogleOAuth:
    """OAuth 2.0 authorization and token cache for Google APIs.

    Example:
        >>> auth = GoogleOAuth(scopes=["sheets"])
        >>> if not auth.is_authorized():
        ...     print(f"Visit: {auth.get_authorization_url()}")
        ...     auth.fetch_token(input("Paste redirect URL: "))
        >>> sheets_service = auth.build_service("sheets", "v4")
    """

    AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"

    def __init__(
        self,
        scopes: list[str] | None = None,
        token_path: str | Path | None = None,
        credentials_path: str | Path | None = None,
    ):
        """Initialize Google OAuth.

        Args:
            scopes: Scope names (e.g., ["sheets"]) or full URLs. Defaults to ["sheets"].
            token_path: Token cache file. Defaults to google/token.json.
            credentials_path: OAuth client file. Defaults to google/credentials.json.

        Raises:
            CredentialsNotFoundError: If the OAuth client file is missing.
        """
        self.token_path = Path(token_path) if token_path else GOOGLE_TOKEN
        self.credentials_path = Path(credentials_path) if credentials_path else GOOGLE_CREDENTIALS
        self.required_scopes = resolve_scopes(scopes or ["sheets"])
        self.client_id, self.client_secret = self._load_client_credentials()

        self.session = OAuth2Session(
            client_id=self.client_id,
            client_secret=self.client_secret,
            scope=" ".join(self.required_scopes),
            redirect_uri="http://localhost:0",
            token=self._load_token(),
            update_token=self._save_token,
            token_endpoint=self.TOKEN_URL,
            token_endpoint_auth_method="client_secret_post",
        )
        self.last_refresh: datetime | None = None

    def _load_client_credentials(self) -> tuple[str, str]:
        if not self.credentials_path.exists():
            raise CredentialsNotFoundError(str(self.credentials_path))

        with open(self.credentials_path) as f:
            creds = json.load(f)

        app_creds = creds.get("installed") or creds.get("web")
        if not app_creds:
            raise ValueError("Invalid credentials.json format. Expected 'installed' or 'web' key.")
        return app_creds["client_id"], app_creds["client_secret"]

    def _load_token(self) -> dict[str, Any] | None:
        """Read the cached token, converted to Authlib's format."""
        if not self.token_path.exists():
            logger.info("No cached token found")
            return None

        try:
            with open(self.token_path) as f:
                token_data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load token: {e}")
            return None

        expiry = token_data.get("expiry")
        if isinstance(expiry, str):
            expiry = datetime.fromisoformat(expiry.replace("Z", "+00:00")).timestamp()

        scopes = set(token_data.get("scopes", []))
        missing = set(self.required_scopes) - scopes
        if missing:
            logger.warning(f"Cached token missing required scopes: {missing}")
            return None

        return {
            "access_token": token_data.get("token"),
            "refresh_token": token_data.get("refresh_token"),
            "token_type": token_data.get("type", "Bearer"),
            "expires_at": expiry,
            "scope": " ".join(sorted(scopes)),
        }

    def _save_token(
        self,
        token: dict[str, Any],
        refresh_token: str | None = None,
        access_token: str | None = None,
    ):
        """Write the token cache (Authlib update_token callback)."""
        if access_token:
            token["access_token"] = access_token
        if refresh_token:
            token["refresh_token"] = refresh_token

        token_scopes = set(token.get("scope", "").split())
        missing = set(self.required_scopes) - token_scopes
        if missing:
            raise ScopeMismatchError(missing)

        google_token = {
            "token": token["access_token"],
            "refresh_token": token.get("refresh_token"),
            "token_uri": self.TOKEN_URL,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "scopes": sorted(token_scopes),
            "type": token.get("token_type", "Bearer"),
            "expiry": token.get("expires_at"),
        }

        self.token_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.token_path, "w") as f:
            json.dump(google_token, f, indent=2)

        self.last_refresh = datetime.now()
        logger.info(f"Token saved to {self.token_path}")

    def is_authorized(self) -> bool:
        """Check for a cached token carrying all required scopes."""
        if not self.session.token:
            return False
        token_scopes = set(self.session.token.get("scope", "").split())
        return set(self.required_scopes).issubset(token_scopes)

    def get_authorization_url(self) -> str:
        """Start the authorization flow and return the consent URL."""
        url, _state = self.session.create_authorization_url(
            self.AUTHORIZE_URL,
            access_type="offline",
            prompt="consent",
        )
        return url

    def fetch_token(self, authorization_response: str) -> dict[str, Any]:
        """Exchange the OAuth redirect URL for a token and cache it."""
        token = self.session.fetch_token(
            self.TOKEN_URL,
            authorization_response=authorization_response,
            client_secret=self.client_secret,
        )
        self._save_token(token)
        return token

    def get_credentials(self) -> GoogleCredentials:
        """Get google-auth credentials, refreshing the token if it expired.

        Raises:
            TokenError: If not authorized or the refresh fails.
        """
        if not self.is_authorized():
            raise TokenError("Not authorized or missing required scopes")

        expires_at = self.session.token.get("expires_at") or 0
        if expires_at and expires_at < datetime.now().timestamp():
            logger.info("Token expired, refreshing...")
            try:
                self.session.refresh_token(
                    self.TOKEN_URL,
                    refresh_token=self.session.token.get("refresh_token"),
                )
            except OAuth2Error as e:
                raise TokenError(f"Failed to refresh token: {e}") from e

        return GoogleCredentials(
            token=self.session.token["access_token"],
            refresh_token=self.session.token.get("refresh_token"),
            token_uri=self.TOKEN_URL,
            client_id=self.client_id,
            client_secret=self.client_secret,
            scopes=self.required_scopes,
        )

    def build_service(self, service_name: str = "sheets", version: str = "v4"):
        """Build a Google API service with the current credentials."""
        return build(service_name, version, credentials=self.get_credentials(), cache_discovery=False)

    def get_token_info(self) -> dict[str, Any]:
        """Summarize the cached token: status, scopes, time to expiry."""
        if not self.session.token:
            return {"status": "no_token"}

        token = self.session.token
        expires_at = token.get("expires_at") or 0
        now = datetime.now().timestamp()

        if expires_at:
            expires_in = str(timedelta(seconds=max(0, int(expires_at - now))))
            is_expired = expires_at < now
        else:
            expires_in = "unknown"
            is_expired = False

        return {
            "status": "expired" if is_expired else "valid",
            "scopes": token.get("scope", "").split(),
            "expires_in": expires_in,
            "has_refresh_token": bool(token.get("refresh_token")),
            "last_refresh": self.last_refresh.isoformat() if self.last_refresh else None,
        }
