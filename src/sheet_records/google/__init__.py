"""Google credentials for the Sheets API: service account or OAuth."""

from sheet_records.google.exceptions import (
    AuthorizationRequired,
    CredentialsNotFoundError,
    GoogleAuthError,
    ScopeMismatchError,
    TokenError,
)
from sheet_records.google.oauth import GoogleOAuth
from sheet_records.google.scopes import SCOPES, resolve_scopes
from sheet_records.google.service_account import GoogleServiceAccount

__all__ = [
    "GoogleOAuth",
    "GoogleServiceAccount",
    "SCOPES",
    "resolve_scopes",
    "GoogleAuthError",
    "AuthorizationRequired",
    "CredentialsNotFoundError",
    "TokenError",
    "ScopeMismatchError",
]
