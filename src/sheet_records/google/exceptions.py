"""Google authentication exceptions."""


class GoogleAuthError(Exception):
    """Base exception for Google authentication errors."""

    pass


class CredentialsNotFoundError(GoogleAuthError):
    """Raised when a credentials or key file is not found."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Credentials not found at {path}. "
            "Download a service account key or OAuth client from Google Cloud Console."
        )


class TokenError(GoogleAuthError):
    """Raised when there's an issue with the OAuth token."""

    pass


class ScopeMismatchError(GoogleAuthError):
    """Raised when token scopes don't match required scopes."""

    def __init__(self, missing_scopes: set[str]):
        self.missing_scopes = missing_scopes
        super().__init__(f"Token missing required scopes: {missing_scopes}")


class AuthorizationRequired(GoogleAuthError):
    """Raised when an API call needs interactive OAuth consent first."""

    def __init__(self, authorization_url: str, message: str | None = None):
        self.authorization_url = authorization_url
        super().__init__(message or f"Authorization required: {authorization_url}")
