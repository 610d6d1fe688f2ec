"""Credential locations and environment settings.

Credentials live under the repo root by default:
    .env                             - settings (SERVICE_ACCOUNT_JSON, SHEET_RECORDS_*)
    google/credentials.json          - Google OAuth client credentials
    google/token.json                - Google OAuth token cache
    google/service_account_key.json  - Google service account key

The .env file is loaded on import. Variables already set in the
environment take precedence over it.
"""

import os
from pathlib import Path

# __file__ is src/sheet_records/config.py, so 3 levels up
REPO_ROOT = Path(__file__).parent.parent.parent
GOOGLE_DIR = REPO_ROOT / "google"

ENV_FILE = REPO_ROOT / ".env"
GOOGLE_CREDENTIALS = GOOGLE_DIR / "credentials.json"
GOOGLE_TOKEN = GOOGLE_DIR / "token.json"
GOOGLE_SERVICE_ACCOUNT = GOOGLE_DIR / "service_account_key.json"

# Environment variable names
SERVICE_ACCOUNT_JSON_VAR = "SERVICE_ACCOUNT_JSON"
DOCUMENT_ID_VAR = "SHEET_RECORDS_DOCUMENT_ID"
TAB_VAR = "SHEET_RECORDS_TAB"
VALUE_INPUT_OPTION_VAR = "SHEET_RECORDS_VALUE_INPUT_OPTION"

DEFAULT_TAB = "IntegrationTest"
DEFAULT_VALUE_INPUT_OPTION = "USER_ENTERED"
VALUE_INPUT_OPTIONS = ("RAW", "USER_ENTERED")


def _load_env_file(env_path: Path) -> dict[str, str]:
    """Load environment variables from a file.

    Args:
        env_path: Path to .env file.

    Returns:
        Dictionary of loaded variables.
    """
    loaded = {}
    if not env_path.exists():
        return loaded

    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip()

            if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
                value = value[1:-1]

            if key and key not in os.environ:
                os.environ[key] = value
                loaded[key] = value

    return loaded


def ensure_google_dir() -> Path:
    """Create the google credentials directory if it doesn't exist."""
    GOOGLE_DIR.mkdir(parents=True, exist_ok=True)
    return GOOGLE_DIR


def get_value_input_option() -> str:
    """How the store interprets written cell text ("RAW" or "USER_ENTERED").

    Raises:
        ValueError: If the environment names an unknown option.
    """
    option = os.environ.get(VALUE_INPUT_OPTION_VAR, DEFAULT_VALUE_INPUT_OPTION).strip().upper()
    if option not in VALUE_INPUT_OPTIONS:
        raise ValueError(
            f"{VALUE_INPUT_OPTION_VAR} must be one of {VALUE_INPUT_OPTIONS}, got '{option}'"
        )
    return option


def get_document_id() -> str | None:
    """Spreadsheet ID configured for the CLI, if any."""
    return os.environ.get(DOCUMENT_ID_VAR) or None


def get_tab_name() -> str:
    """Tab name configured for the CLI."""
    return os.environ.get(TAB_VAR) or DEFAULT_TAB


def get_credential_status() -> dict:
    """Get status of all configured credentials and settings."""
    return {
        "repo_root": str(REPO_ROOT),
        "env_file": ENV_FILE.exists(),
        "google": {
            "credentials": GOOGLE_CREDENTIALS.exists(),
            "token": GOOGLE_TOKEN.exists(),
            "service_account": GOOGLE_SERVICE_ACCOUNT.exists(),
            "service_account_env": bool(os.environ.get(SERVICE_ACCOUNT_JSON_VAR)),
        },
        "sheets": {
            "document_id": get_document_id(),
            "tab": get_tab_name(),
            "value_input_option": os.environ.get(
                VALUE_INPUT_OPTION_VAR, DEFAULT_VALUE_INPUT_OPTION
            ),
        },
    }


# Auto-load .env from repo root on import
_loaded = _load_env_file(ENV_FILE)
