"""Google OAuth scope names."""

SCOPES = {
    "sheets": "https://www.googleapis.com/auth/spreadsheets",
    "sheets_readonly": "https://www.googleapis.com/auth/spreadsheets.readonly",
    "drive_file": "https://www.googleapis.com/auth/drive.file",
}


def resolve_scopes(scopes: list[str]) -> list[str]:
    """Resolve scope names to full URLs.

    Raises:
        ValueError: If a name is neither a known scope nor a URL.
    """
    resolved = []
    for scope in scopes:
        if scope.startswith("https://"):
            resolved.append(scope)
        elif scope in SCOPES:
            resolved.append(SCOPES[scope])
        else:
            raise ValueError(f"Unknown scope: {scope}. Use full URL or one of: {list(SCOPES.keys())}")
    return resolved
