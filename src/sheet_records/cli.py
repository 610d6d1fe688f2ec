"""CLI for sheet-records.

Usage:
    sheet-records init                        # Create directories, show setup instructions
    sheet-records status                      # Show credential and settings status
    sheet-records google import-key <path>    # Import service account key
    sheet-records google import <path>        # Import OAuth client credentials
    sheet-records google login                # Interactive OAuth login
    sheet-records google status               # Show OAuth token status
    sheet-records dump <document> <range>     # Print a range's raw grid as JSON
    sheet-records demo [--document ID]        # Write, append and read back sample records
"""

from __future__ import annotations

import argparse
import json
import logging
import shutil
import sys
import webbrowser
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Sample:
    """Record type written by the demo command."""

    name: str
    number_of_foos: int
    number_of_bars: float


def generate_samples(n: int) -> list[Sample]:
    """Build ``n`` distinct sample records."""
    return [
        Sample(name=f"Object {i}", number_of_foos=i * 10, number_of_bars=i + 0.5)
        for i in range(n)
    ]


def cmd_init() -> int:
    """Initialize the credential directory structure."""
    from sheet_records.config import (
        ENV_FILE,
        GOOGLE_CREDENTIALS,
        GOOGLE_DIR,
        GOOGLE_SERVICE_ACCOUNT,
        ensure_google_dir,
    )

    print("=" * 60)
    print("SHEET-RECORDS SETUP")
    print("=" * 60)
    print()

    ensure_google_dir()
    print(f"Created: {GOOGLE_DIR}/")
    print()
    print("Credential locations:")
    print()
    print(f"  {GOOGLE_SERVICE_ACCOUNT}")
    print("    Service account key (or put its JSON in SERVICE_ACCOUNT_JSON)")
    print()
    print(f"  {GOOGLE_CREDENTIALS}")
    print("    OAuth client credentials, for spreadsheets you own")
    print()
    print(f"  {ENV_FILE}")
    print("    SHEET_RECORDS_DOCUMENT_ID, SHEET_RECORDS_TAB, SHEET_RECORDS_VALUE_INPUT_OPTION")
    print()
    print("Share the spreadsheet with the service account email before use.")
    return 0


def cmd_status() -> int:
    """Show credential and settings status."""
    from sheet_records.config import get_credential_status

    status = get_credential_status()
    google = status["google"]
    sheets = status["sheets"]

    print("=" * 60)
    print("SHEET-RECORDS STATUS")
    print("=" * 60)
    print()
    print(f"Repository: {status['repo_root']}")
    print()
    print("Google:")
    print(f"  SERVICE_ACCOUNT_JSON:   {'[x]' if google['service_account_env'] else '[ ]'}")
    print(f"  service_account_key:    {'[x]' if google['service_account'] else '[ ]'}")
    print(f"  credentials.json:       {'[x]' if google['credentials'] else '[ ]'}")
    print(f"  token.json:             {'[x]' if google['token'] else '[ ]'}")
    print()
    print("Sheets:")
    print(f"  document:           {sheets['document_id'] or '(not set)'}")
    print(f"  tab:                {sheets['tab']}")
    print(f"  value input option: {sheets['value_input_option']}")
    return 0


def cmd_dump(document_id: str, range_name: str) -> int:
    """Print the raw grid of a range."""
    from sheet_records.google import GoogleAuthError
    from sheet_records.records import RangeRef, SheetRecordsError
    from sheet_records.sheets import SheetsClient

    try:
        grid = SheetsClient().read(RangeRef(document_id, range_name))
    except (SheetRecordsError, GoogleAuthError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    if grid is None:
        print("No data")
        return 1

    print(json.dumps(grid, indent=2, ensure_ascii=False))
    return 0


def cmd_demo(document_id: str | None, tab: str, count: int = 50, appended: int = 5) -> int:
    """Replace a tab with sample records, append more, and read them back."""
    from sheet_records.google import GoogleAuthError
    from sheet_records.records import RangeRef, RecordSchema, RecordTable, SheetRecordsError
    from sheet_records.sheets import SheetsClient

    if not document_id:
        print("Error: no document. Pass --document or set SHEET_RECORDS_DOCUMENT_ID")
        return 1

    # replace() writes the header row, so at least one record must go through it
    if not 0 <= appended < count:
        print("Error: --appended must be at least 0 and less than --count")
        return 1

    samples = generate_samples(count)
    written = samples[: count - appended]

    try:
        client = SheetsClient()
        table = RecordTable(client, RangeRef(document_id, tab), RecordSchema.for_dataclass(Sample))
        client.ensure_sheet(document_id, tab)
        table.replace(written)
        print(f"Wrote {len(written)} records to '{tab}'")

        for sample in samples[len(written) :]:
            table.append(sample)
        print(f"Appended {len(samples) - len(written)} records")

        returned = table.read()
    except (SheetRecordsError, GoogleAuthError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    if returned != samples:
        print(f"[✗] Read {len(returned)} records; they differ from what was written")
        return 1

    print(f"[✓] Read back {len(returned)} records, all equal")
    return 0


def google_import_key(source_path: str) -> int:
    """Import service account key from a file."""
    from sheet_records.config import GOOGLE_SERVICE_ACCOUNT, ensure_google_dir

    source = Path(source_path).expanduser()
    if not source.exists():
        print(f"Error: File not found: {source}")
        return 1

    try:
        with open(source) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON: {e}")
        return 1

    if data.get("type") != "service_account":
        print("Error: Invalid service account key format")
        print(f"Expected type 'service_account', got '{data.get('type')}'")
        return 1

    ensure_google_dir()
    shutil.copy2(source, GOOGLE_SERVICE_ACCOUNT)

    print("Imported service account key")
    print(f"  To:    {GOOGLE_SERVICE_ACCOUNT}")
    print(f"  Email: {data.get('client_email', 'unknown')}")
    print()
    print("Share your spreadsheets with the service account email!")
    return 0


def google_import(source_path: str) -> int:
    """Import OAuth client credentials from a file."""
    from sheet_records.config import GOOGLE_CREDENTIALS, ensure_google_dir

    source = Path(source_path).expanduser()
    if not source.exists():
        print(f"Error: File not found: {source}")
        return 1

    try:
        with open(source) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON: {e}")
        return 1

    if "installed" not in data and "web" not in data:
        print("Error: Invalid OAuth credentials format")
        print("Expected 'installed' or 'web' key in JSON")
        return 1

    ensure_google_dir()
    shutil.copy2(source, GOOGLE_CREDENTIALS)

    print("Imported OAuth credentials")
    print(f"  To: {GOOGLE_CREDENTIALS}")
    print()
    print("Next: Run 'sheet-records google login' to authorize")
    return 0


def google_login(scopes: list[str], no_browser: bool = False) -> int:
    """Interactive Google OAuth login."""
    from sheet_records.google import CredentialsNotFoundError, GoogleOAuth

    try:
        auth = GoogleOAuth(scopes=scopes)
    except CredentialsNotFoundError as e:
        print(f"Error: {e}")
        print("Run 'sheet-records init' for setup instructions")
        return 1

    if auth.is_authorized() and auth.get_token_info()["status"] == "valid":
        print("Already authorized with valid token")
        return google_status(scopes)

    url = auth.get_authorization_url()
    print(f"Authorization URL:\n{url}\n")
    if not no_browser:
        webbrowser.open(url)

    redirect_url = input("Paste redirect URL: ").strip()
    if not redirect_url:
        print("No URL provided; aborting.")
        return 1

    try:
        auth.fetch_token(redirect_url)
    except Exception as e:
        print(f"Error: {e}")
        return 1

    print("Token saved successfully!")
    return google_status(scopes)


def google_status(scopes: list[str]) -> int:
    """Show Google OAuth token status."""
    from sheet_records.google import CredentialsNotFoundError, GoogleOAuth

    try:
        auth = GoogleOAuth(scopes=scopes)
    except CredentialsNotFoundError as e:
        print(f"Error: {e}")
        return 1

    info = auth.get_token_info()
    if info["status"] == "no_token":
        print("No token found - run 'sheet-records google login'")
        return 1

    print(f"Status     : {info['status']}")
    print(f"Scopes     : {', '.join(info.get('scopes', []))}")
    print(f"Expires in : {info.get('expires_in', 'unknown')}")
    return 0


def parse_scopes(scope_str: str | None) -> list[str]:
    """Parse comma-separated scopes."""
    if not scope_str:
        return ["sheets"]
    return [s.strip() for s in scope_str.split(",") if s.strip()]


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    from sheet_records.config import get_document_id, get_tab_name

    parser = argparse.ArgumentParser(
        prog="sheet-records",
        description="Typed record storage on Google Sheets ranges",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log store calls")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    subparsers.add_parser("init", help="Initialize credential directories")
    subparsers.add_parser("status", help="Show credential status")

    dump_parser = subparsers.add_parser("dump", help="Print a range's raw grid as JSON")
    dump_parser.add_argument("document", help="Spreadsheet ID")
    dump_parser.add_argument("range", help="Tab name or A1 range")

    demo_parser = subparsers.add_parser("demo", help="Round-trip sample records through a tab")
    demo_parser.add_argument("--document", default=get_document_id(), help="Spreadsheet ID")
    demo_parser.add_argument("--tab", default=get_tab_name(), help="Tab name")
    demo_parser.add_argument("--count", type=int, default=50, help="Records in total")
    demo_parser.add_argument("--appended", type=int, default=5, help="Records appended one by one")

    google_parser = subparsers.add_parser("google", help="Google credential management")
    google_subparsers = google_parser.add_subparsers(dest="google_command", help="Command")

    login_parser = google_subparsers.add_parser("login", help="Interactive OAuth login")
    login_parser.add_argument("--scopes", type=str, default="sheets", help="Comma-separated scopes")
    login_parser.add_argument(
        "--no-browser", action="store_true", help="Don't open browser automatically"
    )

    status_parser = google_subparsers.add_parser("status", help="Show token status")
    status_parser.add_argument("--scopes", type=str, default="sheets", help="Comma-separated scopes")

    import_parser = google_subparsers.add_parser("import", help="Import OAuth credentials")
    import_parser.add_argument("path", help="Path to credentials.json file")

    import_key_parser = google_subparsers.add_parser("import-key", help="Import service account key")
    import_key_parser.add_argument("path", help="Path to service account JSON key file")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "init":
        return cmd_init()

    if args.command == "status":
        return cmd_status()

    if args.command == "dump":
        return cmd_dump(args.document, args.range)

    if args.command == "demo":
        return cmd_demo(args.document, args.tab, args.count, args.appended)

    if args.command == "google":
        scopes = parse_scopes(getattr(args, "scopes", None))

        if args.google_command == "login":
            return google_login(scopes, args.no_browser)
        elif args.google_command == "status":
            return google_status(scopes)
        elif args.google_command == "import":
            return google_import(args.path)
        elif args.google_command == "import-key":
            return google_import_key(args.path)
        else:
            google_parser.print_help()
            return 0

    return 0


if __name__ == "__main__":
    sys.exit(main())
