"""Google Sheets v4 grid store."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from google.auth import exceptions as google_auth_exceptions
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from sheet_records import config
from sheet_records.google import GoogleOAuth, GoogleServiceAccount
from sheet_records.google.exceptions import AuthorizationRequired
from sheet_records.records.exceptions import StoreError
from sheet_records.records.store import GridStore, RangeRef

logger = logging.getLogger(__name__)

_STORE_ERRORS = (HttpError, google_auth_exceptions.GoogleAuthError, OSError)


@dataclass
class Sheet:
    """Represents a sheet (tab) within a spreadsheet."""

    id: int
    title: str
    index: int
    row_count: int = 1000
    column_count: int = 26


@dataclass
class Spreadsheet:
    """Represents a Google Spreadsheet."""

    id: str
    title: str
    sheets: list[Sheet] | None = None
    url: str | None = None

    def get_sheet(self, title: str) -> Sheet | None:
        """Find a sheet by title."""
        for sheet in self.sheets or []:
            if sheet.title == title:
                return sheet
        return None


def _cell_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    return str(value)


class SheetsClient(GridStore):
    """Grid store backed by the Google Sheets API.

    Credentials are picked in this order unless a ``service`` or
    ``credentials`` object is passed in:
        1. service account key JSON in $SERVICE_ACCOUNT_JSON
        2. service account key file google/service_account_key.json
        3. cached OAuth token google/token.json

    Usage:
        client = SheetsClient()
        ref = RangeRef(spreadsheet_id, "Samples")
        client.clear(ref)
        client.write(ref, [["name", "count"], ["a", "1"]])
        client.append(ref, [["b", "2"]])
        grid = client.read(ref)

    Args:
        service: A built Sheets v4 service (e.g. a test double).
        credentials: google-auth credentials to build the service with.
        value_input_option: How written text is interpreted, "RAW" or
            "USER_ENTERED". USER_ENTERED lets Sheets turn "123" back into a
            number. Defaults to $SHEET_RECORDS_VALUE_INPUT_OPTION or USER_ENTERED.
        value_render_option: How read values are rendered. FORMATTED_VALUE
            returns what the sheet displays, so a float is cut to the column's
            number format and may not parse back to the value written.
            UNFORMATTED_VALUE returns full-precision numbers, but USER_ENTERED
            dates then come back as serial day numbers. Pick it for tables
            with float fields and no date fields.
        insert_data_option: "INSERT_ROWS" or "OVERWRITE" for appends.
    """

    def __init__(
        self,
        service: Any = None,
        credentials: Any = None,
        value_input_option: str | None = None,
        value_render_option: str = "FORMATTED_VALUE",
        insert_data_option: str = "INSERT_ROWS",
    ) -> None:
        self._service = service
        self._credentials = credentials
        self.value_input_option = value_input_option or config.get_value_input_option()
        self.value_render_option = value_render_option
        self.insert_data_option = insert_data_option

    def _get_service(self) -> Any:
        """Get or create Sheets API service."""
        if self._service is None:
            credentials = self._credentials or self._default_credentials()
            self._service = build("sheets", "v4", credentials=credentials, cache_discovery=False)
        return self._service

    def _default_credentials(self) -> Any:
        if os.environ.get(config.SERVICE_ACCOUNT_JSON_VAR):
            return GoogleServiceAccount.from_env(scopes=["sheets"]).credentials
        if config.GOOGLE_SERVICE_ACCOUNT.exists():
            return GoogleServiceAccount(scopes=["sheets"]).credentials

        auth = GoogleOAuth(scopes=["sheets"])
        if not auth.is_authorized():
            raise AuthorizationRequired(
                auth.get_authorization_url(),
                "Sheets API requires credentials. Set SERVICE_ACCOUNT_JSON, "
                "or run 'sheet-records google login' to authorize.",
            )
        return auth.get_credentials()

    def _values(self) -> Any:
        return self._get_service().spreadsheets().values()

    def _execute(self, request: Any, action: str, target: str) -> dict:
        """Run an API request, converting failures to StoreError."""
        try:
            return request.execute()
        except HttpError as e:
            status = getattr(e.resp, "status", None)
            raise StoreError(
                f"Sheets {action} failed for {target}: {e}",
                status_code=int(status) if status else None,
            ) from e
        except _STORE_ERRORS as e:
            raise StoreError(f"Sheets {action} failed for {target}: {e}") from e

    # =========================================================================
    # Grid store
    # =========================================================================

    def clear(self, ref: RangeRef) -> None:
        """Clear all values in the range (formatting is kept)."""
        request = self._values().clear(
            spreadsheetId=ref.document_id,
            range=ref.range_name,
            body={},
        )
        self._execute(request, "clear", str(ref))
        logger.info(f"Cleared {ref}")

    def write(self, ref: RangeRef, rows: Sequence[Sequence[str]]) -> None:
        """Write rows starting at the range's first cell."""
        request = self._values().update(
            spreadsheetId=ref.document_id,
            range=ref.range_name,
            valueInputOption=self.value_input_option,
            includeValuesInResponse=False,
            body={"range": ref.range_name, "values": [list(r) for r in rows]},
        )
        result = self._execute(request, "write", str(ref))
        logger.info(f"Wrote {result.get('updatedRows', len(rows))} rows to {ref}")

    def append(self, ref: RangeRef, rows: Sequence[Sequence[str]]) -> None:
        """Append rows after the last row of the range's table."""
        request = self._values().append(
            spreadsheetId=ref.document_id,
            range=ref.range_name,
            valueInputOption=self.value_input_option,
            insertDataOption=self.insert_data_option,
            includeValuesInResponse=False,
            body={"range": ref.range_name, "values": [list(r) for r in rows]},
        )
        result = self._execute(request, "append", str(ref))
        updated = result.get("updates", {}).get("updatedRows", len(rows))
        logger.info(f"Appended {updated} rows to {ref}")

    def read(self, ref: RangeRef) -> list[list[str]] | None:
        """Read the full range as text cells.

        Returns:
            The grid, or None when Sheets returns no values for the range.
            Sheets drops trailing empty cells, so rows may be ragged.
        """
        request = self._values().get(
            spreadsheetId=ref.document_id,
            range=ref.range_name,
            valueRenderOption=self.value_render_option,
        )
        result = self._execute(request, "read", str(ref))
        values = result.get("values")
        if values is None:
            logger.info(f"No values in {ref}")
            return None

        logger.info(f"Read {len(values)} rows from {ref}")
        return [[_cell_text(cell) for cell in row] for row in values]

    # =========================================================================
    # Sheet management
    # =========================================================================

    def get_spreadsheet(self, spreadsheet_id: str) -> Spreadsheet:
        """Get a spreadsheet and its sheets.

        Raises:
            StoreError: If the spreadsheet cannot be fetched.
        """
        request = self._get_service().spreadsheets().get(spreadsheetId=spreadsheet_id)
        return self._parse_spreadsheet(self._execute(request, "get", spreadsheet_id))

    def add_sheet(self, spreadsheet_id: str, title: str) -> Sheet:
        """Add a new sheet to a spreadsheet."""
        request = self._get_service().spreadsheets().batchUpdate(
            spreadsheetId=spreadsheet_id,
            body={"requests": [{"addSheet": {"properties": {"title": title}}}]},
        )
        result = self._execute(request, "add sheet", f"{spreadsheet_id}:{title}")
        props = result["replies"][0]["addSheet"]["properties"]
        logger.info(f"Added sheet '{title}' to {spreadsheet_id}")
        return Sheet(id=props["sheetId"], title=props["title"], index=props["index"])

    def ensure_sheet(self, spreadsheet_id: str, title: str) -> Sheet:
        """Return the sheet named ``title``, creating it if missing."""
        sheet = self.get_spreadsheet(spreadsheet_id).get_sheet(title)
        return sheet or self.add_sheet(spreadsheet_id, title)

    def _parse_spreadsheet(self, data: dict) -> Spreadsheet:
        """Parse spreadsheet from API response."""
        sheets = []
        for sheet_data in data.get("sheets", []):
            props = sheet_data.get("properties", {})
            grid_props = props.get("gridProperties", {})
            sheets.append(
                Sheet(
                    id=props.get("sheetId", 0),
                    title=props.get("title", ""),
                    index=props.get("index", 0),
                    row_count=grid_props.get("rowCount", 1000),
                    column_count=grid_props.get("columnCount", 26),
                )
            )

        return Spreadsheet(
            id=data["spreadsheetId"],
            title=data.get("properties", {}).get("title", ""),
            sheets=sheets,
            url=data.get("spreadsheetUrl"),
        )
