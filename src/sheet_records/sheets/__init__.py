"""Google Sheets grid store.

Usage:
    from sheet_records.sheets import SheetsClient
    from sheet_records.records import RangeRef, RecordSchema, RecordTable

    table = RecordTable(SheetsClient(), RangeRef(spreadsheet_id, "Samples"), schema)
    table.replace(samples)

Credential setup:
    1. Create a service account key in Google Cloud Console
    2. Import: sheet-records google import-key ~/Downloads/key.json
       (or export its JSON as SERVICE_ACCOUNT_JSON)
    3. Share the spreadsheet with the service account email
"""

from __future__ import annotations

from sheet_records.sheets.client import Sheet, SheetsClient, Spreadsheet

__all__ = ["SheetsClient", "Spreadsheet", "Sheet"]
