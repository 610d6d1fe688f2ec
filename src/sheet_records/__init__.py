"""Typed record storage on Google Sheets ranges."""

from sheet_records.records import (
    Field,
    RangeRef,
    RecordSchema,
    RecordTable,
    SheetRecordsError,
)

__version__ = "0.1.0"

__all__ = [
    "Field",
    "RangeRef",
    "RecordSchema",
    "RecordTable",
    "SheetRecordsError",
]
