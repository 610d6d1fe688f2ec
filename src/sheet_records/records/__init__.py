"""Typed records stored as rows of a grid.

Usage:
    from sheet_records.records import RecordSchema, RecordTable, RangeRef

    schema = RecordSchema.for_dataclass(Sample)
    table = RecordTable(store, RangeRef(document_id, "Samples"), schema)
    table.replace(samples)
    table.append(extra)
    rows = table.read()
"""

from __future__ import annotations

from sheet_records.records.codec import Grid, decode, encode, encode_row, header_index
from sheet_records.records.exceptions import (
    DecodeError,
    EmptyGridError,
    EncodingError,
    MissingColumnError,
    NoDataError,
    ReadError,
    RowWidthMismatchError,
    SheetRecordsError,
    StoreError,
    TypeMismatchError,
)
from sheet_records.records.schema import (
    BOOLEAN,
    DATE,
    DATETIME,
    DECIMAL,
    FLOAT,
    INTEGER,
    TEXT,
    Field,
    RecordSchema,
    TextCodec,
    codec_for_type,
    enum_codec,
    optional,
)
from sheet_records.records.store import GridStore, RangeRef
from sheet_records.records.table import RecordTable, append, read, replace

__all__ = [
    "Grid",
    "encode",
    "encode_row",
    "decode",
    "header_index",
    "RecordSchema",
    "Field",
    "TextCodec",
    "TEXT",
    "INTEGER",
    "FLOAT",
    "BOOLEAN",
    "DECIMAL",
    "DATE",
    "DATETIME",
    "optional",
    "enum_codec",
    "codec_for_type",
    "GridStore",
    "RangeRef",
    "RecordTable",
    "replace",
    "append",
    "read",
    "SheetRecordsError",
    "EncodingError",
    "DecodeError",
    "EmptyGridError",
    "MissingColumnError",
    "TypeMismatchError",
    "RowWidthMismatchError",
    "ReadError",
    "NoDataError",
    "StoreError",
]
