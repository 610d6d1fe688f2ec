"""Table operations: replace, append and read typed records on a grid store.

Each operation is one short sequence of store calls with no retries and no
state kept between calls. A failure at any step raises immediately and
leaves the range as the failed step left it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from sheet_records.records import codec
from sheet_records.records.exceptions import NoDataError
from sheet_records.records.schema import RecordSchema
from sheet_records.records.store import GridStore, RangeRef

logger = logging.getLogger(__name__)


def replace(
    store: GridStore,
    ref: RangeRef,
    records: Sequence[Any],
    schema: RecordSchema,
    header: bool = True,
) -> None:
    """Overwrite the whole range with exactly ``records``.

    The range is cleared first, so rows left over from a longer previous
    table do not survive. With no records only the clear is issued.

    Args:
        store: Grid store.
        ref: Target range.
        records: Records sharing ``schema``.
        schema: Field declaration.
        header: Write the header row above the data rows. ``read`` and
            ``append`` rely on it; pass False to write data rows only.

    Raises:
        EncodingError: If a record cannot be rendered. Nothing is cleared.
        StoreError: If the clear or the write fails.
    """
    # Encode first: a record that fails to encode leaves the range untouched
    grid = codec.encode(records, schema, header=header) if records else []

    store.clear(ref)
    if not grid:
        logger.debug(f"Cleared {ref}; no records to write")
        return

    store.write(ref, grid)
    logger.debug(f"Replaced {ref} with {len(records)} records")


def append(store: GridStore, ref: RangeRef, record: Any, schema: RecordSchema) -> None:
    """Add one record as a new trailing row.

    The range is expected to already carry a header row; none is written.

    Raises:
        EncodingError: If the record cannot be rendered.
        StoreError: If the append fails.
    """
    grid = codec.encode([record], schema, header=True)
    data_rows = grid[1:]
    store.append(ref, data_rows)
    logger.debug(f"Appended 1 record to {ref}")


def read(
    store: GridStore,
    ref: RangeRef,
    schema: RecordSchema,
    fill_missing: bool = True,
) -> list[Any]:
    """Fetch the whole range and decode it.

    Args:
        store: Grid store.
        ref: Source range. Row 0 must be the header.
        schema: Target field declaration.
        fill_missing: See ``codec.decode``.

    Raises:
        NoDataError: If the store has no values for the range.
        DecodeError: If the grid does not fit ``schema``.
        StoreError: If the read fails.
    """
    grid = store.read(ref)
    if grid is None:
        raise NoDataError(ref.range_name)

    records = codec.decode(grid, schema, fill_missing=fill_missing)
    logger.debug(f"Read {len(records)} records from {ref}")
    return records


class RecordTable:
    """A range bound to a store and a record schema.

    Usage:
        table = RecordTable(SheetsClient(), RangeRef(doc_id, "Samples"), schema)
        table.replace(samples[:45])
        for sample in samples[45:]:
            table.append(sample)
        assert table.read() == samples
    """

    def __init__(self, store: GridStore, ref: RangeRef, schema: RecordSchema) -> None:
        self.store = store
        self.ref = ref
        self.schema = schema

    def replace(self, records: Sequence[Any], header: bool = True) -> None:
        """Overwrite the range with ``records``. See ``replace``."""
        replace(self.store, self.ref, records, self.schema, header=header)

    def append(self, record: Any) -> None:
        """Append one record. See ``append``."""
        append(self.store, self.ref, record, self.schema)

    def extend(self, records: Iterable[Any]) -> int:
        """Append several records with a single store call.

        Returns:
            Number of records appended.
        """
        rows = codec.encode(records, self.schema)
        if rows:
            self.store.append(self.ref, rows)
        logger.debug(f"Appended {len(rows)} records to {self.ref}")
        return len(rows)

    def read(self, fill_missing: bool = True) -> list[Any]:
        """Read all records. See ``read``."""
        return read(self.store, self.ref, self.schema, fill_missing=fill_missing)

    def clear(self) -> None:
        """Erase the range, header included."""
        self.store.clear(self.ref)
