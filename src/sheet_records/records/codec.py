"""Record codec: typed records <-> rectangular grids of text cells.

Encoding writes one row per record with columns in the schema's declared
order, optionally preceded by a header row of field names. Decoding always
treats row 0 as the header and looks every field up by name, so a grid whose
columns were rearranged still decodes correctly.

In an optional field the empty cell always means ``None``. A value that would
render as an empty cell, such as ``""`` in an ``Optional[str]`` field, is
rejected at encode time instead of silently reading back as ``None``.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from sheet_records.records.exceptions import (
    EmptyGridError,
    EncodingError,
    MissingColumnError,
    RowWidthMismatchError,
    TypeMismatchError,
)
from sheet_records.records.schema import RecordSchema

Grid = list[list[str]]


def encode_row(record: Any, schema: RecordSchema) -> list[str]:
    """Render one record as a data row in declared column order.

    Raises:
        EncodingError: If a field is missing or its value cannot be rendered.
    """
    row = []
    for field in schema.fields:
        try:
            value = schema.get_value(record, field.name)
        except (AttributeError, KeyError) as e:
            raise EncodingError(field.name, record, "field missing from record") from e

        if not field.codec.accepts_value(value):
            raise EncodingError(
                field.name, value, f"expected {field.codec.name}, got {type(value).__name__}"
            )
        try:
            text = field.codec.format(value)
        except (TypeError, ValueError, ArithmeticError) as e:
            raise EncodingError(field.name, value, str(e)) from e

        if not isinstance(text, str):
            raise EncodingError(field.name, value, f"codec {field.codec.name} returned non-text")
        if text == "" and value is not None and field.codec.nullable:
            raise EncodingError(
                field.name, value, "an empty cell is reserved for None in an optional field"
            )
        row.append(text)
    return row


def encode(records: Iterable[Any], schema: RecordSchema, header: bool = False) -> Grid:
    """Render records as a grid.

    Args:
        records: Records sharing ``schema``.
        schema: Field declaration.
        header: Prepend a row of field names.

    Returns:
        ``len(records)`` rows (plus the header row when requested), each with
        ``len(schema)`` cells.
    """
    grid: Grid = [schema.names] if header else []
    grid.extend(encode_row(record, schema) for record in records)
    return grid


def header_index(header: Sequence[str], schema: RecordSchema) -> dict[str, int]:
    """Map each schema field name to its column in ``header``.

    Header cells that are not schema fields are ignored. If a name appears
    more than once, the first column wins.

    Raises:
        MissingColumnError: If a schema field is not in the header.
    """
    positions: dict[str, int] = {}
    for j, name in enumerate(header):
        positions.setdefault(str(name).strip(), j)

    index = {}
    for field in schema.fields:
        if field.name not in positions:
            raise MissingColumnError(field.name, [str(h) for h in header])
        index[field.name] = positions[field.name]
    return index


def decode(
    grid: Sequence[Sequence[str]],
    schema: RecordSchema,
    fill_missing: bool = False,
) -> list[Any]:
    """Parse a headed grid back into records.

    Args:
        grid: Row 0 is the header; every following row is one record.
        schema: Target field declaration.
        fill_missing: Pad rows shorter than the header with empty cells
            before checking widths. Google Sheets omits trailing empty cells
            (and returns fully empty rows as ``[]``), so reads from it need this.

    Returns:
        ``len(grid) - 1`` records in grid order.

    Raises:
        EmptyGridError: If the grid has no rows.
        MissingColumnError: If a schema field is absent from the header.
        RowWidthMismatchError: If a data row's width differs from the header's.
        TypeMismatchError: If a cell cannot be parsed for its field.
    """
    if not grid:
        raise EmptyGridError()

    header = list(grid[0])
    width = len(header)
    index = header_index(header, schema)

    records = []
    for row_number, row in enumerate(grid[1:], start=1):
        cells = list(row)
        if fill_missing and len(cells) < width:
            cells.extend([""] * (width - len(cells)))
        if len(cells) != width:
            raise RowWidthMismatchError(row_number, width, len(cells))

        values = {}
        for field in schema.fields:
            raw = cells[index[field.name]]
            try:
                values[field.name] = field.codec.parse(raw)
            except (TypeError, ValueError, ArithmeticError) as e:
                raise TypeMismatchError(field.name, raw, row_number) from e
        records.append(schema.build(values))
    return records
