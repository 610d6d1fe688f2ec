"""Record storage exceptions."""

from __future__ import annotations


class SheetRecordsError(Exception):
    """Base exception for record encoding, decoding and storage errors."""


class EncodingError(SheetRecordsError):
    """Raised when a field value cannot be rendered to cell text."""

    def __init__(self, field: str, value: object, reason: str | None = None):
        self.field = field
        self.value = value
        message = f"Cannot encode field '{field}' value {value!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class DecodeError(SheetRecordsError):
    """Raised when a grid is structurally incompatible with a record schema."""


class EmptyGridError(DecodeError):
    """Raised when a grid has no rows, so there is no header to consult."""

    def __init__(self) -> None:
        super().__init__("Grid has no rows; expected a header row")


class MissingColumnError(DecodeError):
    """Raised when a schema field is absent from the header row."""

    def __init__(self, name: str, header: list[str] | None = None):
        self.name = name
        self.header = header or []
        super().__init__(f"Column '{name}' not found in header {self.header}")


class TypeMismatchError(DecodeError):
    """Raised when a cell cannot be parsed into its field's declared type."""

    def __init__(self, field: str, raw: str, row: int | None = None):
        self.field = field
        self.raw = raw
        self.row = row
        where = f" (row {row})" if row is not None else ""
        super().__init__(f"Cannot parse {raw!r} for field '{field}'{where}")


class RowWidthMismatchError(DecodeError):
    """Raised when a data row's cell count differs from the header's."""

    def __init__(self, row: int, expected: int, actual: int):
        self.row = row
        self.expected = expected
        self.actual = actual
        super().__init__(f"Row {row} has {actual} cells, header has {expected}")


class ReadError(SheetRecordsError):
    """Base exception for read failures that are not decode failures."""


class NoDataError(ReadError):
    """Raised when the store returns no values for a range."""

    def __init__(self, range_name: str):
        self.range_name = range_name
        super().__init__(f"No data in range '{range_name}'")


class StoreError(SheetRecordsError):
    """Raised when the grid store fails a clear, write, append or read call.

    The underlying exception is chained as ``__cause__``.
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
