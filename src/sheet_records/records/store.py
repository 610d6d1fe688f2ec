"""Grid store interface used by the table operations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class RangeRef:
    """Where a grid lives: a document and a named range or tab inside it."""

    document_id: str
    range_name: str

    def __str__(self) -> str:
        return f"{self.document_id}:{self.range_name}"


class GridStore(ABC):
    """Abstract remote store of text grids addressed by ``RangeRef``.

    Implementations raise ``StoreError`` for any failure.
    """

    @abstractmethod
    def clear(self, ref: RangeRef) -> None:
        """Erase all cell contents in the range."""

    @abstractmethod
    def write(self, ref: RangeRef, rows: Sequence[Sequence[str]]) -> None:
        """Write ``rows`` starting at the range's origin."""

    @abstractmethod
    def append(self, ref: RangeRef, rows: Sequence[Sequence[str]]) -> None:
        """Add ``rows`` after the existing content of the range."""

    @abstractmethod
    def read(self, ref: RangeRef) -> list[list[str]] | None:
        """Return the full grid of the range, or None if it holds no values."""
