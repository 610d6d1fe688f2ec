"""Shared fixtures: sample records and an in-memory grid store."""

from __future__ import annotations

import pytest

from sheet_records.records import GridStore, RangeRef, RecordSchema, StoreError
from tests.models import Sample


class MemoryGridStore(GridStore):
    """Grid store keeping one grid per range, with a log of every call."""

    def __init__(self) -> None:
        self.grids: dict[RangeRef, list[list[str]]] = {}
        self.calls: list[tuple[str, RangeRef]] = []
        self.fail_on: str | None = None

    def _record(self, action: str, ref: RangeRef) -> None:
        self.calls.append((action, ref))
        if action == self.fail_on:
            raise StoreError(f"{action} failed")

    def clear(self, ref):
        self._record("clear", ref)
        self.grids.pop(ref, None)

    def write(self, ref, rows):
        self._record("write", ref)
        grid = self.grids.setdefault(ref, [])
        for i, row in enumerate(rows):
            if i < len(grid):
                grid[i] = list(row)
            else:
                grid.append(list(row))

    def append(self, ref, rows):
        self._record("append", ref)
        self.grids.setdefault(ref, []).extend(list(r) for r in rows)

    def read(self, ref):
        self._record("read", ref)
        grid = self.grids.get(ref)
        if not grid:
            return None
        return [list(r) for r in grid]

    @property
    def actions(self) -> list[str]:
        return [action for action, _ in self.calls]


@pytest.fixture
def store():
    return MemoryGridStore()


@pytest.fixture
def ref():
    return RangeRef("doc-123", "IntegrationTest")


@pytest.fixture
def sample_schema():
    return RecordSchema.for_dataclass(Sample)


@pytest.fixture
def samples():
    return [
        Sample(name=f"Object {i}", number_of_foos=i * 10, number_of_bars=i + 0.5) for i in range(50)
    ]
