"""Tests for replace, append and read against an in-memory store."""

import pytest

from sheet_records.records import (
    EncodingError,
    MissingColumnError,
    NoDataError,
    RangeRef,
    RecordTable,
    StoreError,
    append,
    read,
    replace,
)
from tests.models import Sample


class TestReplace:
    """Test full-range replacement."""

    def test_clears_then_writes(self, store, ref, sample_schema, samples):
        """Should clear before writing, with header and data rows."""
        replace(store, ref, samples[:2], sample_schema)
        assert store.actions == ["clear", "write"]
        assert store.grids[ref] == [
            ["name", "number_of_foos", "number_of_bars"],
            ["Object 0", "0", "0.5"],
            ["Object 1", "10", "1.5"],
        ]

    def test_shrinking_leaves_no_residual_rows(self, store, ref, sample_schema, samples):
        """Should return exactly the second record set after two replaces."""
        replace(store, ref, samples[:10], sample_schema)
        replace(store, ref, samples[:3], sample_schema)
        assert read(store, ref, sample_schema) == samples[:3]

    def test_empty_records_only_clear(self, store, ref, sample_schema, samples):
        """Should clear without writing, leaving no data to read."""
        replace(store, ref, samples[:3], sample_schema)
        store.calls.clear()

        replace(store, ref, [], sample_schema)
        assert store.actions == ["clear"]
        with pytest.raises(NoDataError):
            read(store, ref, sample_schema)

    def test_headerless(self, store, ref, sample_schema, samples):
        """Should write only data rows when asked."""
        replace(store, ref, samples[:1], sample_schema, header=False)
        assert store.grids[ref] == [["Object 0", "0", "0.5"]]

    def test_encoding_error_leaves_range(self, store, ref, sample_schema, samples):
        """Should not touch the store when a record can't be encoded."""
        replace(store, ref, samples[:2], sample_schema)
        store.calls.clear()

        with pytest.raises(EncodingError):
            replace(store, ref, [Sample("bad", None, 0.5)], sample_schema)
        assert store.actions == []
        assert read(store, ref, sample_schema) == samples[:2]

    def test_write_failure_after_clear(self, store, ref, sample_schema, samples):
        """Should raise the store error and leave the range cleared."""
        replace(store, ref, samples[:2], sample_schema)
        store.fail_on = "write"

        with pytest.raises(StoreError):
            replace(store, ref, samples[:1], sample_schema)
        assert ref not in store.grids


class TestAppend:
    """Test single-record append."""

    def test_sends_only_data_row(self, store, ref, sample_schema, samples):
        """Should append one row without a header."""
        append(store, ref, samples[0], sample_schema)
        assert store.actions == ["append"]
        assert store.grids[ref] == [["Object 0", "0", "0.5"]]

    def test_after_replace_keeps_single_header(self, store, ref, sample_schema, samples):
        """Should read back [r0, r1] with exactly one header row."""
        replace(store, ref, [samples[0]], sample_schema)
        append(store, ref, samples[1], sample_schema)

        assert read(store, ref, sample_schema) == [samples[0], samples[1]]
        header_rows = [row for row in store.grids[ref] if row == sample_schema.names]
        assert len(header_rows) == 1

    def test_store_failure_propagates(self, store, ref, sample_schema, samples):
        """Should raise StoreError unchanged."""
        store.fail_on = "append"
        with pytest.raises(StoreError, match="append failed"):
            append(store, ref, samples[0], sample_schema)


class TestRead:
    """Test full-table reads."""

    def test_no_data(self, store, ref, sample_schema):
        """Should raise NoDataError for an empty range."""
        with pytest.raises(NoDataError) as exc_info:
            read(store, ref, sample_schema)
        assert exc_info.value.range_name == ref.range_name

    def test_header_only(self, store, ref, sample_schema):
        """Should return no records for a header-only range."""
        store.grids[ref] = [sample_schema.names]
        assert read(store, ref, sample_schema) == []

    def test_reordered_columns(self, store, ref, sample_schema):
        """Should decode a sheet whose columns were rearranged."""
        store.grids[ref] = [
            ["number_of_foos", "number_of_bars", "name"],
            ["5", "0.25", "moved"],
        ]
        assert read(store, ref, sample_schema) == [Sample("moved", 5, 0.25)]

    def test_missing_column(self, store, ref, sample_schema):
        """Should raise MissingColumnError naming the absent field."""
        store.grids[ref] = [["name", "number_of_foos"], ["a", "1"]]
        with pytest.raises(MissingColumnError, match="number_of_bars"):
            read(store, ref, sample_schema)

    def test_ranges_are_independent(self, store, sample_schema, samples):
        """Should keep each range's grid separate."""
        first = RangeRef("doc", "First")
        second = RangeRef("doc", "Second")
        replace(store, first, samples[:2], sample_schema)
        replace(store, second, samples[2:3], sample_schema)
        assert read(store, first, sample_schema) == samples[:2]
        assert read(store, second, sample_schema) == samples[2:3]


class TestRecordTable:
    """Test the bound table wrapper."""

    def test_write_append_read(self, store, ref, sample_schema, samples):
        """Should round-trip 45 written and 5 appended records."""
        table = RecordTable(store, ref, sample_schema)
        table.replace(samples[:45])
        for sample in samples[45:]:
            table.append(sample)

        assert table.read() == samples
        assert store.actions.count("append") == 5

    def test_extend_single_call(self, store, ref, sample_schema, samples):
        """Should append several records in one store call."""
        table = RecordTable(store, ref, sample_schema)
        table.replace(samples[:2])
        store.calls.clear()

        assert table.extend(samples[2:6]) == 4
        assert store.actions == ["append"]
        assert table.read() == samples[:6]

    def test_extend_nothing(self, store, ref, sample_schema):
        """Should skip the store call for no records."""
        table = RecordTable(store, ref, sample_schema)
        assert table.extend([]) == 0
        assert store.actions == []

    def test_clear(self, store, ref, sample_schema, samples):
        """Should erase the range header included."""
        table = RecordTable(store, ref, sample_schema)
        table.replace(samples[:2])
        table.clear()
        with pytest.raises(NoDataError):
            table.read()
