"""Tests for the Google Sheets grid store, using a mocked API service."""

import os
from pathlib import Path
from unittest.mock import MagicMock, Mock, patch

import pytest
from googleapiclient.errors import HttpError

from sheet_records import config
from sheet_records.google import AuthorizationRequired
from sheet_records.records import RangeRef, RecordTable, StoreError
from sheet_records.sheets import SheetsClient


@pytest.fixture
def service():
    return MagicMock()


@pytest.fixture
def values(service):
    return service.spreadsheets.return_value.values.return_value


@pytest.fixture
def client(service):
    return SheetsClient(service=service, value_input_option="USER_ENTERED")


def http_error(status: int) -> HttpError:
    return HttpError(Mock(status=status, reason="error"), b'{"error": {"message": "nope"}}')


class TestGridStoreCalls:
    """Test the four grid store calls."""

    def test_clear(self, client, values, ref):
        """Should clear the named range."""
        client.clear(ref)
        values.clear.assert_called_once_with(
            spreadsheetId="doc-123", range="IntegrationTest", body={}
        )
        values.clear.return_value.execute.assert_called_once()

    def test_write_uses_value_input_option(self, client, values, ref):
        """Should update at the range with USER_ENTERED input."""
        values.update.return_value.execute.return_value = {"updatedRows": 2}
        client.write(ref, [["name"], ["a"]])

        kwargs = values.update.call_args.kwargs
        assert kwargs["spreadsheetId"] == "doc-123"
        assert kwargs["range"] == "IntegrationTest"
        assert kwargs["valueInputOption"] == "USER_ENTERED"
        assert kwargs["body"]["values"] == [["name"], ["a"]]

    def test_append(self, client, values, ref):
        """Should append rows inserting new rows."""
        values.append.return_value.execute.return_value = {"updates": {"updatedRows": 1}}
        client.append(ref, [("a", "1")])

        kwargs = values.append.call_args.kwargs
        assert kwargs["valueInputOption"] == "USER_ENTERED"
        assert kwargs["insertDataOption"] == "INSERT_ROWS"
        assert kwargs["body"]["values"] == [["a", "1"]]

    def test_raw_input_option(self, service, values, ref):
        """Should pass a configured RAW input option through."""
        SheetsClient(service=service, value_input_option="RAW").append(ref, [["a"]])
        assert values.append.call_args.kwargs["valueInputOption"] == "RAW"

    def test_read(self, client, values, ref):
        """Should return values rendered as text."""
        values.get.return_value.execute.return_value = {
            "range": "IntegrationTest!A1:C2",
            "values": [["name", "n", "ok"], ["a", 3, True]],
        }
        assert client.read(ref) == [["name", "n", "ok"], ["a", "3", "TRUE"]]
        assert values.get.call_args.kwargs["valueRenderOption"] == "FORMATTED_VALUE"

    def test_read_no_values(self, client, values, ref):
        """Should return None when the response has no values."""
        values.get.return_value.execute.return_value = {"range": "IntegrationTest!A1:Z1000"}
        assert client.read(ref) is None


class TestErrors:
    """Test failure wrapping."""

    def test_http_error_wrapped(self, client, values, ref):
        """Should raise StoreError with status code and cause."""
        values.clear.return_value.execute.side_effect = http_error(403)
        with pytest.raises(StoreError) as exc_info:
            client.clear(ref)
        assert exc_info.value.status_code == 403
        assert isinstance(exc_info.value.__cause__, HttpError)

    def test_transport_error_wrapped(self, client, values, ref):
        """Should wrap socket errors as StoreError."""
        values.get.return_value.execute.side_effect = TimeoutError("timed out")
        with pytest.raises(StoreError, match="timed out"):
            client.read(ref)

    def test_failed_clear_stops_replace(self, client, values, ref, sample_schema, samples):
        """Should not write when the clear fails."""
        values.clear.return_value.execute.side_effect = http_error(404)
        table = RecordTable(client, ref, sample_schema)
        with pytest.raises(StoreError):
            table.replace(samples[:2])
        values.update.assert_not_called()


class TestRecordTableOnSheets:
    """Test table operations end to end through the client."""

    def test_replace_and_read(self, client, values, ref, sample_schema, samples):
        """Should write a headed grid and decode the same grid back."""
        table = RecordTable(client, ref, sample_schema)
        table.replace(samples[:3])

        written = values.update.call_args.kwargs["body"]["values"]
        assert written[0] == ["name", "number_of_foos", "number_of_bars"]
        assert len(written) == 4

        values.get.return_value.execute.return_value = {"values": written}
        assert table.read() == samples[:3]

    def test_unformatted_floats_keep_precision(self, service, values, ref):
        """Should parse full-precision numbers read with UNFORMATTED_VALUE."""
        from tests.models import Sample
        from sheet_records.records import RecordSchema

        client = SheetsClient(
            service=service,
            value_input_option="USER_ENTERED",
            value_render_option="UNFORMATTED_VALUE",
        )
        values.get.return_value.execute.return_value = {
            "values": [["name", "number_of_foos", "number_of_bars"], ["a", 10, 0.1 + 0.2]]
        }
        records = RecordTable(client, ref, RecordSchema.for_dataclass(Sample)).read()

        assert values.get.call_args.kwargs["valueRenderOption"] == "UNFORMATTED_VALUE"
        assert records == [Sample("a", 10, 0.1 + 0.2)]

    def test_read_ragged_rows(self, client, values, ref):
        """Should pad rows Sheets returned without trailing blanks."""
        from sheet_records.records import TEXT, RecordSchema, optional

        schema = RecordSchema([("a", TEXT), ("b", optional(TEXT))])
        values.get.return_value.execute.return_value = {"values": [["a", "b"], ["x"]]}
        assert RecordTable(client, ref, schema).read() == [{"a": "x", "b": None}]


class TestCredentials:
    """Test default credential selection."""

    def test_env_service_account(self, monkeypatch):
        """Should use the service account JSON from the environment."""
        monkeypatch.setenv("SERVICE_ACCOUNT_JSON", "{}")
        with (
            patch("sheet_records.sheets.client.GoogleServiceAccount") as account,
            patch("sheet_records.sheets.client.build") as build,
        ):
            SheetsClient()._get_service()

        account.from_env.assert_called_once_with(scopes=["sheets"])
        assert build.call_args.kwargs["credentials"] is account.from_env.return_value.credentials

    def test_authorization_required(self, monkeypatch, tmp_path):
        """Should raise AuthorizationRequired with no usable credentials."""
        monkeypatch.delenv("SERVICE_ACCOUNT_JSON", raising=False)
        monkeypatch.setattr(config, "GOOGLE_SERVICE_ACCOUNT", Path(tmp_path / "missing.json"))
        with patch("sheet_records.sheets.client.GoogleOAuth") as oauth:
            oauth.return_value.is_authorized.return_value = False
            oauth.return_value.get_authorization_url.return_value = "https://accounts.google.com/x"
            with pytest.raises(AuthorizationRequired) as exc_info:
                SheetsClient()._get_service()
        assert exc_info.value.authorization_url == "https://accounts.google.com/x"

    def test_value_input_option_from_env(self):
        """Should read the value input option from the environment."""
        with patch.dict(os.environ, {"SHEET_RECORDS_VALUE_INPUT_OPTION": "raw"}):
            assert SheetsClient(service=Mock()).value_input_option == "RAW"

    def test_invalid_value_input_option(self):
        """Should reject unknown value input options."""
        with (
            patch.dict(os.environ, {"SHEET_RECORDS_VALUE_INPUT_OPTION": "LITERAL"}),
            pytest.raises(ValueError, match="SHEET_RECORDS_VALUE_INPUT_OPTION"),
        ):
            SheetsClient(service=Mock())


# Integration test - skip if no credentials
skip_no_sheets = pytest.mark.skipif(
    not os.environ.get("SERVICE_ACCOUNT_JSON") or not os.environ.get("SHEET_RECORDS_DOCUMENT_ID"),
    reason="SERVICE_ACCOUNT_JSON and SHEET_RECORDS_DOCUMENT_ID required",
)


@skip_no_sheets
class TestSheetsIntegration:
    """Round trip against a real spreadsheet."""

    def test_write_append_read(self, sample_schema, samples):
        """Should read back 45 written and 5 appended records."""
        client = SheetsClient()
        document_id = os.environ["SHEET_RECORDS_DOCUMENT_ID"]
        client.ensure_sheet(document_id, config.get_tab_name())

        table = RecordTable(client, RangeRef(document_id, config.get_tab_name()), sample_schema)
        table.replace(samples[:45])
        for sample in samples[45:]:
            table.append(sample)

        assert table.read() == samples
