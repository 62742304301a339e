"""
tests/test_loaders.py

Pytest unit tests for record ingestion: CSV text, Excel workbooks, the
sheet URL helpers, and the remote fetch (with requests patched out).

Coverage
--------
- Header mapping, unknown and missing columns
- Lenient numeric coercion
- Retention rule (order id + positive total)
- Parse failures on untokenizable input
- CSV export -> re-ingestion round trip
- Excel ingestion with a title block above the header
- Sheet URL conversion and validation
- Fetch failures mapped to SheetFetchError
"""

from __future__ import annotations

import datetime as dt

import openpyxl
import pytest
import requests

from conftest import make_record
from restaurant_dashboard.errors import RecordParseError, SheetFetchError
from restaurant_dashboard.export import export_filename, records_to_csv
from restaurant_dashboard.loaders import (
    fetch_sheet_records,
    get_sheet_csv_url,
    is_valid_sheet_url,
    load_records_from_csv,
    load_records_from_excel,
    parse_csv_text,
)
from restaurant_dashboard.loaders.utils import (
    cell_to_text,
    date_sort_key,
    parse_hour,
    safe_float,
    safe_int,
)
from restaurant_dashboard.models import OrderRecord

HEADER = "Date,Time,Order_ID,Item_Name,Category,Quantity,Unit_Price,Total_Amount"


class FakeResponse:
    def __init__(self, content: bytes = b"", status_code: int = 200, reason: str = "OK"):
        self.content = content
        self.status_code = status_code
        self.reason = reason

    @property
    def ok(self) -> bool:
        return self.status_code < 400


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------


class TestCoercion:
    @pytest.mark.parametrize(
        "raw, expected",
        [("3", 3), (" 4 ", 4), ("3 pcs", 3), ("2.9", 2), ("abc", 0), ("", 0), (None, 0), (float("nan"), 0)],
    )
    def test_safe_int(self, raw, expected) -> None:
        assert safe_int(raw) == expected

    @pytest.mark.parametrize(
        "raw, expected",
        [("100", 100.0), ("49.5", 49.5), ("12abc", 12.0), (".5", 0.5), ("oops", 0.0), ("", 0.0), (None, 0.0),
         ("1e999", 0.0), (float("inf"), 0.0), (float("nan"), 0.0)],
    )
    def test_safe_float(self, raw, expected) -> None:
        assert safe_float(raw) == expected

    def test_parse_hour(self) -> None:
        assert parse_hour("13:45") == 13
        assert parse_hour("9:05") == 9
        assert parse_hour("") is None
        assert parse_hour("noon") is None

    def test_date_sort_key_uses_calendar_order(self) -> None:
        dates = ["01-07-2024", "02-06-2024", "15-06-2024"]
        assert sorted(dates, key=date_sort_key) == ["02-06-2024", "15-06-2024", "01-07-2024"]

    def test_unparseable_dates_sort_first(self) -> None:
        assert sorted(["01-06-2024", "garbage"], key=date_sort_key) == ["garbage", "01-06-2024"]

    def test_cell_to_text(self) -> None:
        assert cell_to_text(dt.datetime(2024, 6, 1)) == "01-06-2024"
        assert cell_to_text(dt.time(13, 5)) == "13:05"
        assert cell_to_text(1001.0) == "1001"
        assert cell_to_text(None) == ""


# ---------------------------------------------------------------------------
# CSV ingestion
# ---------------------------------------------------------------------------


class TestParseCSVText:
    def test_parses_expected_columns(self) -> None:
        text = f"{HEADER}\n01-06-2024,13:00,A1,Thali,Main,2,100,200\n"
        records = parse_csv_text(text)
        assert records == [
            OrderRecord("01-06-2024", "13:00", "A1", "Thali", "Main", 2, 100.0, 200.0)
        ]

    def test_drops_rows_without_order_id_or_positive_total(self) -> None:
        text = "\n".join([
            HEADER,
            "01-06-2024,13:00,A1,Thali,Main,2,100,200",
            "01-06-2024,13:05,,Soup,Starter,1,50,50",
            "01-06-2024,13:10,A2,Tea,Drinks,1,10,0",
            "01-06-2024,13:15,A3,Tea,Drinks,1,10,-5",
        ])
        records = parse_csv_text(text)
        assert [r.order_id for r in records] == ["A1"]

    def test_bad_numbers_default_instead_of_rejecting(self) -> None:
        text = f"{HEADER}\n01-06-2024,13:15,A3,Lassi,Drinks,two,oops,80\n"
        (record,) = parse_csv_text(text)
        assert record.quantity == 0
        assert record.unit_price == 0.0
        assert record.total_amount == 80.0

    def test_unknown_columns_ignored(self) -> None:
        text = f"{HEADER},Waiter\n01-06-2024,13:00,A1,Thali,Main,2,100,200,Ravi\n"
        (record,) = parse_csv_text(text)
        assert record.item_name == "Thali"

    def test_missing_columns_default(self) -> None:
        text = "Order_ID,Total_Amount\nA1,99.5\n"
        (record,) = parse_csv_text(text)
        assert record.date == ""
        assert record.time == ""
        assert record.item_name == ""
        assert record.quantity == 0
        assert record.total_amount == 99.5

    def test_header_match_is_case_sensitive(self) -> None:
        text = "order_id,total_amount\nA1,99.5\n"
        assert parse_csv_text(text) == []

    def test_values_are_stripped(self) -> None:
        text = f"{HEADER}\n 01-06-2024 , 13:00 , A1 , Thali , Main ,2,100,200\n"
        (record,) = parse_csv_text(text)
        assert record.date == "01-06-2024"
        assert record.order_id == "A1"
        assert record.category == "Main"

    def test_short_rows_are_coerced_then_dropped(self) -> None:
        text = f"{HEADER}\n01-06-2024,13:00,A1,Thali,Main,2,100,200\n01-06-2024,13:00,A5\n"
        records = parse_csv_text(text)
        assert [r.order_id for r in records] == ["A1"]

    def test_trailing_delimiter_on_every_row(self) -> None:
        text = (
            f"{HEADER}\n"
            "01-06-2024,13:00,A1,Thali,Main,2,100,200,\n"
            "02-06-2024,20:00,A2,Soup,Starter,1,50,50,\n"
        )
        records = parse_csv_text(text)
        assert [(r.order_id, r.total_amount) for r in records] == [("A1", 200.0), ("A2", 50.0)]
        assert records[0].date == "01-06-2024"

    def test_row_with_extra_field_is_kept(self) -> None:
        text = (
            f"{HEADER}\n"
            "01-06-2024,13:00,A1,Thali,Main,2,100,200\n"
            "02-06-2024,20:00,A2,Soup,Starter,1,50,50,note\n"
        )
        records = parse_csv_text(text)
        assert [r.order_id for r in records] == ["A1", "A2"]
        assert records[1].total_amount == 50.0
        assert records[1].category == "Starter"

    def test_overflowing_total_is_dropped(self) -> None:
        text = f"{HEADER}\n01-06-2024,13:00,A1,Thali,Main,2,100,1e999\n"
        assert parse_csv_text(text) == []

    def test_blank_lines_skipped(self) -> None:
        text = f"{HEADER}\n\n01-06-2024,13:00,A1,Thali,Main,2,100,200\n\n"
        assert len(parse_csv_text(text)) == 1

    def test_header_only_yields_no_records(self) -> None:
        assert parse_csv_text(HEADER + "\n") == []

    @pytest.mark.parametrize("text", ["", "   ", "\n\n"])
    def test_empty_input_is_a_parse_failure(self, text) -> None:
        with pytest.raises(RecordParseError):
            parse_csv_text(text)

    def test_load_from_file(self, tmp_path) -> None:
        path = tmp_path / "orders.csv"
        path.write_text(f"{HEADER}\n01-06-2024,13:00,A1,Thali,Main,2,100,200\n", encoding="utf-8")
        assert len(load_records_from_csv(path)) == 1

    def test_non_text_file_is_a_parse_failure(self, tmp_path) -> None:
        path = tmp_path / "orders.csv"
        path.write_bytes(b"\xff\xfe\x00\x81\x9f")
        with pytest.raises(RecordParseError):
            load_records_from_csv(path)


# ---------------------------------------------------------------------------
# Export round trip
# ---------------------------------------------------------------------------


class TestExportRoundTrip:
    def test_export_then_ingest_returns_same_records(self) -> None:
        records = [
            make_record(order_id="A1", item_name="Paneer, Tikka", quantity=2, unit_price=130.5),
            make_record(date="02-06-2024", time="20:15", order_id="A2", item_name='Chef "Special"',
                        category="Starter", quantity=1, unit_price=0.1),
            make_record(order_id="A3", quantity=3, unit_price=40, total_amount=125.0),
        ]
        assert parse_csv_text(records_to_csv(records)) == records

    def test_export_has_fixed_header(self) -> None:
        text = records_to_csv([])
        assert text.splitlines() == [HEADER]

    def test_export_filename(self) -> None:
        assert export_filename(dt.date(2024, 6, 2)) == "sales_data_2024-06-02.csv"


# ---------------------------------------------------------------------------
# Excel ingestion
# ---------------------------------------------------------------------------


class TestExcelLoader:
    @pytest.fixture()
    def workbook_path(self, tmp_path):
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = "Orders"
        ws.append(["June sales log"])
        ws.append([])
        ws.append(list(HEADER.split(",")))
        ws.append([dt.datetime(2024, 6, 1), dt.time(13, 0), 1001, "Thali", "Main", 2, 100, 200.0])
        ws.append([dt.datetime(2024, 6, 1), dt.time(13, 30), None, "Soup", "Starter", 1, 50, 50])
        ws.append([None] * 8)
        ws.append(["02-06-2024", "20:00", "A2", "Lassi", "Drinks", 1.0, 80, 80])
        path = tmp_path / "orders.xlsx"
        wb.save(path)
        return path

    def test_loads_rows_below_detected_header(self, workbook_path) -> None:
        records = load_records_from_excel(workbook_path)
        assert records == [
            OrderRecord("01-06-2024", "13:00", "1001", "Thali", "Main", 2, 100.0, 200.0),
            OrderRecord("02-06-2024", "20:00", "A2", "Lassi", "Drinks", 1, 80.0, 80.0),
        ]

    def test_missing_header_is_a_parse_failure(self, tmp_path) -> None:
        wb = openpyxl.Workbook()
        wb.active.append(["nothing", "useful"])
        path = tmp_path / "empty.xlsx"
        wb.save(path)
        with pytest.raises(RecordParseError):
            load_records_from_excel(path)

    def test_unreadable_workbook_is_a_parse_failure(self, tmp_path) -> None:
        path = tmp_path / "broken.xlsx"
        path.write_text("not a workbook")
        with pytest.raises(RecordParseError):
            load_records_from_excel(path)


# ---------------------------------------------------------------------------
# Google Sheets source
# ---------------------------------------------------------------------------


class TestSheetURL:
    def test_extracts_id_from_edit_url(self) -> None:
        url = "https://docs.google.com/spreadsheets/d/abc_DEF-123/edit#gid=0"
        assert get_sheet_csv_url(url) == (
            "https://docs.google.com/spreadsheets/d/abc_DEF-123/export?format=csv"
        )

    def test_bare_id_gets_export_suffix(self) -> None:
        assert get_sheet_csv_url("abc_DEF-123") == (
            "https://docs.google.com/spreadsheets/d/abc_DEF-123/export?format=csv"
        )

    def test_existing_export_url_kept(self) -> None:
        url = "https://example.com/sheet/export?format=csv"
        assert get_sheet_csv_url(url) == url

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://docs.google.com/spreadsheets/d/1ZavNIywb80lOThdIXM7zH9FCUj1N8hPe9v1azr2O0gA", True),
            ("1ZavNIywb80lOThdIXM7zH9FCUj1N8hPe9v1azr2O0gA", True),
            ("short-id", False),
            ("https://example.com/sheet", False),
            ("", False),
        ],
    )
    def test_is_valid_sheet_url(self, url, expected) -> None:
        assert is_valid_sheet_url(url) is expected


class TestFetchSheet:
    def test_success_parses_records(self, monkeypatch) -> None:
        body = f"{HEADER}\r\n01-06-2024,13:00,A1,Thali,Main,2,100,200\r\n".encode("utf-8")
        calls = []

        def fake_get(url, timeout):
            calls.append(url)
            return FakeResponse(body)

        monkeypatch.setattr(requests, "get", fake_get)
        records = fetch_sheet_records("abc_DEF-123")
        assert calls == ["https://docs.google.com/spreadsheets/d/abc_DEF-123/export?format=csv"]
        assert [r.order_id for r in records] == ["A1"]

    def test_http_error_status(self, monkeypatch) -> None:
        monkeypatch.setattr(requests, "get", lambda url, timeout: FakeResponse(status_code=404, reason="Not Found"))
        with pytest.raises(SheetFetchError) as excinfo:
            fetch_sheet_records("abc_DEF-123")
        assert excinfo.value.status_code == 404

    def test_transport_error(self, monkeypatch) -> None:
        def boom(url, timeout):
            raise requests.ConnectionError("unreachable")

        monkeypatch.setattr(requests, "get", boom)
        with pytest.raises(SheetFetchError):
            fetch_sheet_records("abc_DEF-123")
