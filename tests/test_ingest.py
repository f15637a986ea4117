from datetime import datetime

import pandas as pd
import pytest

from salesdash.ingest import IngestError, coerce_date, locate_store_columns, parse_frame, parse_workbook

WIDTH = 13


def _row(*cells):
    cells = list(cells)
    return cells + [None] * (WIDTH - len(cells))


def _sheet():
    return pd.DataFrame([
        _row("cstore daily report - January"),
        _row("Date", "Dark store", None, None, "Tagmo", None, None, "Heliopolis", None, None, "Maadi"),
        _row(datetime(2024, 1, 1), 30, 9000, None, 10, 4000, None, 0, 0, None, 5, 1500),
        _row(45293, 12, 3600.5, None, 0, 0, None, 7, 2100, None, 0, 0),
        _row("2024-01-03", 1, 100, None, 2, 200, None, 3, 300, None, 4, 400),
        _row("Total", 43, 12700, None, 12, 4200, None, 10, 2400, None, 9, 1900),
        _row("notes"),
        _row(None, 1, 1),
    ])


def test_coerce_date_variants():
    assert coerce_date(datetime(2024, 1, 1, 0, 0)) == "2024-01-01"
    assert coerce_date(45292) == "2024-01-01"
    assert coerce_date("2024-01-03") == "2024-01-03"
    assert coerce_date("Total") is None
    assert coerce_date("average") is None
    assert coerce_date("notes") is None
    assert coerce_date(12) is None
    assert coerce_date(float("nan")) is None


def test_parse_frame_positional():
    records = parse_frame(_sheet())
    by_key = {(r.date, r.store_name): r for r in records}

    assert ("2024-01-01", "Heliopolis") not in by_key  # zero orders and sales
    assert by_key[("2024-01-01", "Dark store")].orders == 30
    assert by_key[("2024-01-01", "Maadi")].sales == 1500
    assert by_key[("2024-01-02", "Dark store")].sales == 3600.5
    assert by_key[("2024-01-02", "Heliopolis")].orders == 7
    assert len([r for r in records if r.date == "2024-01-03"]) == 4
    assert {r.date for r in records} == {"2024-01-01", "2024-01-02", "2024-01-03"}


def test_header_names_drive_columns():
    header = pd.DataFrame([
        _row("report"),
        _row("Date", "Maadi", None, None, "Heliopolis", None, None, "Tagmo", None, None, "Dark Store"),
    ])
    cols = locate_store_columns(header)
    assert cols == {"Maadi": 1, "Heliopolis": 4, "Tagmo": 7, "Dark store": 10}


def test_incomplete_header_uses_fixed_layout():
    header = pd.DataFrame([_row("report"), _row("Date", "Orders", "Sales")])
    assert locate_store_columns(header) == {"Dark store": 1, "Tagmo": 4, "Heliopolis": 7, "Maadi": 10}


def test_parse_workbook_roundtrip(tmp_path):
    path = tmp_path / "january.xlsx"
    _sheet().to_excel(path, header=False, index=False)
    records = parse_workbook(path)
    assert {r.store_name for r in records} == {"Dark store", "Tagmo", "Heliopolis", "Maadi"}
    assert sum(r.orders for r in records) == 30 + 10 + 5 + 12 + 7 + 1 + 2 + 3 + 4


def test_rejects_non_excel(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("a,b\n")
    with pytest.raises(IngestError):
        parse_workbook(path)


def test_empty_workbook_is_an_error(tmp_path):
    path = tmp_path / "empty.xlsx"
    pd.DataFrame([_row("title"), _row("Date"), _row("Total", 1, 1)]).to_excel(path, header=False, index=False)
    with pytest.raises(IngestError):
        parse_workbook(path)
