import io
from datetime import datetime

import pytest
from openpyxl import Workbook

from conftest import csv_bytes
from import_engine.errors import ImportFileError
from import_engine.reader import read_table


def _xlsx(*rows):
    wb = Workbook()
    ws = wb.active
    for r in rows:
        ws.append(list(r))
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def test_xlsx_rows_keep_sheet_numbers():
    content = _xlsx(
        [" Emp. ID ", "Employee Name", "Join Date"],
        ["E1", "Ani", datetime(2024, 1, 2)],
        [None, None, None],
        ["E2", "Budi", None],
    )
    table = read_table(content, "employees.xlsx")
    assert table.headers == ["Emp. ID", "Employee Name", "Join Date"]
    assert [r.number for r in table.rows] == [2, 4]
    assert table.rows[0].cells["Join Date"] == datetime(2024, 1, 2)
    assert table.rows[1].cells == {"Emp. ID": "E2", "Employee Name": "Budi", "Join Date": None}


def test_duplicate_and_blank_headers_are_ignored():
    content = _xlsx(
        ["Emp. ID", None, "Email", "Email"],
        ["E1", "junk", "a@x.io", "b@x.io"],
    )
    table = read_table(content, "x.xlsm")
    assert table.headers == ["Emp. ID", "Email"]
    assert table.header_columns == [0, 2]
    assert table.duplicate_headers == ["Email"]
    assert table.rows[0].cells == {"Emp. ID": "E1", "Email": "a@x.io"}


def test_csv_with_bom_and_semicolons():
    content = csv_bytes(
        [{"Emp. ID": "E1", "Employee Name": "Ani"}, {"Emp. ID": "E2", "Employee Name": "Budi"}],
        ["Emp. ID", "Employee Name"],
        delimiter=";",
    )
    table = read_table(content, "EMPLOYEES.CSV")
    assert table.headers == ["Emp. ID", "Employee Name"]
    assert [r.cells["Employee Name"] for r in table.rows] == ["Ani", "Budi"]


def test_empty_inputs_have_no_table():
    assert read_table(b"", "empty.csv") is None
    assert read_table(_xlsx(), "empty.xlsx") is None


def test_unsupported_and_corrupt_files():
    with pytest.raises(ImportFileError, match="Unsupported file type"):
        read_table(b"data", "employees.pdf")
    with pytest.raises(ImportFileError, match="Unreadable spreadsheet"):
        read_table(b"this is not a zip archive", "employees.xlsx")
