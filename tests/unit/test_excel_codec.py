from __future__ import annotations

import io

import pytest
from openpyxl import Workbook, load_workbook

from app.exceptions import CodecError
from app.helpers.field_mapping import SHEET_COLUMNS
from app.services.excel_codec import decode_sheet, encode_employees
from app.services.row_transformer import transform_row
from tests.factories import make_employee


def _workbook_bytes(*sheets: list[list]) -> bytes:
    workbook = Workbook()
    workbook.remove(workbook.active)
    for index, rows in enumerate(sheets):
        sheet = workbook.create_sheet(f"Sheet{index + 1}")
        for row in rows:
            sheet.append(row)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def test_decode_maps_rows_by_trimmed_header():
    data = _workbook_bytes([
        [" EMPCODE ", "FIRST NAME", None, "REMARKS"],
        ["E1", "Ann", "orphan", None],
        ["E2", None, None, "note"],
    ])

    rows = decode_sheet(data)

    assert rows == [
        {"EMPCODE": "E1", "FIRST NAME": "Ann"},
        {"EMPCODE": "E2", "REMARKS": "note"},
    ]


def test_decode_skips_blank_rows():
    data = _workbook_bytes([
        ["EMPCODE", "FIRST NAME"],
        ["E1", "Ann"],
        [None, None],
        ["E2", "Ben"],
    ])

    rows = decode_sheet(data)

    assert [row["EMPCODE"] for row in rows] == ["E1", "E2"]


def test_decode_suffixes_repeated_headers():
    data = _workbook_bytes([
        ["EMPCODE", "REMARKS", "REMARKS"],
        ["E1", "first", "second"],
    ])

    rows = decode_sheet(data)

    assert rows == [{"EMPCODE": "E1", "REMARKS": "first", "REMARKS_1": "second"}]


def test_decode_reads_first_sheet_only():
    data = _workbook_bytes(
        [["EMPCODE"], ["E1"]],
        [["EMPCODE"], ["OTHER"]],
    )

    assert decode_sheet(data) == [{"EMPCODE": "E1"}]


def test_decode_header_only_sheet():
    data = _workbook_bytes([["EMPCODE", "FIRST NAME"]])

    assert decode_sheet(data) == []


def test_decode_rejects_malformed_bytes():
    with pytest.raises(CodecError):
        decode_sheet(b"this is not a workbook")


def test_encode_writes_fixed_header_order():
    employees = [
        make_employee("E1", "Ann", "Lee", position="Engineer", remarks="On leave"),
        make_employee("E2", "Ben", "Ong"),
    ]

    data = encode_employees(employees)

    workbook = load_workbook(io.BytesIO(data))
    assert workbook.sheetnames == ["Employees"]
    sheet = workbook["Employees"]
    rows = list(sheet.iter_rows(values_only=True))
    assert list(rows[0]) == list(SHEET_COLUMNS)
    assert rows[0][0] == "NO"
    assert rows[0][-1] == "REMARKS"

    first = dict(zip(SHEET_COLUMNS, rows[1]))
    assert first["EMPCODE"] == "E1"
    assert first["LAST NAME"] == "Lee"
    assert first["POSITION"] == "Engineer"
    assert first["REMARKS"] == "On leave"
    assert first["COSTCODE"] is None
    assert len(rows) == 3


def test_encode_output_imports_back_to_the_same_records():
    original = make_employee("E7", "Cara", "Diaz", middle_name="M", proj_name="Bridge", emp_status="Resigned")

    rows = decode_sheet(encode_employees([original]))

    assert transform_row(rows[0]) == original


def test_encode_empty_collection_has_header_only():
    workbook = load_workbook(io.BytesIO(encode_employees([])))

    rows = list(workbook.active.iter_rows(values_only=True))
    assert len(rows) == 1
