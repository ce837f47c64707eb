from __future__ import annotations

import io
from pathlib import Path
from typing import Any, Iterable, Optional

import fitz
from openpyxl import Workbook

from app.helpers.field_mapping import SHEET_COLUMNS
from app.schemas.employee import EmployeeData
from app.services.row_transformer import normalize_employee

PAGE_TITLES = ("PROJECT HIRE CLEARANCE", "CONTRACTUAL CLEARANCE")


def employee_row(code: Any, first: str = "Jane", last: str = "Doe", **columns: Any) -> dict:
    """A sheet row keyed by column header."""
    row = {"EMPCODE": code, "FIRST NAME": first, "LAST NAME": last}
    row.update(columns)
    return row


def make_workbook(rows: Iterable[dict], headers: Optional[list[str]] = None) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    headers = headers or list(SHEET_COLUMNS)
    sheet.append(headers)
    for row in rows:
        sheet.append([row.get(header) for header in headers])
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def make_employee(code: str, first: str = "Jane", last: str = "Doe", **fields: Any) -> EmployeeData:
    values = {"empcode": code, "first_name": first, "last_name": last}
    values.update(fields)
    return normalize_employee(values)


def make_clearance_template(path: Path, pages: int = 2) -> str:
    doc = fitz.open()
    for title in PAGE_TITLES[:pages]:
        page = doc.new_page(width=612, height=792)
        page.insert_text((72, 72), title, fontsize=14)
    doc.save(str(path))
    doc.close()
    return str(path)
