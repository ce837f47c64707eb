"""
Row Transformer
Turns a raw sheet row (or API payload) into a normalized employee record.
"""
import math
import re
from typing import Any, Mapping, Optional

from app.helpers.field_mapping import (
    COLUMN_TO_FIELD,
    EMPCODE_SENTINEL,
    EMPLOYEE_FIELDS,
    INACTIVE_EMPLOYMENT_STATUSES,
    UNKNOWN,
)
from app.schemas.employee import EmployeeData
from app.services.excel_codec import RawRow

# Quotes and any whitespace, including embedded CR/LF/TAB
_CODE_NOISE = re.compile(r"[\"\s]")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

_INACTIVE = frozenset(status.lower() for status in INACTIVE_EMPLOYMENT_STATUSES)


def clean_text(value: Any) -> str:
    """Stringify and trim a cell value; None becomes an empty string."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        # 12345.0 read from a numeric cell
        value = int(value)
    return str(value).strip()


def clean_empcode(value: Any) -> str:
    code = _CODE_NOISE.sub("", clean_text(value))
    return code or EMPCODE_SENTINEL


def safe_int(value: Any) -> int:
    """Leading integer of the value, or 0 when there is none."""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


def build_full_name(first: Any, middle: Any, last: Any) -> str:
    parts = [part for part in (clean_text(first), clean_text(middle), clean_text(last)) if part]
    return " ".join(parts) if parts else UNKNOWN


def derive_status(emp_status: Optional[str]) -> str:
    """Resigned, terminated and end-of-contract employees are inactive."""
    if emp_status and emp_status.strip().lower() in _INACTIVE:
        return "inactive"
    return "active"


def normalize_employee(
    values: Mapping[str, Any],
    role: str = "employee",
    status: Optional[str] = None,
) -> EmployeeData:
    """
    Normalize field-keyed values into a complete employee record.

    Text is trimmed and blank text falls back to the field default (or None
    for optional fields). The full name is built from the raw name parts, so
    an employee with no name at all is "Unknown" rather than
    "Unknown Unknown".
    """
    data = {}
    for spec in EMPLOYEE_FIELDS:
        raw = values.get(spec.field)
        if spec.kind == "code":
            data[spec.field] = clean_empcode(raw)
        elif spec.kind == "number":
            data[spec.field] = safe_int(raw)
        else:
            data[spec.field] = clean_text(raw) or spec.default

    data["full_name"] = build_full_name(
        values.get("first_name"),
        values.get("middle_name"),
        values.get("last_name"),
    )
    data["role"] = role
    data["status"] = status or derive_status(data["emp_status"])
    return EmployeeData(**data)


def transform_row(row: RawRow) -> EmployeeData:
    """Map a sheet row keyed by column header into an employee record."""
    values = {
        COLUMN_TO_FIELD[column]: value
        for column, value in row.items()
        if column in COLUMN_TO_FIELD
    }
    return normalize_employee(values)
