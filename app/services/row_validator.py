"""
Row Validator
Checks raw sheet rows against per-column rules before anything is written.
"""
import logging
import math
import re
from typing import Any, List, Sequence, Tuple

from app.helpers.field_mapping import EMPLOYEE_FIELDS
from app.schemas.excel import RowError, ValidationReport, ValidationRule
from app.services.excel_codec import RawRow

logger = logging.getLogger(__name__)

# Numeric prefix, so "12abc" reads as 12 like a lenient float parse
_LEADING_NUMBER = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")

# Header row is sheet row 1, data starts at row 2
FIRST_DATA_ROW = 2

VALIDATION_RULES: Tuple[ValidationRule, ...] = tuple(
    ValidationRule(
        column=spec.column,
        required=spec.required,
        type="number" if spec.kind == "number" else "string",
    )
    for spec in EMPLOYEE_FIELDS
)


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return not math.isnan(value)
    if isinstance(value, str):
        return _LEADING_NUMBER.match(value) is not None
    return False


def validate_rows(
    rows: Sequence[RawRow],
    rules: Sequence[ValidationRule] = VALIDATION_RULES,
) -> ValidationReport:
    """
    Validate every row against every rule.

    A required column that is missing or empty yields a "<column> is required"
    error; a non-empty value in a number column that does not parse yields
    "<column> must be a number". All errors are collected, the run never stops
    at the first one.
    """
    errors: List[RowError] = []

    for index, row in enumerate(rows):
        row_number = index + FIRST_DATA_ROW
        for rule in rules:
            value = row.get(rule.column)

            if rule.required and _is_empty(value):
                errors.append(RowError(
                    row=row_number,
                    column=rule.column,
                    value=value,
                    message=f"{rule.column} is required",
                ))

            if not _is_empty(value) and rule.type == "number" and not _is_number(value):
                errors.append(RowError(
                    row=row_number,
                    column=rule.column,
                    value=value,
                    message=f"{rule.column} must be a number",
                ))

    if errors:
        logger.warning(f"Validation found {len(errors)} error(s) in {len(rows)} rows")

    return ValidationReport(
        success=not errors,
        total_rows=len(rows),
        imported_rows=len(rows) - len(errors),
        errors=errors,
    )
