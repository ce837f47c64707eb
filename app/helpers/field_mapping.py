"""
Employee Field Mapping
One table linking record fields, spreadsheet columns and defaults.

The row validator, row transformer, spreadsheet codec and employee store all
read from here, so a column added or renamed in one place is seen by all.
"""
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from pydantic.alias_generators import to_camel


EMPCODE_SENTINEL = "UNKNOWN"
UNKNOWN = "Unknown"
NOT_SPECIFIED = "Not Specified"


@dataclass(frozen=True)
class FieldSpec:
    """A persisted employee field and its spreadsheet column."""
    field: str
    column: str
    kind: str = "text"  # text | number | code
    default: Any = None
    required: bool = False
    width: int = 15


# Export order
EMPLOYEE_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec("sheet_no", "NO", kind="number", default=0, width=5),
    FieldSpec("empcode", "EMPCODE", kind="code", default=EMPCODE_SENTINEL, required=True, width=12),
    FieldSpec("last_name", "LAST NAME", default=UNKNOWN, width=20),
    FieldSpec("first_name", "FIRST NAME", default=UNKNOWN, width=20),
    FieldSpec("middle_name", "MIDDLE NAME", width=20),
    FieldSpec("cbe_noncbe", "CBE/NonCBE", width=12),
    FieldSpec("rank", "RANK", default=NOT_SPECIFIED, width=15),
    FieldSpec("emp_status", "EMP STATUS", default=UNKNOWN, width=20),
    FieldSpec("position", "POSITION", default=NOT_SPECIFIED, width=30),
    FieldSpec("costcode", "COSTCODE", width=12),
    FieldSpec("proj_name", "PROJ NAME", default=NOT_SPECIFIED, width=30),
    FieldSpec("proj_hr", "PROJ HR", width=20),
    FieldSpec("email_address", "EMAIL ADDRESS", width=30),
    FieldSpec("mobile_assignment", "MOBILE ASSIGNMENT", width=18),
    FieldSpec("mobile_number", "MOBILE NUMBER", width=15),
    FieldSpec("laptop_assignment", "LAPTOP ASSIGNMENT", width=18),
    FieldSpec("asset_code", "ASSET CODE", width=12),
    FieldSpec("others", "OTHERS\n(Specify items assigned)", width=30),
    FieldSpec("remarks", "REMARKS", width=30),
)

FIELD_SPECS: Dict[str, FieldSpec] = {spec.field: spec for spec in EMPLOYEE_FIELDS}
FIELD_TO_COLUMN: Dict[str, str] = {spec.field: spec.column for spec in EMPLOYEE_FIELDS}
COLUMN_TO_FIELD: Dict[str, str] = {spec.column: spec.field for spec in EMPLOYEE_FIELDS}
SHEET_COLUMNS: Tuple[str, ...] = tuple(spec.column for spec in EMPLOYEE_FIELDS)

# Non-nullable fields; clearing one restores its default
FIELD_DEFAULTS: Dict[str, Any] = {
    spec.field: spec.default for spec in EMPLOYEE_FIELDS if spec.default is not None
}

NAME_FIELDS = ("first_name", "middle_name", "last_name")

INACTIVE_EMPLOYMENT_STATUSES = frozenset({"Resigned", "Terminated", "End of Contract"})

# Query parameter name -> record field, exact match
FILTER_FIELDS: Dict[str, str] = {
    "rank": "rank",
    "empStatus": "emp_status",
    "position": "position",
    "projName": "proj_name",
    "cbeNoncbe": "cbe_noncbe",
    "costcode": "costcode",
    "status": "status",
}

# Case-insensitive substring search targets
SEARCH_FIELDS: Tuple[str, ...] = ("empcode", "full_name", "position", "proj_name")

# sortBy value -> record field
SORTABLE_FIELDS: Dict[str, str] = {
    to_camel(field): field
    for field in (
        *FIELD_SPECS.keys(),
        "full_name",
        "status",
        "created_at",
        "updated_at",
    )
}
