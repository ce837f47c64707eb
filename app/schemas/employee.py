"""
Employee Schemas
Pydantic models for employee data validation.

Wire names are camelCase (empcode, firstName, projName, ...); snake_case
names are accepted on input too.
"""
import re

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Literal, Optional
from datetime import datetime


EmployeeStatus = Literal["active", "inactive"]
EmployeeRole = Literal["admin", "employee"]
SortDirection = Literal["asc", "desc"]


class CamelModel(BaseModel):
    """Base model with camelCase aliases."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class EmployeeData(CamelModel):
    """Normalized employee record without timestamps."""
    empcode: str
    sheet_no: int = 0
    first_name: str
    middle_name: Optional[str] = None
    last_name: str
    full_name: str
    cbe_noncbe: Optional[str] = None
    rank: str
    emp_status: str
    position: str
    costcode: Optional[str] = None
    proj_name: str
    proj_hr: Optional[str] = None
    email_address: Optional[str] = None
    mobile_assignment: Optional[str] = None
    mobile_number: Optional[str] = None
    laptop_assignment: Optional[str] = None
    asset_code: Optional[str] = None
    others: Optional[str] = None
    remarks: Optional[str] = None
    role: EmployeeRole = "employee"
    status: EmployeeStatus = "active"


class EmployeeResponse(EmployeeData):
    """Schema for employee response."""
    created_at: datetime
    updated_at: datetime


class EmployeeSummary(CamelModel):
    """List-view projection of an employee."""
    empcode: str
    full_name: str
    position: str
    proj_name: str
    rank: str
    emp_status: str
    cbe_noncbe: Optional[str] = None
    status: EmployeeStatus


class EmployeeCreate(CamelModel):
    """Schema for creating an employee through the API."""
    model_config = ConfigDict(extra="forbid")

    empcode: str = Field(..., min_length=1, max_length=50)
    sheet_no: Optional[int] = None
    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    cbe_noncbe: Optional[str] = None
    rank: Optional[str] = None
    emp_status: Optional[str] = None
    position: Optional[str] = None
    costcode: Optional[str] = None
    proj_name: Optional[str] = None
    proj_hr: Optional[str] = None
    email_address: Optional[str] = None
    mobile_assignment: Optional[str] = None
    mobile_number: Optional[str] = None
    laptop_assignment: Optional[str] = None
    asset_code: Optional[str] = None
    others: Optional[str] = None
    remarks: Optional[str] = None
    role: EmployeeRole = "employee"
    # Derived from empStatus when omitted
    status: Optional[EmployeeStatus] = None

    @field_validator("empcode")
    @classmethod
    def empcode_not_blank(cls, value: str) -> str:
        # Codes are stored with quotes and whitespace removed
        if not re.sub(r"[\"\s]", "", value):
            raise ValueError("empcode must contain at least one non-blank character")
        return value


class EmployeeUpdateRequest(CamelModel):
    """
    Schema for updating employee data.

    Omitted fields are left alone; an empty string clears the field.
    """
    model_config = ConfigDict(extra="forbid")

    sheet_no: Optional[int] = None
    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    cbe_noncbe: Optional[str] = None
    rank: Optional[str] = None
    emp_status: Optional[str] = None
    position: Optional[str] = None
    costcode: Optional[str] = None
    proj_name: Optional[str] = None
    proj_hr: Optional[str] = None
    email_address: Optional[str] = None
    mobile_assignment: Optional[str] = None
    mobile_number: Optional[str] = None
    laptop_assignment: Optional[str] = None
    asset_code: Optional[str] = None
    others: Optional[str] = None
    remarks: Optional[str] = None
    role: Optional[EmployeeRole] = None
    status: Optional[EmployeeStatus] = None


class EmployeeFilters(BaseModel):
    """Exact-match filters plus a free-text search."""
    model_config = ConfigDict(extra="forbid")

    search: Optional[str] = None
    rank: Optional[str] = None
    emp_status: Optional[str] = None
    position: Optional[str] = None
    proj_name: Optional[str] = None
    cbe_noncbe: Optional[str] = None
    costcode: Optional[str] = None
    status: Optional[EmployeeStatus] = None


class SortSpec(BaseModel):
    """Single-field sort on a record field name."""
    field: str
    direction: SortDirection = "asc"
