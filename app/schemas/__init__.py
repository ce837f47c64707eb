# Schemas package
from app.schemas.auth import CurrentUser, Permission, ROLE_PERMISSIONS
from app.schemas.employee import (
    EmployeeCreate,
    EmployeeData,
    EmployeeFilters,
    EmployeeResponse,
    EmployeeSummary,
    EmployeeUpdateRequest,
    SortSpec,
)
from app.schemas.envelope import ApiResponse, ErrorBody, ErrorResponse, SuccessResponse
from app.schemas.excel import (
    DuplicateEntry,
    ImportResult,
    RowError,
    SyncResult,
    ValidationReport,
    ValidationRule,
)

__all__ = [
    "CurrentUser",
    "Permission",
    "ROLE_PERMISSIONS",
    "EmployeeCreate",
    "EmployeeData",
    "EmployeeFilters",
    "EmployeeResponse",
    "EmployeeSummary",
    "EmployeeUpdateRequest",
    "SortSpec",
    "ApiResponse",
    "ErrorBody",
    "ErrorResponse",
    "SuccessResponse",
    "DuplicateEntry",
    "ImportResult",
    "RowError",
    "SyncResult",
    "ValidationReport",
    "ValidationRule",
]
