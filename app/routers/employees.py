"""
Employees Router
Handles employee CRUD, Excel import/update and export.
"""
import logging
import os
from typing import Annotated, List, Optional, Tuple

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import Response
from pydantic import ValidationError

from app.dependencies.auth import require_permission
from app.dependencies.services import get_employee_service
from app.exceptions import InvalidFilterError, UploadError
from app.helpers.field_mapping import FILTER_FIELDS, SORTABLE_FIELDS
from app.schemas.auth import CurrentUser
from app.schemas.employee import (
    EmployeeCreate,
    EmployeeFilters,
    EmployeeResponse,
    EmployeeSummary,
    EmployeeUpdateRequest,
    SortSpec,
)
from app.schemas.envelope import ApiResponse, SuccessResponse
from app.schemas.excel import ImportResult, SyncResult
from app.services.employee_service import EmployeeService
from app.services.excel_codec import XLSX_MEDIA_TYPE


logger = logging.getLogger(__name__)
router = APIRouter()

Service = Annotated[EmployeeService, Depends(get_employee_service)]

LIST_QUERY_KEYS = frozenset({"search", "sortBy", "sortOrder", *FILTER_FIELDS})


def parse_list_query(request: Request) -> Tuple[EmployeeFilters, Optional[SortSpec]]:
    """Build filters and sort from the query string, rejecting anything unknown."""
    params = request.query_params

    unknown = sorted(set(params.keys()) - LIST_QUERY_KEYS)
    if unknown:
        raise InvalidFilterError(f"Unknown filter parameter(s): {', '.join(unknown)}")

    values = {field: params[key] for key, field in FILTER_FIELDS.items() if params.get(key)}
    if params.get("search"):
        values["search"] = params["search"]
    try:
        filters = EmployeeFilters(**values)
    except ValidationError as e:
        raise InvalidFilterError(f"Invalid filter value: {e.errors()[0]['msg']}") from e

    sort = None
    sort_by = params.get("sortBy")
    if sort_by:
        field = SORTABLE_FIELDS.get(sort_by)
        if field is None and sort_by in SORTABLE_FIELDS.values():
            field = sort_by
        if field is None:
            raise InvalidFilterError(f"Cannot sort by '{sort_by}'")

        order = (params.get("sortOrder") or "asc").lower()
        if order not in ("asc", "desc"):
            raise InvalidFilterError("sortOrder must be 'asc' or 'desc'")
        sort = SortSpec(field=field, direction=order)

    return filters, sort


async def read_upload(request: Request, file: Optional[UploadFile]) -> bytes:
    """Read an uploaded workbook after checking its name and size."""
    if file is None or not file.filename:
        raise UploadError("No file uploaded", code="NO_FILE")

    settings = request.app.state.settings
    extension = os.path.splitext(file.filename)[1].lower()
    if extension not in settings.allowed_upload_extensions:
        raise UploadError(
            f"Invalid file type '{extension}'. Allowed: {', '.join(settings.allowed_upload_extensions)}"
        )

    data = await file.read()
    if len(data) > settings.max_upload_size_bytes:
        raise UploadError(f"File exceeds the {settings.max_upload_size_mb} MB upload limit")
    if not data:
        raise UploadError("Uploaded file is empty")

    logger.info(f"Received upload {file.filename} ({len(data)} bytes)")
    return data


# =============================================================================
# Static routes (must come before dynamic /{empcode} routes)
# =============================================================================

@router.get("", response_model=ApiResponse[List[EmployeeSummary]])
async def list_employees(
    request: Request,
    service: Service,
    current_user: CurrentUser = Depends(require_permission("employees", "read")),
):
    """List employees with optional search, filters and sort."""
    filters, sort = parse_list_query(request)
    employees = await service.list_employees(filters, sort)
    return ApiResponse(data=employees)


@router.post("/import", response_model=ApiResponse[ImportResult])
async def import_employees(
    request: Request,
    service: Service,
    file: Optional[UploadFile] = File(None),
    current_user: CurrentUser = Depends(require_permission("employees", "import")),
):
    """Replace all employees with the uploaded sheet."""
    data = await read_upload(request, file)
    result = await service.import_from_excel(data)
    return ApiResponse(data=result)


@router.post("/update", response_model=ApiResponse[SyncResult])
async def update_employees(
    request: Request,
    service: Service,
    file: Optional[UploadFile] = File(None),
    current_user: CurrentUser = Depends(require_permission("employees", "import")),
):
    """Update or insert the employees in the uploaded sheet, keep the rest."""
    data = await read_upload(request, file)
    result = await service.update_from_excel(data)
    return ApiResponse(data=result)


@router.get("/export")
async def export_employees(
    service: Service,
    current_user: CurrentUser = Depends(require_permission("employees", "export")),
):
    """Download every employee as an Excel workbook."""
    content = await service.export_to_excel()
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": "attachment; filename=employees.xlsx"},
    )


@router.post("", response_model=ApiResponse[EmployeeResponse], status_code=201)
async def create_employee(
    payload: EmployeeCreate,
    service: Service,
    current_user: CurrentUser = Depends(require_permission("employees", "write")),
):
    employee = await service.create_employee(payload)
    return ApiResponse(data=employee)


# =============================================================================
# Dynamic routes
# =============================================================================

@router.get("/{empcode}", response_model=ApiResponse[EmployeeResponse])
async def get_employee(
    empcode: str,
    service: Service,
    current_user: CurrentUser = Depends(require_permission("employees", "read")),
):
    employee = await service.get_employee(empcode)
    return ApiResponse(data=employee)


@router.put("/{empcode}", response_model=ApiResponse[EmployeeResponse])
async def update_employee(
    empcode: str,
    payload: EmployeeUpdateRequest,
    service: Service,
    current_user: CurrentUser = Depends(require_permission("employees", "write")),
):
    """Update fields of one employee; the business code cannot change."""
    employee = await service.update_employee(empcode, payload)
    return ApiResponse(data=employee)


@router.delete("/{empcode}", response_model=SuccessResponse)
async def delete_employee(
    empcode: str,
    service: Service,
    current_user: CurrentUser = Depends(require_permission("employees", "delete")),
):
    await service.delete_employee(empcode)
    return SuccessResponse()
