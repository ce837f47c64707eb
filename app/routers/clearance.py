"""
Clearance Router
Generates the filled clearance form for one employee.
"""
import logging
import re
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from app.dependencies.auth import require_permission
from app.dependencies.services import get_clearance_service, get_employee_service
from app.schemas.auth import CurrentUser
from app.services.clearance_form import ClearanceData, ClearanceFormService, ClearanceType
from app.services.employee_service import EmployeeService


logger = logging.getLogger(__name__)
router = APIRouter()

_UNSAFE_FILENAME_CHARS = re.compile(r'["\\/\r\n;]')


def parse_clearance_type(
    type_: Annotated[Optional[str], Query(alias="type")] = None,
) -> ClearanceType:
    return ClearanceType.parse(type_)


def clearance_filename(last_name: str) -> str:
    safe = _UNSAFE_FILENAME_CHARS.sub("_", last_name).strip()
    # Header values must be latin-1
    safe = safe.encode("latin-1", "replace").decode("latin-1").replace("?", "_")
    return f"Clearance_Form_{safe or 'Employee'}.pdf"


@router.get("/{empcode}")
async def generate_clearance_form(
    empcode: str,
    # Resolved first so a bad type never reaches the store or the template
    clearance_type: Annotated[ClearanceType, Depends(parse_clearance_type)],
    current_user: Annotated[CurrentUser, Depends(require_permission("employees", "read"))],
    service: Annotated[EmployeeService, Depends(get_employee_service)],
    forms: Annotated[ClearanceFormService, Depends(get_clearance_service)],
):
    """Return a one-page clearance PDF for the employee."""
    employee = await service.get_employee(empcode)

    pdf = forms.fill(ClearanceData(
        employee_name=employee.full_name,
        position=employee.position,
        department=employee.proj_name,
        clearance_type=clearance_type,
    ))
    logger.info(f"Clearance form generated for {empcode} ({clearance_type.value})")

    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{clearance_filename(employee.last_name)}"'
        },
    )
