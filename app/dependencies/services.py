"""
Service Dependencies
Build request-scoped services from the application's shared resources.
"""
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.services.clearance_form import ClearanceFormService
from app.services.employee_service import EmployeeService
from app.services.employee_store import EmployeeStore


async def get_employee_store(db: Annotated[AsyncSession, Depends(get_db)]) -> EmployeeStore:
    return EmployeeStore(db)


async def get_employee_service(
    store: Annotated[EmployeeStore, Depends(get_employee_store)]
) -> EmployeeService:
    return EmployeeService(store)


def get_clearance_service(request: Request) -> ClearanceFormService:
    return request.app.state.clearance_service
