# Dependencies package
from app.dependencies.auth import get_current_user, require_permission
from app.dependencies.services import (
    get_clearance_service,
    get_employee_service,
    get_employee_store,
)

__all__ = [
    "get_current_user",
    "require_permission",
    "get_clearance_service",
    "get_employee_service",
    "get_employee_store",
]
