# Services package
from app.services.bulk_reconciler import BulkReconciler
from app.services.clearance_form import ClearanceFormService, ClearanceType
from app.services.employee_service import EmployeeService
from app.services.employee_store import EmployeeStore
from app.services.excel_codec import ExcelParserService, decode_sheet, encode_employees

__all__ = [
    "BulkReconciler",
    "ClearanceFormService",
    "ClearanceType",
    "EmployeeService",
    "EmployeeStore",
    "ExcelParserService",
    "decode_sheet",
    "encode_employees",
]
