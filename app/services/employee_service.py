"""
Employee Service
Use cases behind the employee routes: CRUD, Excel import/update and export.
"""
import logging
from typing import List, Optional, Sequence

from app.exceptions import EmployeeNotFoundError, RowValidationError
from app.schemas.employee import (
    EmployeeCreate,
    EmployeeData,
    EmployeeFilters,
    EmployeeResponse,
    EmployeeSummary,
    EmployeeUpdateRequest,
    SortSpec,
)
from app.schemas.excel import DuplicateEntry, ImportResult, SyncResult
from app.services.bulk_reconciler import BulkReconciler
from app.services.employee_store import EmployeeStore
from app.services.excel_codec import RawRow, decode_sheet, encode_employees
from app.services.row_transformer import normalize_employee, transform_row
from app.services.row_validator import validate_rows

logger = logging.getLogger(__name__)


def _duplicate_entries(duplicates: Sequence[EmployeeData]) -> List[DuplicateEntry]:
    return [DuplicateEntry(empcode=d.empcode, full_name=d.full_name) for d in duplicates]


class EmployeeService:
    """Coordinates the codec, validator, transformer, store and reconciler."""

    def __init__(self, store: EmployeeStore):
        self.store = store
        self.reconciler = BulkReconciler(store)

    async def list_employees(
        self,
        filters: Optional[EmployeeFilters] = None,
        sort: Optional[SortSpec] = None,
    ) -> List[EmployeeSummary]:
        return await self.store.find_all(filters, sort)

    async def get_employee(self, empcode: str) -> EmployeeResponse:
        employee = await self.store.find_by_id(empcode)
        if employee is None:
            raise EmployeeNotFoundError(empcode)
        return employee

    async def create_employee(self, payload: EmployeeCreate) -> EmployeeResponse:
        values = payload.model_dump(exclude={"role", "status"})
        data = normalize_employee(values, role=payload.role, status=payload.status)
        employee = await self.store.create(data)
        await self.store.commit()
        logger.info(f"Created employee {employee.empcode}")
        return employee

    async def update_employee(self, empcode: str, payload: EmployeeUpdateRequest) -> EmployeeResponse:
        changes = payload.model_dump(exclude_unset=True)
        employee = await self.store.update(empcode, changes)
        await self.store.commit()
        logger.info(f"Updated employee {empcode}: {sorted(changes)}")
        return employee

    async def delete_employee(self, empcode: str) -> None:
        if not await self.store.delete(empcode):
            raise EmployeeNotFoundError(empcode)
        await self.store.commit()
        logger.info(f"Deleted employee {empcode}")

    async def import_from_excel(self, data: bytes) -> ImportResult:
        """Replace every employee with the contents of the workbook."""
        logger.info("[IMPORT] Starting Excel import")
        rows = decode_sheet(data)
        employees = self._validated_employees(rows)

        outcome = await self.reconciler.replace_all(employees)
        await self.store.commit()

        return ImportResult(
            total_rows=len(rows),
            imported_rows=len(outcome.created),
            skipped_rows=outcome.skipped,
            previous_count=outcome.previous_count,
            duplicates=_duplicate_entries(outcome.duplicates),
        )

    async def update_from_excel(self, data: bytes) -> SyncResult:
        """Update or insert the employees in the workbook, keep all others."""
        logger.info("[UPDATE] Starting Excel update")
        rows = decode_sheet(data)
        employees = self._validated_employees(rows)

        outcome = await self.reconciler.sync(employees)
        await self.store.commit()

        return SyncResult(
            total_rows=len(rows),
            updated_rows=len(outcome.updated),
            inserted_rows=len(outcome.inserted),
            skipped_rows=outcome.skipped,
            duplicates=_duplicate_entries(outcome.duplicates),
            updated=[e.empcode for e in outcome.updated],
            inserted=[e.empcode for e in outcome.inserted],
        )

    async def export_to_excel(self) -> bytes:
        employees = await self.store.list_employees()
        return encode_employees(employees)

    def _validated_employees(self, rows: List[RawRow]) -> List[EmployeeData]:
        logger.info(f"Parsed {len(rows)} rows from Excel")
        report = validate_rows(rows)
        if not report.success:
            raise RowValidationError(
                f"Validation failed with {len(report.errors)} error(s)",
                details=report.model_dump(by_alias=True, mode="json"),
            )
        return [transform_row(row) for row in rows]
