"""
Employee Store
Persistence for employee records over an async SQLAlchemy session.

Every write runs inside its own SAVEPOINT, so one failed row rolls back on
its own while the surrounding transaction (and earlier rows) stay intact.
Nothing is committed until commit() is called.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    DuplicateKeyError,
    EmployeeNotFoundError,
    InvalidFilterError,
    StoreError,
)
from app.helpers.field_mapping import (
    FIELD_DEFAULTS,
    FIELD_SPECS,
    FILTER_FIELDS,
    NAME_FIELDS,
    SEARCH_FIELDS,
    SORTABLE_FIELDS,
    UNKNOWN,
)
from app.models.employee import Employee
from app.schemas.employee import (
    EmployeeData,
    EmployeeFilters,
    EmployeeResponse,
    EmployeeSummary,
    SortSpec,
)
from app.services.row_transformer import build_full_name

logger = logging.getLogger(__name__)

# Fields outside the sheet columns that may still be changed
_SYSTEM_DEFAULTS: Dict[str, Any] = {
    "full_name": UNKNOWN,
    "role": "employee",
    "status": "active",
}
_UPDATABLE = (set(FIELD_SPECS) | set(_SYSTEM_DEFAULTS)) - {"empcode"}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_unique_violation(error: IntegrityError) -> bool:
    if getattr(error.orig, "pgcode", None) == "23505":
        return True
    text = str(error.orig).lower()
    return "unique" in text or "duplicate key" in text


class EmployeeStore:
    """Keyed collection of employees backed by the employees table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_all(
        self,
        filters: Optional[EmployeeFilters] = None,
        sort: Optional[SortSpec] = None,
    ) -> List[EmployeeSummary]:
        """
        List employees matching all filters.

        search is a case-insensitive substring match over code, full name,
        position and project name; the other filters are exact matches.
        Without a sort, rows come back in insertion order.
        """
        query = self._apply_filters(select(Employee), filters)
        query = query.order_by(*self._order_by(sort))
        result = await self._execute(query)
        return [EmployeeSummary.model_validate(emp) for emp in result.scalars().all()]

    async def find_by_id(self, empcode: str) -> Optional[EmployeeResponse]:
        employee = await self._get(empcode)
        if employee is None:
            return None
        return EmployeeResponse.model_validate(employee)

    async def list_employees(self) -> List[EmployeeResponse]:
        """Full records in insertion order."""
        result = await self._execute(select(Employee).order_by(Employee.id.asc()))
        return [EmployeeResponse.model_validate(emp) for emp in result.scalars().all()]

    async def count(self) -> int:
        result = await self._execute(select(func.count()).select_from(Employee))
        return result.scalar_one()

    async def create(self, data: EmployeeData) -> EmployeeResponse:
        """Insert a new employee. Raises DuplicateKeyError if the code exists."""
        now = utcnow()
        employee = Employee(**data.model_dump(), created_at=now, updated_at=now)

        try:
            async with self.session.begin_nested():
                self.session.add(employee)
        except IntegrityError as e:
            if _is_unique_violation(e):
                raise DuplicateKeyError(data.empcode) from e
            raise StoreError(f"Failed to create employee {data.empcode}: {e.orig}") from e
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to create employee {data.empcode}: {e}") from e

        return EmployeeResponse.model_validate(employee)

    async def update(self, empcode: str, changes: Mapping[str, Any]) -> EmployeeResponse:
        """
        Merge changes into an existing employee.

        The business code never changes. An empty or null value clears an
        optional field and resets a required one to its default. The full
        name is rebuilt when a name part changes, unless given explicitly.
        """
        employee = await self._get(empcode)
        if employee is None:
            raise EmployeeNotFoundError(empcode)

        values = self._prepare_changes(changes)

        try:
            async with self.session.begin_nested():
                for field, value in values.items():
                    setattr(employee, field, value)
                if "full_name" not in values and any(f in values for f in NAME_FIELDS):
                    employee.full_name = build_full_name(
                        *(self._name_part(employee, changes, f) for f in NAME_FIELDS)
                    )
                employee.updated_at = utcnow()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to update employee {empcode}: {e}") from e

        return EmployeeResponse.model_validate(employee)

    async def delete(self, empcode: str) -> bool:
        """Delete one employee; False if the code did not exist."""
        result = await self._execute(delete(Employee).where(Employee.empcode == empcode))
        return result.rowcount > 0

    async def delete_all(self) -> int:
        """Delete every employee and return how many there were."""
        result = await self._execute(delete(Employee))
        return result.rowcount

    def savepoint(self):
        """Per-row failure boundary; a failed statement inside rolls back alone."""
        return self.session.begin_nested()

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Commit failed: {e}")
            raise StoreError(f"Failed to commit changes: {e}") from e

    async def _get(self, empcode: str) -> Optional[Employee]:
        result = await self._execute(select(Employee).where(Employee.empcode == empcode))
        return result.scalar_one_or_none()

    async def _execute(self, statement):
        try:
            return await self.session.execute(statement)
        except SQLAlchemyError as e:
            logger.error(f"Query failed: {e}")
            raise StoreError(f"Database query failed: {e}") from e

    def _apply_filters(self, query, filters: Optional[EmployeeFilters]):
        if filters is None:
            return query

        term = (filters.search or "").strip().lower()
        if term:
            query = query.where(or_(*[
                func.lower(getattr(Employee, field)).contains(term, autoescape=True)
                for field in SEARCH_FIELDS
            ]))

        for field in FILTER_FIELDS.values():
            value = getattr(filters, field)
            if value is not None and value != "":
                query = query.where(getattr(Employee, field) == value)

        return query

    def _order_by(self, sort: Optional[SortSpec]):
        if sort is None:
            return [Employee.id.asc()]
        if sort.field not in SORTABLE_FIELDS.values():
            raise InvalidFilterError(f"Cannot sort by '{sort.field}'")

        column = getattr(Employee, sort.field)
        primary = column.desc() if sort.direction == "desc" else column.asc()
        return [primary, Employee.id.asc()]

    def _name_part(self, employee: Employee, changes: Mapping[str, Any], field: str) -> str:
        """Name part as entered, before any placeholder default is applied."""
        if field in changes:
            value = changes[field]
        else:
            value = getattr(employee, field)
            # Stored placeholder means the part was never given
            if value == FIELD_DEFAULTS.get(field):
                return ""
        return "" if value is None else str(value).strip()

    def _prepare_changes(self, changes: Mapping[str, Any]) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for field, value in changes.items():
            if field not in _UPDATABLE:
                continue
            if isinstance(value, str):
                value = value.strip()
            if value is None or value == "":
                value = FIELD_DEFAULTS.get(field, _SYSTEM_DEFAULTS.get(field))
            values[field] = value
        return values
