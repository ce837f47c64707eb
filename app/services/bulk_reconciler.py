"""
Bulk Reconciler
Applies a batch of normalized employee records to the store.

Two modes:
- replace_all: wipe the collection, then insert each unique record
- sync: update records whose code exists, insert the rest, touch nothing else

In both modes a failure on one record is logged and skipped; the other
records are still applied.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from app.schemas.employee import EmployeeData, EmployeeResponse
from app.services.employee_store import EmployeeStore

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 50
SUMMARY_DUPLICATES = 5


@dataclass
class ReplaceOutcome:
    """Result of a replace-all run."""
    previous_count: int = 0
    created: List[EmployeeResponse] = field(default_factory=list)
    duplicates: List[EmployeeData] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.duplicates) + len(self.failed)


@dataclass
class SyncOutcome:
    """Result of an upsert-preserve run."""
    updated: List[EmployeeResponse] = field(default_factory=list)
    inserted: List[EmployeeResponse] = field(default_factory=list)
    duplicates: List[EmployeeData] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.duplicates) + len(self.failed)


def split_duplicates(
    employees: Sequence[EmployeeData],
) -> Tuple[List[EmployeeData], List[EmployeeData]]:
    """Split into (first occurrence of each code, every later repeat)."""
    seen = set()
    unique: List[EmployeeData] = []
    duplicates: List[EmployeeData] = []
    for employee in employees:
        if employee.empcode in seen:
            duplicates.append(employee)
        else:
            seen.add(employee.empcode)
            unique.append(employee)
    return unique, duplicates


class BulkReconciler:
    """Reconciles sheet records against the employee store."""

    def __init__(self, store: EmployeeStore):
        self.store = store

    async def replace_all(self, employees: Sequence[EmployeeData]) -> ReplaceOutcome:
        """
        Replace the whole collection with the given records.

        A failure while clearing the collection aborts the run; the caller's
        transaction then rolls back and nothing is lost.
        """
        unique, duplicates = split_duplicates(employees)
        outcome = ReplaceOutcome(duplicates=duplicates)
        logger.info(
            f"[IMPORT] {len(employees)} records, {len(unique)} unique, "
            f"{len(duplicates)} duplicate codes"
        )

        outcome.previous_count = await self.store.delete_all()
        logger.info(f"[IMPORT] Removed {outcome.previous_count} existing employees")

        for index, employee in enumerate(unique, start=1):
            try:
                outcome.created.append(await self.store.create(employee))
            except Exception as e:
                outcome.failed.append(employee.empcode)
                logger.error(f"[IMPORT] Failed to insert {employee.empcode} ({employee.full_name}): {e}")
            self._log_progress("IMPORT", index, len(unique))

        logger.info(
            f"[IMPORT] Completed. Inserted: {len(outcome.created)}/{len(unique)}, "
            f"skipped: {outcome.skipped}"
        )
        self._log_duplicates("IMPORT", duplicates)
        return outcome

    async def sync(self, employees: Sequence[EmployeeData]) -> SyncOutcome:
        """Upsert each unique record; employees absent from the batch are kept."""
        unique, duplicates = split_duplicates(employees)
        outcome = SyncOutcome(duplicates=duplicates)
        logger.info(
            f"[UPDATE] {len(employees)} records, {len(unique)} unique, "
            f"{len(duplicates)} duplicate codes"
        )

        for index, employee in enumerate(unique, start=1):
            try:
                # Lookup and write share one savepoint so a failed lookup
                # cannot leave the enclosing transaction aborted
                async with self.store.savepoint():
                    existing = await self.store.find_by_id(employee.empcode)
                    if existing is None:
                        record = await self.store.create(employee)
                        inserted = True
                    else:
                        changes = employee.model_dump(exclude={"empcode"})
                        record = await self.store.update(employee.empcode, changes)
                        inserted = False
                (outcome.inserted if inserted else outcome.updated).append(record)
            except Exception as e:
                outcome.failed.append(employee.empcode)
                logger.error(f"[UPDATE] Failed to apply {employee.empcode} ({employee.full_name}): {e}")
            self._log_progress("UPDATE", index, len(unique))

        logger.info(
            f"[UPDATE] Completed. Updated: {len(outcome.updated)}, "
            f"inserted: {len(outcome.inserted)}, skipped: {outcome.skipped}"
        )
        self._log_duplicates("UPDATE", duplicates)
        return outcome

    def _log_progress(self, tag: str, done: int, total: int) -> None:
        if done % PROGRESS_EVERY == 0:
            logger.info(f"[{tag}] Progress: {done}/{total}")

    def _log_duplicates(self, tag: str, duplicates: Sequence[EmployeeData]) -> None:
        if not duplicates:
            return
        shown = ", ".join(f"{d.empcode} ({d.full_name})" for d in duplicates[:SUMMARY_DUPLICATES])
        more = len(duplicates) - SUMMARY_DUPLICATES
        suffix = f" and {more} more" if more > 0 else ""
        logger.warning(f"[{tag}] Skipped duplicate codes: {shown}{suffix}")
