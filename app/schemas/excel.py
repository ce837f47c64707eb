"""
Excel Import Schemas
Row validation reports and reconciliation results.
"""
from pydantic import Field
from typing import Any, List, Literal

from app.schemas.employee import CamelModel


class ValidationRule(CamelModel):
    """Per-column rule applied to every sheet row."""
    column: str
    required: bool = False
    type: Literal["string", "number"] = "string"


class RowError(CamelModel):
    """A single row-level validation error."""
    row: int
    column: str
    value: Any = None
    message: str


class ValidationReport(CamelModel):
    """Outcome of validating every row of one sheet."""
    success: bool
    total_rows: int
    imported_rows: int
    errors: List[RowError] = Field(default_factory=list)


class DuplicateEntry(CamelModel):
    """A business code seen again after its first row in the same sheet."""
    empcode: str
    full_name: str


class ImportResult(CamelModel):
    """Accounting for one replace-all import run."""
    success: bool = True
    total_rows: int = 0
    imported_rows: int = 0
    skipped_rows: int = 0
    previous_count: int = 0
    duplicates: List[DuplicateEntry] = Field(default_factory=list)


class SyncResult(CamelModel):
    """Accounting for one upsert-preserve update run."""
    success: bool = True
    total_rows: int = 0
    updated_rows: int = 0
    inserted_rows: int = 0
    skipped_rows: int = 0
    duplicates: List[DuplicateEntry] = Field(default_factory=list)
    updated: List[str] = Field(default_factory=list)
    inserted: List[str] = Field(default_factory=list)
