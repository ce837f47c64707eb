"""
Excel Codec Service
Reads uploaded workbooks into raw row mappings and writes employee exports.
"""
import io
import logging
from typing import Any, Dict, Iterable, List, Optional

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from app.exceptions import CodecError
from app.helpers.field_mapping import EMPLOYEE_FIELDS, SHEET_COLUMNS
from app.schemas.employee import EmployeeData

logger = logging.getLogger(__name__)

EXPORT_SHEET_NAME = "Employees"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# Column header -> cell value, empty cells omitted
RawRow = Dict[str, Any]


class ExcelParserService:
    """Service for parsing an uploaded Excel workbook held in memory."""

    def __init__(self, data: bytes):
        """Initialize with the raw workbook bytes."""
        self.data = data
        self.workbook = None

    def __enter__(self):
        """Context manager entry - load workbook."""
        try:
            self.workbook = load_workbook(io.BytesIO(self.data), read_only=True, data_only=True)
        except Exception as e:
            logger.error(f"Failed to open workbook: {e}")
            raise CodecError(f"Failed to read Excel file: {e}") from e
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - close workbook."""
        if self.workbook:
            self.workbook.close()

    def get_sheet_names(self) -> List[str]:
        """Get list of sheet names in the workbook."""
        if not self.workbook:
            raise ValueError("Workbook not loaded. Use context manager.")
        return self.workbook.sheetnames

    def get_first_sheet(self) -> Optional[Worksheet]:
        sheets = self.get_sheet_names()
        if not sheets:
            return None
        return self.workbook[sheets[0]]

    def parse_rows(self) -> List[RawRow]:
        """
        Parse the first sheet into row mappings keyed by header text.

        Columns without a header are ignored, repeated headers get a _1, _2
        suffix, and rows with no values at all are skipped.
        """
        sheet = self.get_first_sheet()
        if sheet is None:
            return []

        try:
            rows = sheet.iter_rows(values_only=True)
            header = next(rows, None)
            if header is None:
                return []

            columns = self._header_names(header)
            parsed: List[RawRow] = []
            for values in rows:
                record = {
                    column: value
                    for column, value in zip(columns, values)
                    if column is not None and value is not None
                }
                if record:
                    parsed.append(record)
            return parsed
        except CodecError:
            raise
        except Exception as e:
            logger.error(f"Failed to parse sheet '{sheet.title}': {e}")
            raise CodecError(f"Failed to parse Excel sheet: {e}") from e

    def _header_names(self, header) -> List[Optional[str]]:
        names: List[Optional[str]] = []
        seen: Dict[str, int] = {}
        for cell in header:
            if cell is None or str(cell).strip() == "":
                names.append(None)
                continue
            name = str(cell).replace("\r\n", "\n").strip()
            if name in seen:
                seen[name] += 1
                name = f"{name}_{seen[name]}"
            else:
                seen[name] = 0
            names.append(name)
        return names


def decode_sheet(data: bytes) -> List[RawRow]:
    """Decode workbook bytes into ordered raw rows from the first sheet."""
    with ExcelParserService(data) as parser:
        return parser.parse_rows()


def encode_employees(employees: Iterable[EmployeeData]) -> bytes:
    """Write employees to a single-sheet workbook with the fixed column order."""
    try:
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = EXPORT_SHEET_NAME

        sheet.append(list(SHEET_COLUMNS))
        for cell in sheet[1]:
            cell.font = Font(bold=True)

        count = 0
        for employee in employees:
            # None leaves the cell empty so re-import applies the defaults
            sheet.append([getattr(employee, spec.field) for spec in EMPLOYEE_FIELDS])
            count += 1

        for index, spec in enumerate(EMPLOYEE_FIELDS, start=1):
            sheet.column_dimensions[get_column_letter(index)].width = spec.width

        buffer = io.BytesIO()
        workbook.save(buffer)
        logger.info(f"Exported {count} employees to Excel")
        return buffer.getvalue()
    except Exception as e:
        logger.error(f"Failed to write Excel export: {e}")
        raise CodecError(f"Failed to write Excel file: {e}") from e
