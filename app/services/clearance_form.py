"""
Clearance Form Service
Fills the two-page clearance template and returns the chosen page as a PDF.
"""
import logging
import os
from dataclasses import dataclass
from enum import Enum

import fitz  # PyMuPDF

from app.exceptions import (
    ClearanceFormError,
    InvalidClearanceTypeError,
    TemplateMissingError,
)

logger = logging.getLogger(__name__)


class ClearanceType(str, Enum):
    PROJECT_HIRE = "project-hire"
    CONTRACTUAL = "contractual"

    @property
    def page_index(self) -> int:
        return 0 if self is ClearanceType.PROJECT_HIRE else 1

    @classmethod
    def parse(cls, value) -> "ClearanceType":
        try:
            return cls(value)
        except ValueError:
            raise InvalidClearanceTypeError(value)


@dataclass
class ClearanceData:
    employee_name: str
    position: str
    department: str
    clearance_type: ClearanceType


class ClearanceFormService:
    """
    Overlays employee details on the clearance template.

    Page 0 is the project-hire form, page 1 the contractual form. Coordinates
    are PDF points measured from the top-left corner of the page.
    """

    FONT_NAME = "helv"
    FONT_SIZE = 8
    FIRST_BASELINE = 153
    LINE_SPACING = 14
    NAME_X = 126
    POSITION_X = 126
    DEPARTMENT_X = 127

    def __init__(self, template_path: str):
        self.template_path = template_path

    def template_exists(self) -> bool:
        return os.path.isfile(self.template_path)

    def fill(self, data: ClearanceData) -> bytes:
        """Return a one-page PDF with the employee's details filled in."""
        if not self.template_exists():
            logger.error(f"Clearance template not found: {self.template_path}")
            raise TemplateMissingError(self.template_path)

        page_index = data.clearance_type.page_index
        logger.info(
            f"Generating {data.clearance_type.value} clearance form for {data.employee_name}"
        )

        try:
            template = fitz.open(self.template_path)
        except Exception as e:
            raise ClearanceFormError(f"Failed to open clearance template: {e}") from e

        output = fitz.open()
        try:
            if page_index >= template.page_count:
                raise ClearanceFormError(
                    f"Clearance template has {template.page_count} page(s), "
                    f"page {page_index} required"
                )

            page = template[page_index]
            lines = (
                (self.NAME_X, data.employee_name),
                (self.POSITION_X, data.position),
                (self.DEPARTMENT_X, data.department),
            )
            for offset, (x, text) in enumerate(lines):
                y = self.FIRST_BASELINE + offset * self.LINE_SPACING
                page.insert_text(
                    fitz.Point(x, y),
                    text or "",
                    fontname=self.FONT_NAME,
                    fontsize=self.FONT_SIZE,
                    color=(0, 0, 0),
                )

            output.insert_pdf(template, from_page=page_index, to_page=page_index)
            return output.tobytes(garbage=3, deflate=True, no_new_id=True)
        except ClearanceFormError:
            raise
        except Exception as e:
            logger.error(f"Failed to fill clearance form: {e}")
            raise ClearanceFormError(f"Failed to generate clearance form: {e}") from e
        finally:
            output.close()
            template.close()
