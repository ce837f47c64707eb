"""
Exception Hierarchy
Every error carries the envelope code and HTTP status it maps to.
"""
from typing import Any, Optional


class MasterdataError(Exception):
    """Base exception for all employee masterdata errors."""

    code = "SERVER_ERROR"
    status_code = 500
    # Message shown in production posture instead of the real one
    public_message: Optional[str] = None

    def __init__(self, message: str, details: Any = None):
        self.message = message
        self.details = details
        super().__init__(message)


class DuplicateKeyError(MasterdataError):
    """Business code already exists."""

    code = "DUPLICATE_KEY"
    status_code = 409

    def __init__(self, empcode: str):
        self.empcode = empcode
        super().__init__(f"Employee with code '{empcode}' already exists")


class EmployeeNotFoundError(MasterdataError):
    """No employee with the requested business code."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, empcode: str):
        self.empcode = empcode
        super().__init__("Employee not found")


class StoreError(MasterdataError):
    """Underlying persistence failure."""

    code = "STORE_ERROR"
    public_message = "A database error occurred"


class CodecError(MasterdataError):
    """Spreadsheet could not be read or written."""

    code = "CODEC_ERROR"
    public_message = "The spreadsheet could not be processed"


class TemplateMissingError(MasterdataError):
    """Clearance form template is not on disk."""

    code = "TEMPLATE_MISSING"
    public_message = "Clearance form template is not available"

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Clearance form template not found at '{path}'. "
            "Place Clearance_Form.pdf there or set CLEARANCE_TEMPLATE_PATH."
        )


class InvalidFilterError(MasterdataError):
    """Unknown filter key or bad sort parameter."""

    code = "INVALID_FILTER"
    status_code = 400


class InvalidClearanceTypeError(MasterdataError):
    code = "INVALID_TYPE"
    status_code = 400

    def __init__(self, value: Optional[str]):
        self.value = value
        super().__init__(
            'Clearance type must be either "project-hire" or "contractual"'
        )


class UploadError(MasterdataError):
    """Missing or unacceptable upload."""

    status_code = 400

    def __init__(self, message: str, code: str = "INVALID_FILE"):
        self.code = code
        super().__init__(message)


class RowValidationError(MasterdataError):
    """Sheet failed row validation; details carry the full report."""

    code = "ROW_VALIDATION_FAILED"
    status_code = 422


class ClearanceFormError(MasterdataError):
    """Template was found but the form could not be produced."""

    code = "PDF_GENERATION_ERROR"
    public_message = "Failed to generate clearance form"


class NotAuthenticatedError(MasterdataError):
    code = "UNAUTHORIZED"
    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class PermissionDeniedError(MasterdataError):
    """Caller's role lacks the permission the route requires."""

    code = "FORBIDDEN"
    status_code = 403

    def __init__(self, resource: str, action: str):
        self.resource = resource
        self.action = action
        super().__init__(f"Permission denied: {action} on {resource}")
