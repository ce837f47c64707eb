"""
Response Envelope Schemas
Every JSON response is {success, data} or {success: false, error}.
"""
from pydantic import BaseModel
from typing import Any, Generic, Optional, TypeVar


T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Successful response."""
    success: bool = True
    data: T


class ErrorBody(BaseModel):
    code: str
    message: str
    details: Optional[Any] = None


class ErrorResponse(BaseModel):
    """Failed response."""
    success: bool = False
    error: ErrorBody


class SuccessResponse(BaseModel):
    """Response without a payload (e.g. delete)."""
    success: bool = True
