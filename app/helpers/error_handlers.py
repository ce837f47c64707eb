"""
Exception Handlers
Map every error onto the {success: false, error: {code, message}} envelope.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.exceptions import MasterdataError
from app.schemas.envelope import ErrorBody, ErrorResponse

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "Internal server error"

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    413: "PAYLOAD_TOO_LARGE",
}


def error_response(status_code: int, code: str, message: str, details=None) -> JSONResponse:
    body = ErrorResponse(error=ErrorBody(code=code, message=message, details=details))
    content = body.model_dump(mode="json")
    if details is None:
        del content["error"]["details"]
    return JSONResponse(status_code=status_code, content=content)


def _is_development(request: Request) -> bool:
    return request.app.state.settings.is_development


async def masterdata_error_handler(request: Request, exc: MasterdataError) -> JSONResponse:
    message = exc.message
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
        if not _is_development(request):
            message = exc.public_message or GENERIC_MESSAGE
    return error_response(exc.status_code, exc.code, message, exc.details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    return error_response(exc.status_code, code, str(exc.detail))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(
        422,
        "VALIDATION_ERROR",
        "Request validation failed",
        jsonable_encoder(exc.errors()),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    message = str(exc) if _is_development(request) else GENERIC_MESSAGE
    return error_response(500, "SERVER_ERROR", message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MasterdataError, masterdata_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
