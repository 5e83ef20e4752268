import logging
from typing import Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.models import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


class ErrorCode:
    INVALID_REQUEST = "invalid_request"
    TASK_NOT_FOUND = "task_not_found"
    INTERNAL_SERVER_ERROR = "internal_server_error"


class APIError(HTTPException):
    """An HTTP error rendered as ``{"error": {"code": ..., "message": ...}}``."""

    def __init__(self, status_code: int, code: str, message: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.code = code
        self.message = message


def invalid_request(message: str) -> APIError:
    return APIError(400, ErrorCode.INVALID_REQUEST, message)


def task_not_found() -> APIError:
    return APIError(404, ErrorCode.TASK_NOT_FOUND, "Task not found")


def internal_server_error(message: str) -> APIError:
    return APIError(500, ErrorCode.INTERNAL_SERVER_ERROR, message)


def error_response(error: APIError) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=error.code, message=error.message))
    return JSONResponse(status_code=error.status_code, content=body.model_dump(), headers=error.headers)


async def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    return error_response(exc)


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Routing errors raised by the framework itself (unknown path, wrong method)."""
    if exc.status_code == 404:
        code = ErrorCode.TASK_NOT_FOUND
    elif exc.status_code >= 500:
        code = ErrorCode.INTERNAL_SERVER_ERROR
    else:
        code = ErrorCode.INVALID_REQUEST
    return error_response(APIError(exc.status_code, code, str(exc.detail), headers=exc.headers))


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    detail = errors[0].get("msg", "malformed request") if errors else "malformed request"
    return error_response(invalid_request(f"Invalid input: {detail}"))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error",
        exc_info=exc,
        extra={"method": request.method, "path": request.url.path},
    )
    return error_response(internal_server_error("Internal server error"))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(APIError, handle_api_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
