"""
Global Exception Handlers for the Course Library API

Translates the Course Library error hierarchy into consistent JSON
error responses for whichever FastAPI application hosts the services.

Error Response Format:
{
    "error": {
        "status_code": 400,
        "error_code": "VALIDATION_INVALID_SHAPING_FIELD",
        "message": "Not all requested shaping fields exist on the resource: id,bogus",
        "type": "Bad Request",
        "details": {"field": "bogus", "resource_type": "AuthorDto"},
        "path": "/api/authors"
    }
}
"""

import logging
from typing import Any, Union

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from course_library.exceptions import CourseLibraryError, ErrorCode

logger = logging.getLogger(__name__)


# (type, default error code) for every status the handlers emit
STATUS_DESCRIPTIONS: dict[int, tuple[str, ErrorCode]] = {
    400: ("Bad Request", ErrorCode.VALIDATION_FAILED),
    404: ("Not Found", ErrorCode.RESOURCE_NOT_FOUND),
    422: ("Validation Error", ErrorCode.VALIDATION_FAILED),
    500: ("Internal Server Error", ErrorCode.INTERNAL_ERROR),
}


def describe_status(status_code: int) -> tuple[str, ErrorCode]:
    return STATUS_DESCRIPTIONS.get(status_code, ("Error", ErrorCode.UNKNOWN_ERROR))


def create_error_response(
    status_code: int,
    message: str,
    error_code: ErrorCode | None = None,
    details: dict[str, Any] | None = None,
    path: str | None = None,
) -> JSONResponse:
    """
    Build the JSON error envelope.

    ``error_code`` defaults to the generic code for ``status_code``;
    ``details`` and ``path`` are omitted when empty.
    """
    error_type, default_code = describe_status(status_code)
    error: dict[str, Any] = {
        "status_code": status_code,
        "error_code": (error_code or default_code).value,
        "message": message,
        "type": error_type,
    }
    if details:
        error["details"] = details
    if path:
        error["path"] = path
    return JSONResponse(status_code=status_code, content={"error": error})


async def course_library_exception_handler(request: Request, exc: CourseLibraryError) -> JSONResponse:
    """
    Handle Course Library exceptions.

    Client errors are logged as warnings; configuration errors are
    programming mistakes and are logged as errors.
    """
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        f"CourseLibraryError: {exc.message}",
        extra={
            "status_code": exc.status_code,
            "error_code": exc.error_code.value,
            "path": request.url.path,
            "details": exc.details,
        },
    )

    return create_error_response(
        status_code=exc.status_code,
        message=exc.message,
        error_code=exc.error_code,
        details=exc.details if exc.details else None,
        path=request.url.path,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle standard HTTP exceptions."""
    logger.warning(
        f"HTTPException: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
        },
    )

    return create_error_response(
        status_code=exc.status_code,
        message=str(exc.detail),
        path=request.url.path,
    )


async def validation_exception_handler(
    request: Request, exc: Union[RequestValidationError, PydanticValidationError]
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Returns a 422 response listing every failing field.
    """
    errors = []

    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"] if loc != "body")
        errors.append({"field": field, "message": error["msg"], "type": error["type"]})

    logger.warning(f"Validation error on {request.url.path}", extra={"errors": errors})

    return create_error_response(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        message="One or more validation errors occurred",
        error_code=ErrorCode.VALIDATION_FAILED,
        details={"validation_errors": errors},
        path=request.url.path,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions.

    Internal details are never exposed to the client.
    """
    logger.error(
        f"Unhandled exception: {str(exc)}",
        exc_info=True,
        extra={"path": request.url.path, "method": request.method},
    )

    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="An unexpected fault happened. Try again later.",
        error_code=ErrorCode.INTERNAL_ERROR,
        path=request.url.path,
    )


def register_exception_handlers(app) -> None:
    """
    Register all exception handlers with the FastAPI app.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(CourseLibraryError, course_library_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PydanticValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    logger.info("Exception handlers registered successfully")
