from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

from models.errors import Error
from models.order import ErrorResponse, FieldError, ValidationErrorResponse

logger = logging.getLogger(__name__)


def status_code_for(error: Error) -> int:
    if error.code.endswith(".NotFound"):
        return status.HTTP_404_NOT_FOUND
    if error.code.endswith(".Duplicate"):
        return status.HTTP_409_CONFLICT
    return status.HTTP_400_BAD_REQUEST


def to_error_response(error: Error) -> JSONResponse:
    """Renders a business error with the status its code suffix calls for."""
    return JSONResponse(
        status_code=status_code_for(error),
        content=ErrorResponse(code=error.code, message=error.message).model_dump(),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        FieldError(
            field=".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            message=err.get("msg", "Invalid value"),
        )
        for err in exc.errors()
    ]
    logger.info(f"Rejected {request.method} {request.url.path}: {len(errors)} validation error(s)")
    error = Error.validation("One or more validation errors occurred.")
    body = ValidationErrorResponse(code=error.code, message=error.message, errors=errors)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "An unexpected error occurred."},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
