"""Application error definitions and FastAPI handlers."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

logger = logging.getLogger(__name__)


class AppException(Exception):
    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST, code: str = "error"):
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)


class NotFoundException(AppException):
    def __init__(self, message: str = "Record not found"):
        super().__init__(message=message, status_code=status.HTTP_404_NOT_FOUND, code="not_found")


class ValidationAppException(AppException):
    def __init__(self, message: str = "Invalid data", code: str = "validation_error"):
        super().__init__(message=message, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, code=code)


class UnsupportedPricingMethod(ValidationAppException):
    def __init__(self, method):
        self.method = method
        super().__init__(message=f"Unsupported pricing method: {method!r}", code="unsupported_method")


def _format_error(detail: str, code: str, errors=None):
    body = {"message": detail, "code": code}
    if errors:
        body["errors"] = errors
    return body


def _field_errors(errors):
    return [
        {"field": ".".join(str(part) for part in err.get("loc", ())), "message": err.get("msg", "")}
        for err in errors
    ]


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        logger.info("%s %s rejected: %s (%s)", request.method, request.url.path, exc.message, exc.code)
        return JSONResponse(status_code=exc.status_code, content=_format_error(exc.message, exc.code))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_format_error("Request data failed validation", "validation_error", _field_errors(exc.errors())),
        )

    @app.exception_handler(ValidationError)
    async def pydantic_validation_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_format_error("Request data failed validation", "validation_error", _field_errors(exc.errors())),
        )
