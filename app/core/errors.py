"""
Error handling utilities following FastAPI best practices

Repositories raise StoreError carrying a closed ErrorKind; services translate
it into an ErrorResponse that the exception handlers below render.
"""

import traceback
from enum import Enum
from typing import Optional

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.core.config import config
from app.core.logger import logger


class ErrorKind(str, Enum):
    """Closed set of failure kinds visible to clients"""
    VALIDATION = "validation"
    DUPLICATE_KEY = "duplicate_key"
    NOT_FOUND = "not_found"
    UNCLASSIFIED = "unclassified"


class StoreError(Exception):
    """Failure raised by the data access layer, already classified"""

    def __init__(self, kind: ErrorKind, message: str, details: Optional[dict] = None):
        self.kind = kind
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ErrorResponse(Exception):
    """Custom exception for application errors"""

    def __init__(self, message: str, status_code: int = 400, details: dict = None,
                 kind: ErrorKind = ErrorKind.VALIDATION):
        self.message = message
        self.status_code = status_code
        self.kind = kind
        self.details = details or {}
        super().__init__(message)


class ErrorResponseModel(BaseModel):
    """Pydantic model for error responses"""
    error: str
    details: Optional[dict] = None


def handle_store_error(error: StoreError, entity: str) -> ErrorResponse:
    """
    Map a classified store failure to the error returned to the client.

    Anything that is not a known kind is reported as an internal error.
    """
    if error.kind == ErrorKind.DUPLICATE_KEY:
        logger.error(
            "Duplicate Key.",
            metadata={"event": "duplicate_key", "entity": entity, **error.details}
        )
        return ErrorResponse(
            "The element already exists in database.",
            status_code=400,
            kind=ErrorKind.DUPLICATE_KEY,
        )

    if error.kind == ErrorKind.NOT_FOUND:
        logger.error(
            "Not Found.",
            metadata={"event": "not_found", "entity": entity, **error.details}
        )
        return ErrorResponse(
            error.message or "The element not found in database.",
            status_code=404,
            kind=ErrorKind.NOT_FOUND,
        )

    if error.kind == ErrorKind.VALIDATION:
        return ErrorResponse(error.message, status_code=400, kind=ErrorKind.VALIDATION)

    logger.error(
        "Error Unknown in database.",
        error=error.__cause__ or error,
        metadata={"event": "unclassified_store_error", "entity": entity, **error.details}
    )
    return ErrorResponse(
        "Please check server logs.",
        status_code=500,
        kind=ErrorKind.UNCLASSIFIED,
    )


async def error_response_handler(request: Request, exc: ErrorResponse):
    """Handler for custom ErrorResponse exceptions"""
    metadata = {
        "event": "error_response",
        "status_code": exc.status_code,
        "kind": exc.kind.value,
        "url": str(request.url),
        "method": request.method,
    }

    if config.environment == "development":
        metadata["traceback"] = traceback.format_exc()

    logger.warning(f"Error: {exc.message}", metadata=metadata)

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "details": {"kind": exc.kind.value, **exc.details}}
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    """Handler for FastAPI HTTPException"""
    logger.warning(
        f"HTTPException: {exc.detail}",
        metadata={
            "event": "http_exception",
            "status_code": exc.status_code,
            "url": str(request.url),
            "method": request.method,
        }
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handler for request body/query validation failures"""
    return JSONResponse(
        status_code=400,
        content={"error": "Validation error", "details": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    """Strip non-serializable context (e.g. raised ValueErrors) from pydantic errors"""
    errors = []
    for err in exc.errors():
        err = dict(err)
        if "ctx" in err:
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        errors.append(err)
    return errors
