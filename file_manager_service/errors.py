"""Error kinds raised by the file manager and their single mapping to HTTP responses.

Operations raise one of the ``FileManagerError`` subclasses below. Route bodies run
inside :func:`operation`, which logs the raw cause of any server-side failure and
swaps its client-facing text for the operation's generic message. The handlers
registered by :func:`register_exception_handlers` turn the error kind into a
status code and an ``{"error": ...}`` body.
"""
from contextlib import asynccontextmanager
from enum import Enum
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from logging_config import get_logger

logger = get_logger(__name__)


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    BLOB_MISSING = "blob_missing"
    STORAGE = "storage"
    DATABASE = "database"
    INTERNAL = "internal"


STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.BLOB_MISSING: 404,
    ErrorKind.STORAGE: 500,
    ErrorKind.DATABASE: 500,
    ErrorKind.INTERNAL: 500,
}


class FileManagerError(Exception):
    kind = ErrorKind.INTERNAL
    default_message = "Internal server error"

    def __init__(self, detail: str = "", public_message: Optional[str] = None):
        super().__init__(detail or public_message or self.default_message)
        self.detail = detail
        self.public_message = public_message or self.default_message

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


class ValidationError(FileManagerError):
    kind = ErrorKind.VALIDATION
    default_message = "Invalid request"


class NotFoundError(FileManagerError):
    kind = ErrorKind.NOT_FOUND
    default_message = "File not found"


class BlobMissingError(FileManagerError):
    kind = ErrorKind.BLOB_MISSING
    default_message = "File missing on disk"


class StorageError(FileManagerError):
    kind = ErrorKind.STORAGE
    default_message = "Storage failure"


class DatabaseError(FileManagerError):
    kind = ErrorKind.DATABASE
    default_message = "Database failure"


class InternalError(FileManagerError):
    kind = ErrorKind.INTERNAL


@asynccontextmanager
async def operation(failure_message: str):
    """Error boundary for one API operation.

    Client errors (4xx kinds) pass through untouched. Server-side failures are
    logged with their raw cause and re-raised carrying ``failure_message`` only.
    """
    try:
        yield
    except FileManagerError as exc:
        if exc.status_code < 500:
            raise
        logger.error(f"{failure_message}: {exc.kind.value} error: {exc}", exc_info=exc)
        exc.public_message = failure_message
        raise
    except Exception as exc:
        logger.exception(f"{failure_message}: unexpected error")
        raise InternalError(str(exc), public_message=failure_message) from exc


async def file_manager_error_handler(request: Request, exc: FileManagerError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


def _error_for_invalid_request(exc: RequestValidationError) -> FileManagerError:
    locations = [tuple(err.get("loc", ())) for err in exc.errors()]
    # An id that can never match a row is answered like any unknown id.
    if any(loc[:2] == ("path", "file_id") for loc in locations):
        return NotFoundError("non-integer file id")
    if any(loc[:2] == ("body", "file") for loc in locations):
        return ValidationError("'file' is not a file part", public_message="No file uploaded")
    return ValidationError()


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f"Rejected malformed request {request.method} {request.url.path}: {exc.errors()}")
    error = _error_for_invalid_request(exc)
    return JSONResponse(status_code=error.status_code, content={"error": error.public_message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(FileManagerError, file_manager_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
