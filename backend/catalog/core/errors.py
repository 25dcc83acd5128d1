"""Error taxonomy shared by handlers and the app-level exception handlers."""

from __future__ import annotations

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

CONFIG_ERROR_MESSAGE = (
    "Image upload configuration error. Please check server settings."
)


class CatalogError(Exception):
    """Base class for errors that map onto a JSON ``{"message": ...}`` body."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(CatalogError):
    """Missing or invalid required field."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(CatalogError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Product not found"):
        super().__init__(message)


class MediaRejected(CatalogError):
    """Uploaded file was refused before reaching the media host."""

    status_code = status.HTTP_400_BAD_REQUEST


class UnsupportedMediaType(MediaRejected):
    def __init__(self, message: str = "Only image files are allowed!"):
        super().__init__(message)


class PayloadTooLarge(MediaRejected):
    def __init__(self, message: str = "File too large. Maximum size is 5MB."):
        super().__init__(message)


class UpstreamConfigError(CatalogError):
    """Media host rejected our credentials; the detail stays in the logs."""

    def __init__(self, message: str = CONFIG_ERROR_MESSAGE):
        super().__init__(message)


class UnexpectedError(CatalogError):
    """Store outage, network failure and anything else unclassified."""


class MediaStoreError(Exception):
    """Non-credential failure talking to the media host."""


class MediaCredentialsError(MediaStoreError):
    """Media host answered 401/403 or refused the api key."""


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed form bodies are reported the same way as missing fields."""
    fields = [".".join(str(part) for part in err.get("loc", ())) for err in exc.errors()]
    logger.info(f"Rejected request to {request.url.path}: invalid {fields}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": f"Invalid request fields: {', '.join(fields)}"},
    )


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last line of defence: surface the raw message with a 500."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    if isinstance(exc, MediaCredentialsError):
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": CONFIG_ERROR_MESSAGE},
        )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": str(exc) or "Something went wrong!"},
    )
