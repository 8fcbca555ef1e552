# backend/crm_api/api/errors.py
"""Map domain errors onto HTTP responses."""

import logging
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from crm_api.core.errors import (
    AlreadyExistsError,
    CRMError,
    InvalidInputError,
    NotAllowedError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (NotAllowedError, status.HTTP_403_FORBIDDEN),
    (AlreadyExistsError, status.HTTP_409_CONFLICT),
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
]

GENERIC_ERROR_MESSAGE = "internal server error"


def status_for(exc: CRMError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(CRMError)
    async def crm_error_handler(request: Request, exc: CRMError):
        status_code = status_for(exc)
        if status_code == status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc)
            return JSONResponse(status_code=status_code, content={"detail": GENERIC_ERROR_MESSAGE})
        return JSONResponse(status_code=status_code, content={"detail": exc.message})

    # Catch all unhandled exceptions
    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": GENERIC_ERROR_MESSAGE},
        )
