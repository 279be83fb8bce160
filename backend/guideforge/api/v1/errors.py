"""Mapping of service exceptions to HTTP responses.

Routes let service errors propagate; the handlers registered here turn them
into {"detail": ...} responses with the matching status code.
"""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from guideforge.services.exceptions import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    ServiceError,
    StorageError,
    UnauthorizedError,
)
from guideforge.services.manuals.exceptions import StepNotInManual
from guideforge.services.users.exceptions import InvalidCredentials

logger = structlog.get_logger(__name__)

# Checked in order, first match wins
_STATUS_BY_ERROR: list[tuple[type[ServiceError], int]] = [
    (InvalidCredentials, status.HTTP_401_UNAUTHORIZED),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (UnauthorizedError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InvalidArgumentError, status.HTTP_400_BAD_REQUEST),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def status_for(exc: ServiceError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def detail_for(exc: ServiceError, status_code: int) -> str:
    if status_code >= 500:
        # Internal details stay in the logs
        return "Internal storage error"
    message = str(exc)
    if message:
        return message
    name = type(exc).__name__
    if name.endswith("NotFound"):
        return f"{name.removesuffix('NotFound')} not found"
    if isinstance(exc, UnauthorizedError):
        return "Not allowed"
    return name


async def service_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, ServiceError)
    status_code = status_for(exc)
    body: dict[str, object] = {"detail": detail_for(exc, status_code)}
    if isinstance(exc, StepNotInManual):
        body["step_id"] = exc.step_id

    if status_code >= 500:
        logger.error(
            "Request failed",
            path=request.url.path,
            error=str(exc),
            cause=repr(exc.__cause__) if exc.__cause__ else None,
        )
    else:
        logger.info("Request rejected", path=request.url.path, status=status_code, error=type(exc).__name__)

    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
