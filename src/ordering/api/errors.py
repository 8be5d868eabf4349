"""Maps ordering failures to HTTP responses.

Builds on Protean's FastAPI exception handlers and pins the status codes
the ordering API promises to its clients.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, InvalidOperationError, ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers

from ordering.exceptions import NotOrderOwnerError, UpstreamUnavailable

logger = structlog.get_logger(__name__)

_STATUS_CODES = {
    ObjectNotFoundError: 404,
    NotOrderOwnerError: 403,
    InvalidOperationError: 409,
    ExpectedVersionError: 409,
    ValidationError: 422,
    UpstreamUnavailable: 503,
}


def _error_body(exc: Exception):
    return getattr(exc, "messages", None) or str(exc)


async def _handle_ordering_error(request: Request, exc: Exception) -> JSONResponse:
    status_code = next(code for exc_cls, code in _STATUS_CODES.items() if isinstance(exc, exc_cls))
    if status_code == 503:
        logger.error("Upstream service unavailable", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=status_code, content={"error": _error_body(exc)})


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    for exc_cls in _STATUS_CODES:
        app.add_exception_handler(exc_cls, _handle_ordering_error)
