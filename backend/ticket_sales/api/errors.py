"""
Maps domain errors to JSON responses.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ticket_sales.core.errors import (
    ConfigurationError,
    DomainError,
    LookupFailure,
    TicketUnavailableError,
)
from ticket_sales.core.logging import get_logger

logger = get_logger(__name__)


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    body: dict = {"detail": exc.message}

    if isinstance(exc, ConfigurationError):
        body["errors"] = exc.errors
    elif isinstance(exc, TicketUnavailableError):
        body["reason"] = exc.result.reason.value
        if exc.result.available_at is not None:
            body["available_at"] = exc.result.available_at.isoformat()
    elif isinstance(exc, LookupFailure):
        logger.error("lookup_failure_response", operation=exc.operation)

    return JSONResponse(status_code=exc.status_code, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
