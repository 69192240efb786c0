"""Error handling middleware and exception handlers."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from trustflow.domain.exceptions import (
    BackingStoreUnavailableException,
    DomainException,
    InvalidInputException,
    ScoreRecordNotFoundException,
)
from .request_context import get_request_id

logger = structlog.get_logger(__name__)


def _error_response(status_code: int, content: dict) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={**content, "request_id": get_request_id()},
    )


def error_handler_middleware(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Maps domain exceptions to appropriate HTTP responses.
    """

    @app.exception_handler(ScoreRecordNotFoundException)
    async def score_record_not_found_handler(
        request: Request,
        exc: ScoreRecordNotFoundException,
    ) -> JSONResponse:
        """Handle missing score records."""
        return _error_response(404, exc.to_dict())

    @app.exception_handler(InvalidInputException)
    async def invalid_input_handler(
        request: Request,
        exc: InvalidInputException,
    ) -> JSONResponse:
        """Handle rejected amounts and identifiers."""
        return _error_response(400, exc.to_dict())

    @app.exception_handler(BackingStoreUnavailableException)
    async def backing_store_unavailable_handler(
        request: Request,
        exc: BackingStoreUnavailableException,
    ) -> JSONResponse:
        """Handle history store failures; the client may retry."""
        logger.error(
            "backing_store_unavailable",
            operation=exc.operation,
            message=exc.message,
        )
        response = _error_response(
            503,
            {
                "error": exc.code,
                "message": "History store temporarily unavailable. Please retry.",
            },
        )
        response.headers["Retry-After"] = "1"
        return response

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle generic domain exceptions."""
        logger.warning(
            "domain_exception",
            code=exc.code,
            message=exc.message,
        )
        return _error_response(503 if exc.retriable else 400, exc.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return _error_response(
            500,
            {"error": "INTERNAL_ERROR", "message": "An unexpected error occurred."},
        )
