"""HTTP middleware: request IDs, access logging with metrics, error mapping."""

from .error_handler import error_handler_middleware
from .logging import LoggingMiddleware
from .request_context import RequestContextMiddleware, get_request_id

__all__ = [
    "error_handler_middleware",
    "get_request_id",
    "LoggingMiddleware",
    "RequestContextMiddleware",
]
