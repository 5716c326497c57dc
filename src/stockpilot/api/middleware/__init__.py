"""API middleware."""

from stockpilot.api.middleware.error_handler import ErrorHandlerMiddleware
from stockpilot.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
