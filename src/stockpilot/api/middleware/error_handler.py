"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from stockpilot.application.dto.responses import ErrorResponse
from stockpilot.config import get_logger
from stockpilot.core.exceptions import (
    ConfigurationError,
    InsufficientStockError,
    LedgerIntegrityError,
    LLMError,
    NotFoundError,
    PartialCascadeError,
    PersistenceError,
    ReportRenderError,
    StockPilotError,
    ValidationError,
)

logger = get_logger(__name__)


# Map exceptions to HTTP status codes; first match wins
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    InsufficientStockError: status.HTTP_409_CONFLICT,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    PartialCascadeError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    LedgerIntegrityError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    PersistenceError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ReportRenderError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    LLMError: status.HTTP_503_SERVICE_UNAVAILABLE,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
}

# Hint messages per error code
HINT_MAP: dict[str, str] = {
    "WAREHOUSE_NOT_FOUND": "Check the warehouse ID and try GET /api/warehouses to list warehouses.",
    "ITEM_NOT_FOUND": "Check the item ID and try GET /api/items to list items.",
    "REPORT_NOT_FOUND": "Check the report ID and try GET /api/archive/reports.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "INSUFFICIENT_STOCK": "Consume at most the available quantity, or add stock first.",
    "PARTIAL_CASCADE": "The warehouse is archived; archive the pending items individually.",
    "LEDGER_INTEGRITY": "The item's history is inconsistent. Run GET /api/items/{id}/verify.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
    "STORAGE_FILE_ERROR": "The data file could not be read or written. Check its permissions.",
    "REPORT_RENDER_FAILED": "The report could not be rendered; nothing was archived. Retry.",
    "LLM_UNAVAILABLE": "The LLM provider is offline. Retry later.",
    "LLM_TIMEOUT": "The LLM request timed out. Retry with less historical data.",
    "LLM_RESPONSE_ERROR": "The model returned an unusable answer. Retry the suggestion.",
    "MODEL_NOT_FOUND": "Pull the configured model on the Ollama host.",
    "CIRCUIT_BREAKER_OPEN": "Too many LLM failures. Wait for cooldown before retrying.",
    "ValueError": "A parameter value is invalid. Check the request.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "The requested resource was not found. Verify the ID.",
    409: "The request conflicts with the current stock level.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
    503: "The service is temporarily unavailable. Retry later.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(request: Request, exc: Exception) -> JSONResponse:
    """Convert an exception to the standardized JSON error response."""
    status_code = status_for(exc)

    if isinstance(exc, StockPilotError):
        error_code = exc.code
        message = exc.message
        details = exc.details or None
    else:
        error_code = exc.__class__.__name__
        # Unexpected errors keep their text out of the response
        message = str(exc) if status_code < 500 else "Internal server error"
        details = None

    log = logger.warning if status_code < 500 else logger.error
    log(
        "request_error",
        request_id=getattr(request.state, "request_id", None),
        path=request.url.path,
        error_type=error_code,
        error=str(exc),
        traceback=(
            traceback.format_exc()
            if status_code >= 500 and not isinstance(exc, StockPilotError)
            else None
        ),
    )

    body = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=_get_hint(error_code, status_code),
        details=details,
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Last line of defence for anything the exception handlers did not turn
    into a response.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(StockPilotError)
    async def domain_exception_handler(
        request: Request,
        exc: StockPilotError,
    ) -> JSONResponse:
        return error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint="Check the request body fields and types.",
                detail="; ".join(errors),
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = _infer_error_code(exc.status_code)
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=exc.detail or "An error occurred",
                hint=_get_hint(error_code, exc.status_code),
                path=request.url.path,
            ).model_dump(mode="json"),
        )


def _infer_error_code(status_code: int) -> str:
    if status_code == 404:
        return "NOT_FOUND"
    if status_code == 405:
        return "METHOD_NOT_ALLOWED"
    if status_code == 400:
        return "BAD_REQUEST"
    return "HTTP_ERROR"
