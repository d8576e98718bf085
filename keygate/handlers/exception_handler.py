"""Global exception handlers for consistent error responses."""

from datetime import UTC, datetime
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from keygate.exceptions import GatewayError
from keygate.logging.config import get_logger

logger = get_logger(__name__)

# Developer-facing hints per error code
ERROR_SUGGESTIONS: dict[str, list[str]] = {
    "MISSING_CREDENTIAL": [
        "Add X-API-Key header to your request",
        "Include apikey query parameter",
        "Check your SDK configuration",
    ],
    "INVALID_FORMAT": [
        "Verify your API key format",
        "Copy the full API key from your dashboard",
        "Check for any truncation or modification",
    ],
    "INVALID_CREDENTIAL": [
        "Verify your API key is correct",
        "Check if the key has been revoked",
        "Generate a new API key from your dashboard",
    ],
    "CREDENTIAL_EXPIRED": [
        "Generate a new API key from your dashboard",
        "Check your key expiration settings",
    ],
    "CREDENTIAL_REVOKED": [
        "Generate a new API key from your dashboard",
        "Switch to the key that replaced this one",
    ],
    "TENANT_MISMATCH": [
        "Use the correct API key for your project",
        "Check your project configuration",
    ],
    "TENANT_NOT_FOUND": [
        "Verify your project exists and is active",
        "Contact support if project was accidentally deleted",
    ],
    "ORIGIN_NOT_ALLOWED": [
        "Add your IP to the allowlist in your dashboard",
        "Use a development API key for testing",
        "Contact your network administrator",
    ],
    "INSUFFICIENT_PERMISSIONS": [
        "Update your API key permissions in the dashboard",
        "Use an API key with broader permissions",
        "Contact your project administrator",
    ],
    "MISSING_PROJECT_NAME": [
        "Include projectName in your request body or query",
    ],
    "PROJECT_NAME_MISMATCH": [
        "Use the name of the project your API key belongs to",
    ],
}
DEFAULT_SUGGESTIONS = ["Contact support for assistance"]


def create_error_response(
    error_code: str,
    message: str,
    status_code: int,
    details: Any = None,
    correlation_id: str | None = None,
) -> JSONResponse:
    """
    Create standardized error response.

    Args:
        error_code: Machine-readable error code
        message: Human-readable error message
        status_code: HTTP status code
        details: Additional error details
        correlation_id: Request correlation ID for tracing

    Returns:
        JSONResponse with error information
    """
    error: dict[str, Any] = {
        "code": error_code,
        "message": message,
        "timestamp": datetime.now(UTC).isoformat(),
    }
    if details:
        error["details"] = details
    error["suggestions"] = ERROR_SUGGESTIONS.get(error_code, DEFAULT_SUGGESTIONS)

    content: dict[str, Any] = {"success": False, "error": error}
    if correlation_id:
        content["correlation_id"] = correlation_id

    return JSONResponse(status_code=status_code, content=content)


async def gateway_exception_handler(
    request: Request, exc: GatewayError
) -> JSONResponse:
    """
    Handle custom GatewayError.

    Args:
        request: FastAPI request
        exc: GatewayError instance

    Returns:
        JSONResponse with error details
    """
    correlation_id = getattr(request.state, "correlation_id", None)

    return create_error_response(
        error_code=exc.error_code,
        message=exc.message,
        status_code=exc.status_code,
        details=exc.details,
        correlation_id=correlation_id,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle Pydantic validation errors from FastAPI.

    Args:
        request: FastAPI request
        exc: RequestValidationError from Pydantic

    Returns:
        JSONResponse with validation error details
    """
    correlation_id = getattr(request.state, "correlation_id", None)

    validation_errors = []
    for error in exc.errors():
        # Skip 'body' prefix for cleaner field paths
        field_parts = [str(loc) for loc in error["loc"] if loc != "body"]
        field = ".".join(field_parts) if field_parts else "request"
        msg = "Field is required" if error["type"] == "missing" else error["msg"]
        validation_errors.append(
            {"field": field, "message": msg, "type": error["type"]}
        )

    summary = (
        f"{validation_errors[0]['field']}: {validation_errors[0]['message']}"
        if validation_errors
        else "Invalid request data"
    )
    if len(validation_errors) > 1:
        summary += f" (and {len(validation_errors) - 1} more errors)"

    return create_error_response(
        error_code="VALIDATION_ERROR",
        message=summary,
        status_code=status.HTTP_400_BAD_REQUEST,
        details={"validation_errors": validation_errors},
        correlation_id=correlation_id,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions.

    Logs the full traceback and returns a generic error to the client;
    exception text is never echoed in the response.

    Args:
        request: FastAPI request
        exc: Any unhandled exception

    Returns:
        JSONResponse with generic error message
    """
    correlation_id = getattr(request.state, "correlation_id", None)

    logger.error(
        f"Unhandled exception: {type(exc).__name__}",
        exc_info=exc,
        extra={
            "correlation_id": correlation_id,
            "context": {
                "exception_type": type(exc).__name__,
                "method": request.method,
                "path": request.url.path,
            },
        },
    )

    return create_error_response(
        error_code="INTERNAL_ERROR",
        message="An internal error occurred. Please contact support with the correlation ID.",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        correlation_id=correlation_id,
    )
