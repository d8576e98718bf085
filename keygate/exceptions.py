"""Custom exception classes for the Keygate project API."""

from typing import Any


class GatewayError(Exception):
    """Base exception for the gateway."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: Any = None,
    ) -> None:
        """
        Initialize exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code
            error_code: Machine-readable error code
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details


class ClientCredentialError(GatewayError):
    """Raised when a credential is missing, malformed or not usable (401)."""

    def __init__(
        self,
        message: str = "Unauthorized: Invalid or missing API key",
        error_code: str = "INVALID_CREDENTIAL",
        details: Any = None,
    ) -> None:
        """
        Initialize ClientCredentialError.

        Args:
            message: Error message
            error_code: Rejection code
            details: Additional error details
        """
        super().__init__(
            message=message,
            status_code=401,
            error_code=error_code,
            details=details,
        )


class PolicyError(GatewayError):
    """Raised when an authenticated caller is not allowed to proceed (403)."""

    def __init__(
        self,
        message: str = "Forbidden: Access denied",
        error_code: str = "INSUFFICIENT_PERMISSIONS",
        details: Any = None,
    ) -> None:
        """
        Initialize PolicyError.

        Args:
            message: Error message
            error_code: Rejection code
            details: Additional error details
        """
        super().__init__(
            message=message,
            status_code=403,
            error_code=error_code,
            details=details,
        )


class BadRequestError(GatewayError):
    """Raised when a required request field is absent (400)."""

    def __init__(
        self,
        message: str = "Bad request",
        error_code: str = "BAD_REQUEST",
        details: Any = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=400,
            error_code=error_code,
            details=details,
        )


class InfrastructureError(GatewayError):
    """Raised when a backing store fails during validation (500)."""

    def __init__(
        self,
        message: str = "Internal validation error",
        error_code: str = "CREDENTIAL_VALIDATION_FAILED",
        details: Any = None,
    ) -> None:
        """
        Initialize InfrastructureError.

        Args:
            message: Error message
            error_code: Machine-readable error code
            details: Additional error details
        """
        super().__init__(
            message=message,
            status_code=500,
            error_code=error_code,
            details=details,
        )


class StoreUnavailableError(InfrastructureError):
    """Raised when a store call times out or the store cannot be reached."""

    def __init__(self, store: str, operation: str) -> None:
        """
        Initialize StoreUnavailableError.

        Args:
            store: Name of the store that failed
            operation: Store operation that was attempted
        """
        super().__init__(
            message="Internal validation error",
            details="Please check your API key and try again",
        )
        self.store = store
        self.operation = operation
