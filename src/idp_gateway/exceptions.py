from typing import Any, Dict, Optional


#       BASE EXCEPTIONS
# ------------------------------


class GatewayError(Exception):
    """
    Base exception for all identity gateway errors.
    """

    def __init__(
        self,
        message: str,
        code: str = "GATEWAY_ERROR",
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": dict(self.details),
        }

    def with_prefix(self, prefix: str) -> "GatewayError":
        """Return a copy of this error whose message is prefixed with context."""
        clone = self.__class__.__new__(self.__class__)
        clone.__dict__.update(self.__dict__)
        clone.message = f"{prefix}: {self.message}"
        clone.args = (clone.message,)
        return clone


#       CONFIGURATION EXCEPTIONS
# -------------------------------------


class ConfigFetchError(GatewayError):
    """Raised when the tenant configuration store is unreachable or has no record."""

    def __init__(self, message: str = "Failed to fetch tenant configuration", **kwargs):
        super().__init__(
            message=message,
            code="CONFIG_FETCH_ERROR",
            status_code=503,
            **kwargs,
        )


class ConfigValidationError(GatewayError):
    """Raised when a tenant configuration lacks a required field."""

    def __init__(self, missing_field: str, message: Optional[str] = None, **kwargs):
        self.missing_field = missing_field
        super().__init__(
            message=message or f"Missing required configuration: {missing_field}",
            code="CONFIG_VALIDATION_ERROR",
            status_code=500,
            **kwargs,
        )


class NotInitializedError(GatewayError):
    """Raised when the gateway is used before init() succeeded."""

    def __init__(self, message: str = "Gateway not initialized", **kwargs):
        super().__init__(
            message=message,
            code="NOT_INITIALIZED",
            status_code=500,
            **kwargs,
        )


#       IDENTITY PROVIDER EXCEPTIONS
# -----------------------------------------


class ProviderHttpError(GatewayError):
    """Raised when the identity provider answers with a non-2xx status or is unreachable."""

    def __init__(
        self,
        message: str = "Identity provider request failed",
        provider_status: Optional[int] = None,
        **kwargs,
    ):
        self.provider_status = provider_status
        super().__init__(
            message=message,
            code="PROVIDER_HTTP_ERROR",
            status_code=502,
            **kwargs,
        )


class ManagementTokenError(ProviderHttpError):
    """Raised when the client-credentials grant for the Management API fails."""


#       REQUEST / USER EXCEPTIONS
# --------------------------------------


class ValidationError(GatewayError):
    """Raised when a request is missing required fields."""

    def __init__(self, message: str = "Invalid request", **kwargs):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            **kwargs,
        )


class UserNotFoundError(GatewayError):
    """Raised when a user is not found."""

    def __init__(self, message: str = "User not found", **kwargs):
        super().__init__(
            message=message,
            code="USER_NOT_FOUND",
            status_code=404,
            **kwargs,
        )
