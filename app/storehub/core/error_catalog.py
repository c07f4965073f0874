from dataclasses import dataclass
from fastapi import status


@dataclass(frozen=True)
class ErrorDefinition:
    code: str
    message: str
    status_code: int


class ErrorCatalog:
    TENANT_IDENTIFIER_MISSING = ErrorDefinition(
        "TENANT_IDENTIFIER_MISSING",
        "Please provide a valid tenant identifier",
        status.HTTP_400_BAD_REQUEST,
    )
    TENANT_NOT_FOUND = ErrorDefinition(
        "TENANT_NOT_FOUND",
        "The specified tenant could not be found",
        status.HTTP_404_NOT_FOUND,
    )
    TENANT_INACTIVE = ErrorDefinition(
        "TENANT_INACTIVE",
        "This tenant is not currently active",
        status.HTTP_403_FORBIDDEN,
    )
    SUBSCRIPTION_EXPIRED = ErrorDefinition(
        "SUBSCRIPTION_EXPIRED",
        "Your subscription has expired. Please renew to continue.",
        status.HTTP_403_FORBIDDEN,
    )
    SECTOR_ACCESS_DENIED = ErrorDefinition(
        "SECTOR_ACCESS_DENIED",
        "Access to this sector denied",
        status.HTTP_403_FORBIDDEN,
    )
    SECTOR_ID_MISSING = ErrorDefinition(
        "SECTOR_ID_MISSING",
        "Sector ID required",
        status.HTTP_400_BAD_REQUEST,
    )
    TENANT_MISMATCH = ErrorDefinition(
        "TENANT_MISMATCH",
        "User does not belong to this tenant",
        status.HTTP_403_FORBIDDEN,
    )
    TENANT_RESOLUTION_ERROR = ErrorDefinition(
        "TENANT_RESOLUTION_ERROR",
        "Failed to resolve tenant",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    TOKEN_MISSING = ErrorDefinition("TOKEN_MISSING", "Access token required", status.HTTP_401_UNAUTHORIZED)
    TOKEN_INVALID = ErrorDefinition("TOKEN_INVALID", "Invalid or expired token", status.HTTP_401_UNAUTHORIZED)
    TOKEN_EXPIRED = ErrorDefinition("TOKEN_EXPIRED", "Token expired", status.HTTP_401_UNAUTHORIZED)
    SESSION_INVALID = ErrorDefinition("SESSION_INVALID", "Invalid session", status.HTTP_401_UNAUTHORIZED)
    INVALID_CREDENTIALS = ErrorDefinition(
        "INVALID_CREDENTIALS",
        "Invalid credentials",
        status.HTTP_401_UNAUTHORIZED,
    )
    AUTHENTICATION_REQUIRED = ErrorDefinition(
        "AUTHENTICATION_REQUIRED",
        "Authentication required",
        status.HTTP_401_UNAUTHORIZED,
    )
    USER_INACTIVE = ErrorDefinition(
        "USER_INACTIVE",
        "User account is inactive",
        status.HTTP_403_FORBIDDEN,
    )
    IP_RESTRICTED = ErrorDefinition(
        "IP_RESTRICTED",
        "Access denied from this IP address",
        status.HTTP_403_FORBIDDEN,
    )
    AUTH_ERROR = ErrorDefinition(
        "AUTH_ERROR",
        "Authentication failed",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    INSUFFICIENT_PERMISSIONS = ErrorDefinition(
        "INSUFFICIENT_PERMISSIONS",
        "Permission denied",
        status.HTTP_403_FORBIDDEN,
    )
    INSUFFICIENT_ROLE_LEVEL = ErrorDefinition(
        "INSUFFICIENT_ROLE_LEVEL",
        "Insufficient role level",
        status.HTTP_403_FORBIDDEN,
    )
    TWO_FACTOR_REQUIRED = ErrorDefinition(
        "2FA_REQUIRED",
        "Two-factor authentication required",
        status.HTTP_403_FORBIDDEN,
    )
    RATE_LIMIT_EXCEEDED = ErrorDefinition(
        "RATE_LIMIT_EXCEEDED",
        "Too many requests",
        status.HTTP_429_TOO_MANY_REQUESTS,
    )
    NOT_FOUND = ErrorDefinition("NOT_FOUND", "Resource not found", status.HTTP_404_NOT_FOUND)
    DB_UNAVAILABLE = ErrorDefinition(
        "DB_UNAVAILABLE",
        "Database unavailable",
        status.HTTP_503_SERVICE_UNAVAILABLE,
    )
    VALIDATION_ERROR = ErrorDefinition(
        "VALIDATION_ERROR",
        "Validation error",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
    )
    INTERNAL_ERROR = ErrorDefinition(
        "INTERNAL_ERROR",
        "Internal server error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


class AppError(Exception):
    def __init__(self, error: ErrorDefinition, details: object | None = None, message: str | None = None):
        self.error = error
        self.details = details
        self.message = message or error.message
        super().__init__(self.message)
