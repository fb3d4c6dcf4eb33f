"""Domain exceptions for the CivicKey application.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class CivicKeyException(Exception):
    """Base exception for all CivicKey application errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API error responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(CivicKeyException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(CivicKeyException):
    """Raised when the bearer token is missing, invalid or expired."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class SessionExpiredException(CivicKeyException):
    """Raised when an admin session has been idle past the inactivity threshold."""

    def __init__(self) -> None:
        super().__init__(
            "Session expired due to inactivity",
            "SESSION_EXPIRED",
        )


class AuthorizationException(CivicKeyException):
    """Raised when the admin's role does not allow the feature/action pair."""

    def __init__(
        self,
        feature: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional feature, action, and message.

        Args:
            feature: Optional feature name (e.g. 'events', 'zones').
            action: Optional action that was attempted (e.g. 'create').
            message: Human-readable message; default used when feature/action omitted.
        """
        if feature and action:
            message = f"Permission denied: {action} on {feature}"
        details: dict[str, Any] = {}
        if feature:
            details["feature"] = feature
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class IdentityException(CivicKeyException):
    """Raised for sign-in / password-reset failures and unauthorized accounts.

    message is always one of the user-facing strings in
    civickey.application.services.identity_messages.
    """

    def __init__(self, message: str, reason: str) -> None:
        super().__init__(message, "IDENTITY_ERROR", {"reason": reason})


class TenantNotFoundException(CivicKeyException):
    """Raised when a municipality does not exist or is not active."""

    def __init__(self, municipality_id: str) -> None:
        super().__init__(
            f"Municipality not found: {municipality_id}",
            "TENANT_NOT_FOUND",
            {"municipality_id": municipality_id},
        )


class ResourceNotFoundException(CivicKeyException):
    """Raised when a requested tenant-scoped resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ResourceAlreadyExistsException(CivicKeyException):
    """Raised when creating a document whose ID (municipality id, page slug) is taken."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} '{resource_id}' already exists",
            "ALREADY_EXISTS",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class StoreNotConfiguredException(CivicKeyException):
    """Raised when an operation needs the document store but no credentials are configured."""

    def __init__(self) -> None:
        super().__init__(
            message="The document store is not configured.",
            error_code="STORE_NOT_CONFIGURED",
        )


class DomainRegistrationException(CivicKeyException):
    """Raised when the hosting provider rejects a custom-domain operation."""

    def __init__(self, domain: str, message: str, status_code: int = 502) -> None:
        super().__init__(
            message,
            "DOMAIN_REGISTRATION_ERROR",
            {"domain": domain, "status_code": status_code},
        )
