"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions. Every exception carries an
ErrorCategory, which the API layer turns into an HTTP status.
"""
from enum import Enum
from typing import Optional


class ErrorCategory(Enum):
    """Failure taxonomy shared by every component."""

    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    THROTTLED = "throttled"
    UNAVAILABLE = "unavailable"
    INTERNAL = "internal"

    def __str__(self) -> str:
        """Return category as string."""
        return self.value


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    category = ErrorCategory.INTERNAL
    status_code: Optional[int] = None

    def __init__(
        self,
        message: str,
        code: str = None,
        category: Optional[ErrorCategory] = None,
    ):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
            category: Failure category (defaults to the class category)
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        if category is not None:
            self.category = category


class ValidationError(DomainException):
    """Raised when a request is missing fields or carries bad values."""

    category = ErrorCategory.VALIDATION

    def __init__(self, message: str = "Invalid input. Please check your fields."):
        super().__init__(message, code="VALIDATION_ERROR")


class LicenseException(DomainException):
    """Base exception for license-related errors."""

    pass


class LicenseNotFoundError(LicenseException):
    """Raised when a license is not found."""

    category = ErrorCategory.NOT_FOUND

    def __init__(self, message: str = "License not found. It may have been deleted."):
        super().__init__(message, code="LICENSE_NOT_FOUND")


class LicenseAlreadyExistsError(LicenseException):
    """Raised when a license with the same customer and system ID exists."""

    category = ErrorCategory.CONFLICT

    def __init__(self, message: str = "License already exists for this customer."):
        super().__init__(message, code="LICENSE_ALREADY_EXISTS")


class SimilarLicenseExistsError(LicenseException):
    """Raised when the customer already holds a license with the same terms."""

    category = ErrorCategory.CONFLICT

    def __init__(self, message: str = "A similar license already exists for this customer."):
        super().__init__(message, code="SIMILAR_LICENSE_EXISTS")


class DuplicateSubmissionError(LicenseException):
    """Raised when an identical create request arrives inside the guard window."""

    category = ErrorCategory.CONFLICT

    def __init__(
        self,
        message: str = (
            "A similar license create request was just submitted. "
            "Please wait a few seconds and try again."
        ),
    ):
        super().__init__(message, code="DUPLICATE_SUBMISSION")


class InvalidActivationPasswordError(LicenseException):
    """Raised when the activation password does not match the license."""

    category = ErrorCategory.UNAUTHORIZED

    def __init__(
        self,
        message: str = "Invalid password. Please check your credentials and try again.",
    ):
        super().__init__(message, code="INVALID_ACTIVATION_PASSWORD")


class SealedPayloadError(LicenseException):
    """Raised when a sealed payload cannot be opened."""

    category = ErrorCategory.VALIDATION

    def __init__(self, message: str = "Sealed payload could not be decrypted"):
        super().__init__(message, code="SEALED_PAYLOAD_INVALID")


class AuthException(DomainException):
    """Base exception for authentication errors."""

    category = ErrorCategory.UNAUTHORIZED


class InvalidCredentialsError(AuthException):
    """Raised for an unknown username or a wrong password, indistinguishably."""

    def __init__(self, message: str = "Invalid username or password."):
        super().__init__(message, code="INVALID_CREDENTIALS")


class IncorrectPasswordError(AuthException):
    """Raised when the current password does not match on password change."""

    def __init__(self, message: str = "Current password is incorrect."):
        super().__init__(message, code="INCORRECT_PASSWORD")


class MissingTokenError(AuthException):
    """Raised when a request carries no token."""

    def __init__(self, message: str = "Access token is required"):
        super().__init__(message, code="MISSING_TOKEN")


class TokenExpiredError(AuthException):
    """Raised when a token signature is valid but the token has expired."""

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class TokenRevokedError(AuthException):
    """Raised when a token has been blacklisted."""

    def __init__(self, message: str = "Token has been invalidated"):
        super().__init__(message, code="TOKEN_REVOKED")


class InvalidTokenError(AuthException):
    """Raised when a token is malformed, badly signed or of the wrong type."""

    category = ErrorCategory.FORBIDDEN

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, code="INVALID_TOKEN")


class UserNotFoundError(AuthException):
    """Raised when a user referenced by a token or request does not exist."""

    category = ErrorCategory.NOT_FOUND

    def __init__(self, message: str = "User not found"):
        super().__init__(message, code="USER_NOT_FOUND")


class StoreErrorKind(Enum):
    """Failure kinds reported by storage and vault adapters."""

    CONDITION_FAILED = "condition_failed"
    THROTTLED = "throttled"
    UNAVAILABLE = "unavailable"
    ACCESS_DENIED = "access_denied"
    MISSING_RESOURCE = "missing_resource"
    INVALID_REQUEST = "invalid_request"
    INTERNAL = "internal"


# Single mapping from adapter failures to the taxonomy and the message the
# client sees. Adapter details stay in server logs.
STORE_ERROR_CATEGORIES = {
    StoreErrorKind.CONDITION_FAILED: (
        ErrorCategory.CONFLICT,
        "The record changed or does not exist.",
    ),
    StoreErrorKind.THROTTLED: (
        ErrorCategory.THROTTLED,
        "Too many requests. Please try again later.",
    ),
    StoreErrorKind.UNAVAILABLE: (
        ErrorCategory.UNAVAILABLE,
        "Service temporarily unavailable. Please try again later.",
    ),
    StoreErrorKind.ACCESS_DENIED: (
        ErrorCategory.FORBIDDEN,
        "Access denied.",
    ),
    StoreErrorKind.MISSING_RESOURCE: (
        ErrorCategory.INTERNAL,
        "Storage is not configured.",
    ),
    StoreErrorKind.INVALID_REQUEST: (
        ErrorCategory.VALIDATION,
        "Invalid input. Please check your fields.",
    ),
    StoreErrorKind.INTERNAL: (
        ErrorCategory.INTERNAL,
        "An internal error occurred",
    ),
}


class StoreError(DomainException):
    """Raised by storage adapters; the kind decides the category."""

    def __init__(self, kind: StoreErrorKind, detail: str = ""):
        """
        Initialize store error.

        Args:
            kind: Failure kind reported by the adapter
            detail: Adapter-level detail, kept for logs only
        """
        category, message = STORE_ERROR_CATEGORIES[kind]
        super().__init__(message, code=f"STORE_{kind.name}", category=category)
        self.kind = kind
        self.detail = detail
