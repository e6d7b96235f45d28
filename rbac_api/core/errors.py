"""
Application error taxonomy.

Every error the core raises is an AppError subclass carrying:
- code: stable machine-readable identifier
- status_code: HTTP status the API layer maps it to
- message: human-readable detail
- error_id: UUID for log correlation

Storage-engine specifics never leak past the repositories: unique-constraint
violations surface as ConflictError, other database failures as InternalError.
"""

from enum import Enum
from uuid import uuid4


class ErrorCode(str, Enum):
    """Error codes for client-side handling."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DELIVERY_ERROR = "DELIVERY_ERROR"


class AppError(Exception):
    """Base exception for the application."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = 500
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: str | None = None, error_id: str | None = None):
        self.message = message or self.default_message
        self.error_id = error_id or str(uuid4())
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed input, rejected before any transaction opens."""

    code = ErrorCode.VALIDATION_ERROR
    status_code = 400
    default_message = "Invalid input"

    def __init__(
        self,
        message: str | None = None,
        errors: dict[str, str] | None = None,
        error_id: str | None = None,
    ):
        super().__init__(message, error_id)
        self.errors = errors or {}


class UnauthorizedError(AppError):
    """Bad credentials, missing or invalid token, invalid verification token."""

    code = ErrorCode.UNAUTHORIZED
    status_code = 401
    default_message = "Unauthorized"


class InvalidTokenError(UnauthorizedError):
    """Bearer token could not be accepted."""

    default_message = "Invalid token"
    reason = "invalid"


class TokenExpiredError(InvalidTokenError):
    """Bearer token signature is valid but it has expired."""

    default_message = "Token has expired"
    reason = "expired"


class TokenInvalidError(InvalidTokenError):
    """Bearer token is malformed, badly signed or missing claims."""

    default_message = "Token is malformed or has an invalid signature"
    reason = "malformed"


class ForbiddenError(AppError):
    """Authenticated, but lacking a required permission."""

    code = ErrorCode.FORBIDDEN
    status_code = 403
    default_message = "You do not have permission to perform this action"


class NotFoundError(AppError):
    """Referenced entity is absent."""

    code = ErrorCode.NOT_FOUND
    status_code = 404
    default_message = "Not found"

    @classmethod
    def for_entity(cls, entity: str, identifier: object) -> "NotFoundError":
        return cls(f"{entity} '{identifier}' not found")


class ConflictError(AppError):
    """Entity already exists or is already in the requested state."""

    code = ErrorCode.CONFLICT
    status_code = 409
    default_message = "Already exists"


class InternalError(AppError):
    """Store or infrastructure failure after exhausting recoverable paths."""

    code = ErrorCode.INTERNAL_ERROR
    status_code = 500
    default_message = "Internal error"


class DeliveryError(AppError):
    """Notification gateway could not deliver a message."""

    code = ErrorCode.DELIVERY_ERROR
    status_code = 502
    default_message = "Notification delivery failed"
