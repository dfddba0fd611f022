"""Error hierarchy for the Blood Donation API.

Every failure a handler can surface is an ApiError subclass carrying its
HTTP status, a stable code and whether the caller may retry. The global
handlers in app.error_handlers turn them into the JSON envelope.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    PAYMENT = "payment"
    UPSTREAM = "upstream"
    INTERNAL = "internal"


class ApiError(Exception):
    code = "INTERNAL_ERROR"
    http_status = 500
    category = ErrorCategory.INTERNAL
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, *, retriable: bool = False) -> None:
        self.message = message or self.default_message
        self.retriable = retriable
        super().__init__(self.message)

    def to_response(self) -> Dict[str, Any]:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "retriable": self.retriable,
            }
        }


class ValidationFailed(ApiError):
    code = "VALIDATION_ERROR"
    http_status = 400
    category = ErrorCategory.VALIDATION
    default_message = "Invalid request data"


class Unauthenticated(ApiError):
    code = "UNAUTHENTICATED"
    http_status = 401
    category = ErrorCategory.AUTHENTICATION
    default_message = "Unauthorized"


class Forbidden(ApiError):
    code = "ACCESS_DENIED"
    http_status = 403
    category = ErrorCategory.AUTHORIZATION
    default_message = "Access denied"


class BlockedUser(ApiError):
    code = "USER_BLOCKED"
    http_status = 403
    category = ErrorCategory.AUTHORIZATION
    default_message = "User blocked"


class NotFound(ApiError):
    code = "NOT_FOUND"
    http_status = 404
    category = ErrorCategory.RESOURCE_NOT_FOUND
    default_message = "Resource not found"


class DuplicateTransaction(ApiError):
    code = "DUPLICATE_TRANSACTION"
    http_status = 409
    category = ErrorCategory.CONFLICT
    default_message = "Transaction already recorded"


class RequestNotPending(ApiError):
    code = "REQUEST_NOT_PENDING"
    http_status = 409
    category = ErrorCategory.CONFLICT
    default_message = "Donation request is no longer pending"


class VerificationFailed(ApiError):
    code = "PAYMENT_VERIFICATION_FAILED"
    http_status = 400
    category = ErrorCategory.PAYMENT
    default_message = "Payment could not be verified"


class AmountMismatch(ApiError):
    code = "PAYMENT_AMOUNT_MISMATCH"
    http_status = 400
    category = ErrorCategory.PAYMENT
    default_message = "Paid amount does not match the submitted amount"


class UpstreamError(ApiError):
    code = "UPSTREAM_ERROR"
    http_status = 500
    category = ErrorCategory.UPSTREAM
    default_message = "A backing service is unavailable"
