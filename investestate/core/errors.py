"""Error Hierarchy: typed, categorized exceptions for all InvestEstate failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (4xx) are recoverable; infrastructure errors (5xx) are critical
    - to_response() produces the single REST error envelope used by every handler
    - Messages are safe to show to end users verbatim

Design Decisions:
    - Single hierarchy with InvestEstateError base: one FastAPI handler catches all
    - ErrorContext as dataclass: identifiers for logs and clients, no logging coupling
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    AUTHENTICATION = "authentication"
    CONFLICT = "conflict"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Identifiers attached to an error for observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: int | None = None
    project_id: str | None = None
    model_id: str | None = None
    debug_info: dict[str, Any] | None = None


class InvestEstateError(Exception):
    """Base exception for all InvestEstate errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "user_id": self.context.user_id,
                    "project_id": self.context.project_id,
                    "model_id": self.context.model_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationFailedError(InvestEstateError):
    """Request passed schema validation but violates a domain rule."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class InsufficientSlotsError(InvestEstateError):
    """Requested slots exceed the model's available slots."""
    def __init__(
        self, requested: int, available: int, context: ErrorContext | None = None,
    ):
        super().__init__(
            "Not enough slots available",
            "INSUFFICIENT_SLOTS", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 400,
        )
        self.requested = requested
        self.available = available


class ResourceNotFoundError(InvestEstateError):
    """Requested resource does not exist."""
    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        context: ErrorContext | None = None,
        code: str = "RESOURCE_NOT_FOUND",
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            code, ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ProjectNotFoundError(ResourceNotFoundError):
    def __init__(self, project_id: str, context: ErrorContext | None = None):
        super().__init__("Project", project_id, context, "PROJECT_NOT_FOUND")


class ModelNotFoundError(ResourceNotFoundError):
    def __init__(self, model_id: str, context: ErrorContext | None = None):
        super().__init__("Investment model", model_id, context, "MODEL_NOT_FOUND")


class UnauthenticatedError(InvestEstateError):
    """No session cookie, or the session is unknown or expired."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Not authenticated",
            "NOT_AUTHENTICATED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class InvalidOtpError(InvestEstateError):
    """OTP wrong, expired, already used, or attempts exhausted."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            "Invalid OTP",
            "INVALID_OTP", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )
        self.reason = reason


class PhoneAlreadyRegisteredError(InvestEstateError):
    """Profile creation for a phone number that already has a user."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "User with this phone number already exists",
            "PHONE_ALREADY_REGISTERED", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(InvestEstateError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class PaymentProviderError(InvestEstateError):
    """Payment provider call failed or the provider is not configured.

    The provider's message is passed through to the client.
    """
    def __init__(
        self,
        message: str,
        provider_message: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "PAYMENT_PROVIDER_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.provider_message = provider_message

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["provider_message"] = self.provider_message
        return response
