"""Error Hierarchy: codes, HTTP statuses and the response envelope.

Tests:
    - Each error maps to its code and status
    - to_response carries code, message, category, severity, timestamp, context
    - PaymentProviderError passes the provider message through
"""

from investestate.core.errors import (
    DatabaseError, ErrorContext, InsufficientSlotsError, InvalidOtpError,
    ModelNotFoundError, PaymentProviderError, PhoneAlreadyRegisteredError,
    ProjectNotFoundError, ResourceNotFoundError, UnauthenticatedError,
    ValidationFailedError,
)


def test_codes_and_statuses():
    cases = [
        (ValidationFailedError("bad", "slots"), "VALIDATION_ERROR", 400),
        (InsufficientSlotsError(3, 1), "INSUFFICIENT_SLOTS", 400),
        (ProjectNotFoundError("x"), "PROJECT_NOT_FOUND", 404),
        (ModelNotFoundError("x"), "MODEL_NOT_FOUND", 404),
        (ResourceNotFoundError("Investment", "9"), "RESOURCE_NOT_FOUND", 404),
        (UnauthenticatedError(), "NOT_AUTHENTICATED", 401),
        (InvalidOtpError("expired"), "INVALID_OTP", 401),
        (PhoneAlreadyRegisteredError(), "PHONE_ALREADY_REGISTERED", 409),
        (PaymentProviderError("down"), "PAYMENT_PROVIDER_ERROR", 500),
        (DatabaseError("lost", "execute"), "DATABASE_ERROR", 503),
    ]
    for error, code, status in cases:
        assert error.code == code
        assert error.http_status == status


def test_user_facing_messages():
    assert InsufficientSlotsError(3, 1).message == "Not enough slots available"
    assert InvalidOtpError("locked").message == "Invalid OTP"
    assert UnauthenticatedError().message == "Not authenticated"
    assert ProjectNotFoundError("nope").message == "Project 'nope' not found"


def test_response_envelope():
    ctx = ErrorContext(user_id=4, project_id="aura", model_id="aura-gold")
    body = InsufficientSlotsError(3, 1, ctx).to_response()["error"]
    assert body["code"] == "INSUFFICIENT_SLOTS"
    assert body["category"] == "business_rule"
    assert body["severity"] == "warning"
    assert body["context"] == {
        "user_id": 4, "project_id": "aura", "model_id": "aura-gold",
    }
    assert "timestamp" in body


def test_payment_error_carries_provider_message():
    body = PaymentProviderError(
        "Failed to create payment intent", provider_message="Card declined",
    ).to_response()["error"]
    assert body["message"] == "Failed to create payment intent"
    assert body["provider_message"] == "Card declined"
