"""Request Schemas: field rules enforced before a request reaches a service.

Invariants:
    - phone_number is exactly 10 digits
    - slots must be a positive integer
    - client-supplied money fields are ignored on investment creation
    - profile names are stripped and may not be blank
"""

import pytest
from pydantic import ValidationError

from investestate.core.domain_types import WizardStep
from investestate.schemas.auth import (
    CreateProfileRequest, SendOtpRequest, VerifyOtpRequest,
)
from investestate.schemas.draft import DraftSave
from investestate.schemas.investment import InvestmentCreate
from investestate.schemas.payment import PaymentIntentRequest


# --- Auth -------------------------------------------------------------------

def test_send_otp_accepts_ten_digits():
    assert SendOtpRequest(phone_number="9876543210").phone_number == "9876543210"


@pytest.mark.parametrize("phone", ["12345", "98765432101", "+919876543210", "abcdefghij"])
def test_send_otp_rejects_malformed_phone(phone):
    with pytest.raises(ValidationError):
        SendOtpRequest(phone_number=phone)


def test_verify_otp_requires_numeric_code():
    VerifyOtpRequest(phone_number="9876543210", otp="123456")
    with pytest.raises(ValidationError):
        VerifyOtpRequest(phone_number="9876543210", otp="12ab56")


def test_profile_name_is_stripped():
    body = CreateProfileRequest(phone_number="9876543210", name="  Asha  ")
    assert body.name == "Asha"
    assert body.email is None


def test_profile_rejects_blank_name():
    with pytest.raises(ValidationError):
        CreateProfileRequest(phone_number="9876543210", name="   ")


def test_profile_rejects_malformed_email():
    with pytest.raises(ValidationError):
        CreateProfileRequest(phone_number="9876543210", name="Asha", email="nope")


# --- Investments ------------------------------------------------------------

def test_investment_create_requires_positive_slots():
    with pytest.raises(ValidationError):
        InvestmentCreate(project_id="aura", model_id="aura-gold", slots=0)


def test_investment_create_rejects_non_integer_slots():
    with pytest.raises(ValidationError):
        InvestmentCreate(project_id="aura", model_id="aura-gold", slots="two")


def test_investment_create_ignores_client_amount():
    body = InvestmentCreate.model_validate(
        {"project_id": "aura", "model_id": "aura-gold", "slots": 2, "amount": 1},
    )
    assert not hasattr(body, "amount")


# --- Drafts & payments ------------------------------------------------------

def test_draft_defaults():
    draft = DraftSave()
    assert draft.model_id is None
    assert draft.slots == 1
    assert draft.step == WizardStep.EXPLORE_PROJECT


def test_draft_rejects_unknown_step():
    with pytest.raises(ValidationError):
        DraftSave(step=7)


def test_payment_amount_must_be_positive():
    assert PaymentIntentRequest(amount=1500.5).amount == 1500.5
    with pytest.raises(ValidationError):
        PaymentIntentRequest(amount=0)
