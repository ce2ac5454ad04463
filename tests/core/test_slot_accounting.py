"""Slot Accounting: request checks and investment construction.

Tests:
    - Non-positive slot counts are validation errors
    - Requests above availability raise InsufficientSlotsError
    - A model from another project is reported as not found
    - build_investment fills every derived field
"""

from datetime import datetime, timezone

import pytest

from investestate.core.domain_types import InvestmentStatus
from investestate.core.errors import (
    InsufficientSlotsError, ModelNotFoundError, ValidationFailedError,
)
from investestate.core.records import InvestmentModelRecord, ProjectRecord
from investestate.core.slot_accounting import (
    build_investment, check_model_belongs_to_project, check_slot_request,
    remaining_after,
)


PROJECT = ProjectRecord(
    id="aura", name="Aura", location="Bangalore", minimum_investment=100000,
    estimated_returns=14, lock_in_period=3, available_slots=18, image="img",
)
MODEL = InvestmentModelRecord("aura-gold", "Gold", 100000, 12, 3, 10, "aura")
NOW = datetime(2025, 1, 10, tzinfo=timezone.utc)


def test_accepts_request_within_availability():
    check_slot_request(MODEL, 10)


@pytest.mark.parametrize("slots", [0, -1])
def test_rejects_non_positive_slots(slots):
    with pytest.raises(ValidationFailedError) as exc:
        check_slot_request(MODEL, slots)
    assert exc.value.field == "slots"
    assert exc.value.http_status == 400


def test_rejects_more_slots_than_available():
    with pytest.raises(InsufficientSlotsError) as exc:
        check_slot_request(MODEL, 11)
    assert exc.value.requested == 11
    assert exc.value.available == 10
    assert exc.value.code == "INSUFFICIENT_SLOTS"


def test_model_from_other_project_is_not_found():
    foreign = InvestmentModelRecord("subha-gold", "Gold", 75000, 12, 3, 10, "subha")
    with pytest.raises(ModelNotFoundError):
        check_model_belongs_to_project(PROJECT, foreign)
    check_model_belongs_to_project(PROJECT, MODEL)


def test_build_investment_computes_derived_fields():
    new = build_investment(42, PROJECT, MODEL, 2, NOW)
    assert new.user_id == 42
    assert new.amount == 200000
    assert new.expected_returns == 12
    assert new.lock_in_period == 3
    assert new.maturity_date == datetime(2028, 1, 10, tzinfo=timezone.utc)
    assert new.project_name == "Aura"
    assert new.model_name == "Gold"
    assert new.created_at == NOW
    assert new.status == InvestmentStatus.ACTIVE


def test_remaining_after_floors_at_zero():
    assert remaining_after(18, 2) == 16
    assert remaining_after(1, 3) == 0
