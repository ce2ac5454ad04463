"""Slot Accounting: pure checks and the investment builder used before persistence.

Invariants:
    - check_slot_request is PURE: raises on violation, never mutates
    - A model only sells slots for the project it belongs to
    - build_investment computes every derived field (amount, maturity, denormalized names)
    - The authoritative availability check is the store's atomic reservation;
      check_slot_request only rejects requests that can never succeed
"""

from datetime import datetime

from investestate.core.domain_types import InvestmentStatus
from investestate.core.errors import (
    ErrorContext, InsufficientSlotsError, ModelNotFoundError, ValidationFailedError,
)
from investestate.core.projection import investment_amount, maturity_date
from investestate.core.records import (
    InvestmentModelRecord, NewInvestment, ProjectRecord,
)


def check_model_belongs_to_project(
    project: ProjectRecord, model: InvestmentModelRecord,
) -> None:
    if model.project_id != project.id:
        raise ModelNotFoundError(
            model.id,
            ErrorContext(project_id=project.id, model_id=model.id),
        )


def check_slot_request(model: InvestmentModelRecord, slots: int) -> None:
    """Reject non-positive requests and requests above current availability."""
    if slots < 1:
        raise ValidationFailedError(
            "slots must be a positive integer", "slots",
            ErrorContext(model_id=model.id),
        )
    if slots > model.available_slots:
        raise InsufficientSlotsError(
            slots, model.available_slots,
            ErrorContext(project_id=model.project_id, model_id=model.id),
        )


def build_investment(
    user_id: int,
    project: ProjectRecord,
    model: InvestmentModelRecord,
    slots: int,
    now: datetime,
) -> NewInvestment:
    return NewInvestment(
        user_id=user_id,
        project_id=project.id,
        project_name=project.name,
        model_id=model.id,
        model_name=model.name,
        slots=slots,
        amount=investment_amount(model.min_investment, slots),
        expected_returns=model.roi,
        lock_in_period=model.lock_in_period,
        maturity_date=maturity_date(now, model.lock_in_period),
        created_at=now,
        status=InvestmentStatus.ACTIVE,
    )


def remaining_after(available: int, slots: int) -> int:
    """Project-level counter after a purchase; floored at zero."""
    return max(available - slots, 0)
