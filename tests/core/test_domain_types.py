"""Domain Types: verifies identity types and enum values.

Tests:
    - NewType wrappers exist and are callable
    - WizardStep is ordered (step comparisons drive draft validation)
    - DraftStatus.discarded covers exactly the statuses that drop a draft
"""

from investestate.core.domain_types import (
    DraftStatus, InvestmentId, InvestmentStatus, ModelId,
    ProjectId, UserId, WizardStep,
)


def test_identity_types_wrap_primitives():
    assert UserId(7) == 7
    assert InvestmentId(3) == 3
    assert ProjectId("aura") == "aura"
    assert ModelId("aura-gold") == "aura-gold"


def test_investment_status_values():
    assert InvestmentStatus.ACTIVE.value == "active"
    assert InvestmentStatus.COMPLETED.value == "completed"
    assert InvestmentStatus("active") is InvestmentStatus.ACTIVE


def test_wizard_steps_are_ordered():
    assert [s.value for s in WizardStep] == [0, 1, 2, 3]
    assert WizardStep.SUMMARY > WizardStep.SELECT_SLOTS > WizardStep.CHOOSE_MODEL
    assert WizardStep(2) is WizardStep.SELECT_SLOTS


def test_discarded_statuses():
    discarded = {s for s in DraftStatus if s.discarded}
    assert discarded == {
        DraftStatus.EXPIRED, DraftStatus.OUTDATED, DraftStatus.PROJECT_MISSING,
    }


def test_draft_status_serializes_to_string():
    assert DraftStatus.SLOTS_ADJUSTED.value == "slots_adjusted"
    assert DraftStatus.NOT_FOUND == "not_found"
