"""Wizard Drafts: step validation and reconciliation against the live catalog.

Tests:
    - Steps past CHOOSE_MODEL require a model; SUMMARY requires slots
    - Outdated, expired and orphaned drafts are discarded
    - Vanished or foreign models drop back to CHOOSE_MODEL
    - Slot counts are clamped to current availability
"""

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from investestate.core.domain_types import DraftStatus, WizardStep
from investestate.core.errors import ValidationFailedError
from investestate.core.records import (
    DraftRecord, InvestmentModelRecord, ProjectRecord,
)
from investestate.core.wizard import (
    DRAFT_VERSION, is_draft_expired, reconcile_draft, validate_draft_step,
)


NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)
TTL = timedelta(days=30)
PROJECT = ProjectRecord(
    id="aura", name="Aura", location="Bangalore", minimum_investment=100000,
    estimated_returns=14, lock_in_period=3, available_slots=18, image="img",
)
MODEL = InvestmentModelRecord("aura-gold", "Gold", 100000, 12, 3, 5, "aura")
DRAFT = DraftRecord(
    user_id=1,
    project_id="aura",
    model_id="aura-gold",
    slots=3,
    quantity=1,
    step=WizardStep.SELECT_SLOTS,
    version=DRAFT_VERSION,
    updated_at=NOW - timedelta(days=1),
)


def test_select_slots_without_model_is_rejected():
    with pytest.raises(ValidationFailedError) as exc:
        validate_draft_step(WizardStep.SELECT_SLOTS, None, 1)
    assert exc.value.field == "model_id"


def test_summary_without_slots_is_rejected():
    with pytest.raises(ValidationFailedError) as exc:
        validate_draft_step(WizardStep.SUMMARY, "aura-gold", 0)
    assert exc.value.field == "slots"


def test_early_steps_need_no_model():
    validate_draft_step(WizardStep.EXPLORE_PROJECT, None, 1)
    validate_draft_step(WizardStep.CHOOSE_MODEL, None, 1)


def test_expiry_boundary():
    assert not is_draft_expired(DRAFT, NOW, TTL)
    assert is_draft_expired(replace(DRAFT, updated_at=NOW - TTL), NOW, TTL)


def test_no_draft_is_not_found():
    result = reconcile_draft(None, PROJECT, MODEL, NOW, TTL)
    assert result.status == DraftStatus.NOT_FOUND
    assert result.draft is None


def test_matching_draft_is_resumable():
    result = reconcile_draft(DRAFT, PROJECT, MODEL, NOW, TTL)
    assert result.status == DraftStatus.RESUMABLE
    assert result.draft == DRAFT


def test_old_version_is_outdated():
    result = reconcile_draft(replace(DRAFT, version=0), PROJECT, MODEL, NOW, TTL)
    assert result.status == DraftStatus.OUTDATED


def test_stale_draft_is_expired():
    stale = replace(DRAFT, updated_at=NOW - timedelta(days=31))
    assert reconcile_draft(stale, PROJECT, MODEL, NOW, TTL).status == DraftStatus.EXPIRED


def test_missing_project_discards_draft():
    result = reconcile_draft(DRAFT, None, MODEL, NOW, TTL)
    assert result.status == DraftStatus.PROJECT_MISSING
    assert result.draft is None


def test_draft_without_model_is_resumable():
    early = replace(DRAFT, model_id=None, step=WizardStep.CHOOSE_MODEL)
    result = reconcile_draft(early, PROJECT, None, NOW, TTL)
    assert result.status == DraftStatus.RESUMABLE


def test_vanished_model_falls_back_to_choose_model():
    result = reconcile_draft(DRAFT, PROJECT, None, NOW, TTL)
    assert result.status == DraftStatus.MODEL_MISSING
    assert result.draft.model_id is None
    assert result.draft.step == WizardStep.CHOOSE_MODEL


def test_foreign_model_is_treated_as_missing():
    foreign = replace(MODEL, project_id="subha")
    result = reconcile_draft(DRAFT, PROJECT, foreign, NOW, TTL)
    assert result.status == DraftStatus.MODEL_MISSING


def test_slots_are_clamped_to_availability():
    result = reconcile_draft(
        replace(DRAFT, slots=8), PROJECT, MODEL, NOW, TTL,
    )
    assert result.status == DraftStatus.SLOTS_ADJUSTED
    assert result.draft.slots == 5
    assert result.draft.model_id == "aura-gold"


def test_sold_out_model_drops_selection():
    sold_out = replace(MODEL, available_slots=0)
    result = reconcile_draft(DRAFT, PROJECT, sold_out, NOW, TTL)
    assert result.status == DraftStatus.SLOTS_ADJUSTED
    assert result.draft.model_id is None
    assert result.draft.step == WizardStep.CHOOSE_MODEL
