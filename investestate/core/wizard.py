"""Wizard Drafts: step rules, expiry and reconciliation of saved wizard selections.

Invariants:
    - Steps past CHOOSE_MODEL need a model; SUMMARY needs at least one slot
    - reconcile_draft is PURE: returns the verdict and the adjusted draft, never persists
    - A draft that references a vanished model falls back to CHOOSE_MODEL with no model
    - A draft never asks for more slots than the model currently offers

Design Decisions:
    - DRAFT_VERSION bumps whenever the stored draft shape changes; older drafts are discarded
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from investestate.core.domain_types import DraftStatus, WizardStep
from investestate.core.errors import ValidationFailedError
from investestate.core.records import (
    DraftRecord, InvestmentModelRecord, ProjectRecord,
)


DRAFT_VERSION: int = 1


@dataclass(frozen=True)
class DraftReconciliation:
    status: DraftStatus
    draft: DraftRecord | None


def validate_draft_step(step: WizardStep, model_id: str | None, slots: int) -> None:
    if step >= WizardStep.SELECT_SLOTS and not model_id:
        raise ValidationFailedError(
            "model_id is required once an investment model has been chosen",
            "model_id",
        )
    if step == WizardStep.SUMMARY and slots < 1:
        raise ValidationFailedError(
            "at least one slot must be selected before the summary step",
            "slots",
        )


def is_draft_expired(draft: DraftRecord, now: datetime, ttl: timedelta) -> bool:
    return draft.updated_at + ttl <= now


def _without_model(draft: DraftRecord) -> DraftRecord:
    return replace(
        draft, model_id=None, step=min(draft.step, WizardStep.CHOOSE_MODEL),
    )


def reconcile_draft(
    draft: DraftRecord | None,
    project: ProjectRecord | None,
    model: InvestmentModelRecord | None,
    now: datetime,
    ttl: timedelta,
) -> DraftReconciliation:
    """Check a stored draft against the live catalog.

    `model` is the catalog entry for draft.model_id (None when the draft has
    no model or the model no longer exists).
    """
    if draft is None:
        return DraftReconciliation(DraftStatus.NOT_FOUND, None)
    if draft.version != DRAFT_VERSION:
        return DraftReconciliation(DraftStatus.OUTDATED, None)
    if is_draft_expired(draft, now, ttl):
        return DraftReconciliation(DraftStatus.EXPIRED, None)
    if project is None:
        return DraftReconciliation(DraftStatus.PROJECT_MISSING, None)

    if draft.model_id is None:
        return DraftReconciliation(DraftStatus.RESUMABLE, draft)
    if model is None or model.project_id != project.id:
        return DraftReconciliation(DraftStatus.MODEL_MISSING, _without_model(draft))

    if draft.slots > model.available_slots:
        if model.available_slots < 1:
            return DraftReconciliation(
                DraftStatus.SLOTS_ADJUSTED, _without_model(draft),
            )
        return DraftReconciliation(
            DraftStatus.SLOTS_ADJUSTED,
            replace(draft, slots=model.available_slots),
        )
    return DraftReconciliation(DraftStatus.RESUMABLE, draft)
