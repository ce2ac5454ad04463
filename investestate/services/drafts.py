"""Draft Service: load, save and discard per-user wizard drafts.

Invariants:
    - load() always reconciles; discarded drafts are deleted, adjusted drafts saved back
    - save() rejects drafts pointing at unknown projects or foreign models
    - Every saved draft carries the current DRAFT_VERSION and a fresh updated_at
"""

import logging
from datetime import datetime, timedelta, timezone

from investestate.core.domain_types import DraftStatus, WizardStep
from investestate.core.errors import (
    ErrorContext, ModelNotFoundError, ProjectNotFoundError,
)
from investestate.core.records import DraftRecord
from investestate.core.repository_protocols import Repositories
from investestate.core.slot_accounting import check_model_belongs_to_project
from investestate.core.wizard import (
    DRAFT_VERSION, DraftReconciliation, reconcile_draft, validate_draft_step,
)

logger = logging.getLogger(__name__)


class DraftService:
    def __init__(self, repos: Repositories, ttl: timedelta):
        self.repos = repos
        self.ttl = ttl

    async def load(
        self, user_id: int, project_id: str, now: datetime | None = None,
    ) -> DraftReconciliation:
        now = now or datetime.now(timezone.utc)
        draft = await self.repos.drafts.get(user_id, project_id)
        project = await self.repos.catalog.get_project(project_id)
        model = None
        if draft is not None and draft.model_id:
            model = await self.repos.catalog.get_model(draft.model_id)

        result = reconcile_draft(draft, project, model, now, self.ttl)
        if result.status.discarded:
            await self.repos.drafts.delete(user_id, project_id)
            logger.info(
                f"Discarded {result.status.value} draft",
                extra={"user_id": user_id, "project_id": project_id},
            )
        elif result.status in (DraftStatus.MODEL_MISSING, DraftStatus.SLOTS_ADJUSTED):
            saved = await self.repos.drafts.save(result.draft)
            result = DraftReconciliation(result.status, saved)
        return result

    async def save(
        self,
        user_id: int,
        project_id: str,
        model_id: str | None,
        slots: int,
        quantity: int,
        step: WizardStep,
        now: datetime | None = None,
    ) -> DraftRecord:
        ctx = ErrorContext(user_id=user_id, project_id=project_id, model_id=model_id)
        project = await self.repos.catalog.get_project(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id, ctx)
        if model_id:
            model = await self.repos.catalog.get_model(model_id)
            if model is None:
                raise ModelNotFoundError(model_id, ctx)
            check_model_belongs_to_project(project, model)
        validate_draft_step(step, model_id, slots)

        draft = DraftRecord(
            user_id=user_id,
            project_id=project_id,
            model_id=model_id,
            slots=slots,
            quantity=quantity,
            step=step,
            version=DRAFT_VERSION,
            updated_at=now or datetime.now(timezone.utc),
        )
        return await self.repos.drafts.save(draft)

    async def discard(self, user_id: int, project_id: str) -> None:
        await self.repos.drafts.delete(user_id, project_id)
