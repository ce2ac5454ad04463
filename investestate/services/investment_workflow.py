"""Investment Workflow: create, list and summarize a user's investments.

Invariants:
    - Lookup order: project, then model, then slot check; the first failure wins
    - Failed requests mutate nothing (no investment, no slot change)
    - The store's reserve_and_record is the authoritative availability check; a lost
      race surfaces as InsufficientSlotsError exactly like the pre-check
    - A successful investment clears the user's wizard draft for that project in the
      same unit of work as the reservation
    - Users only ever see their own investments (foreign ids answer 404)
"""

import logging
from datetime import datetime, timezone

from investestate.core.errors import (
    ErrorContext, InsufficientSlotsError, ModelNotFoundError,
    ProjectNotFoundError, ResourceNotFoundError,
)
from investestate.core.portfolio import PortfolioSummary, summarize_portfolio
from investestate.core.records import InvestmentRecord
from investestate.core.repository_protocols import Repositories
from investestate.core.slot_accounting import (
    build_investment, check_model_belongs_to_project, check_slot_request,
)

logger = logging.getLogger(__name__)


class InvestmentWorkflow:
    def __init__(self, repos: Repositories):
        self.repos = repos

    async def create_investment(
        self,
        user_id: int,
        project_id: str,
        model_id: str,
        slots: int,
        now: datetime | None = None,
    ) -> InvestmentRecord:
        now = now or datetime.now(timezone.utc)
        ctx = ErrorContext(user_id=user_id, project_id=project_id, model_id=model_id)

        project = await self.repos.catalog.get_project(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id, ctx)
        model = await self.repos.catalog.get_model(model_id)
        if model is None:
            raise ModelNotFoundError(model_id, ctx)
        check_model_belongs_to_project(project, model)
        check_slot_request(model, slots)

        new = build_investment(user_id, project, model, slots, now)
        investment = await self.repos.investments.reserve_and_record(new)
        if investment is None:
            latest = await self.repos.catalog.get_model(model_id)
            raise InsufficientSlotsError(
                slots, latest.available_slots if latest else 0, ctx,
            )

        logger.info(
            f"Investment {investment.id} created",
            extra={
                "investment_id": investment.id, "user_id": user_id,
                "project_id": project_id, "model_id": model_id, "slots": slots,
            },
        )
        return investment

    async def list_investments(self, user_id: int) -> list[InvestmentRecord]:
        return await self.repos.investments.list_by_user(user_id)

    async def get_investment(self, user_id: int, investment_id: int) -> InvestmentRecord:
        investment = await self.repos.investments.get(investment_id)
        if investment is None or investment.user_id != user_id:
            raise ResourceNotFoundError(
                "Investment", str(investment_id), ErrorContext(user_id=user_id),
            )
        return investment

    async def portfolio_summary(
        self, user_id: int, now: datetime | None = None,
    ) -> PortfolioSummary:
        investments = await self.repos.investments.list_by_user(user_id)
        return summarize_portfolio(investments, now or datetime.now(timezone.utc))
