"""Catalog: project and investment-model reads, quotes, and the startup seed.

Invariants:
    - Unknown project ids answer ProjectNotFoundError, also when listing its models
    - Quotes are computed from the live model and never persisted
    - seed_catalog only writes into an empty catalog
"""

import logging
from datetime import datetime, timezone

from investestate.core.errors import (
    ErrorContext, ModelNotFoundError, ProjectNotFoundError, ValidationFailedError,
)
from investestate.core.projection import Projection, project_investment
from investestate.core.records import InvestmentModelRecord, ProjectRecord
from investestate.core.repository_protocols import CatalogRepository
from investestate.core.slot_accounting import check_model_belongs_to_project

logger = logging.getLogger(__name__)


SAMPLE_PROJECTS: tuple[ProjectRecord, ...] = (
    ProjectRecord(
        id="aura",
        name="Aura",
        location="Bangalore",
        minimum_investment=100000,
        estimated_returns=14,
        lock_in_period=3,
        available_slots=18,
        image="https://images.unsplash.com/photo-1560518883-ce09059eeffa?auto=format&fit=crop&w=800&q=80",
    ),
    ProjectRecord(
        id="subha",
        name="Codename Skylife 2100",
        location="Mysore",
        minimum_investment=75000,
        estimated_returns=12,
        lock_in_period=3,
        available_slots=25,
        image="https://images.unsplash.com/photo-1500382017468-9049fed747ef?auto=format&fit=crop&w=800&q=80",
    ),
)

SAMPLE_MODELS: tuple[InvestmentModelRecord, ...] = (
    InvestmentModelRecord("aura-gold", "Gold", 100000, 12, 3, 5, "aura"),
    InvestmentModelRecord("aura-platinum", "Platinum", 100000, 14, 4, 3, "aura"),
    InvestmentModelRecord("aura-virtual", "Virtual", 100000, 10, 2, 10, "aura"),
    InvestmentModelRecord("subha-gold", "Gold", 75000, 12, 3, 10, "subha"),
    InvestmentModelRecord("subha-platinum", "Platinum", 75000, 14, 4, 5, "subha"),
    InvestmentModelRecord("subha-virtual", "Virtual", 75000, 10, 2, 15, "subha"),
)


async def seed_catalog(catalog: CatalogRepository) -> bool:
    """Load the sample catalog when no project exists yet. Returns True if seeded."""
    if await catalog.list_projects():
        return False
    for project in SAMPLE_PROJECTS:
        await catalog.add_project(project)
    for model in SAMPLE_MODELS:
        await catalog.add_model(model)
    logger.info(
        f"Seeded catalog with {len(SAMPLE_PROJECTS)} projects and "
        f"{len(SAMPLE_MODELS)} investment models",
    )
    return True


class CatalogService:
    def __init__(self, catalog: CatalogRepository):
        self.catalog = catalog

    async def list_projects(self) -> list[ProjectRecord]:
        return await self.catalog.list_projects()

    async def get_project(self, project_id: str) -> ProjectRecord:
        project = await self.catalog.get_project(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id, ErrorContext(project_id=project_id))
        return project

    async def list_models(self, project_id: str) -> list[InvestmentModelRecord]:
        await self.get_project(project_id)
        return await self.catalog.list_models(project_id)

    async def get_model(self, project_id: str, model_id: str) -> InvestmentModelRecord:
        project = await self.get_project(project_id)
        model = await self.catalog.get_model(model_id)
        if model is None:
            raise ModelNotFoundError(
                model_id, ErrorContext(project_id=project_id, model_id=model_id),
            )
        check_model_belongs_to_project(project, model)
        return model

    async def quote(
        self,
        project_id: str,
        model_id: str,
        slots: int,
        now: datetime | None = None,
    ) -> Projection:
        model = await self.get_model(project_id, model_id)
        if slots < 1:
            raise ValidationFailedError("slots must be a positive integer", "slots")
        return project_investment(
            model.min_investment,
            model.roi,
            model.lock_in_period,
            slots,
            now or datetime.now(timezone.utc),
        )
