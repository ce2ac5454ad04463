"""Project Routes: public catalog reads and purchase quotes.

Invariants:
    - Catalog reads need no session
    - Unknown project → PROJECT_NOT_FOUND; unknown or foreign model → MODEL_NOT_FOUND
"""

from fastapi import APIRouter, Depends, Query

from investestate.api.deps import get_catalog_service
from investestate.schemas.catalog import (
    InvestmentModelResponse, ProjectResponse, QuoteResponse,
)
from investestate.services.catalog import CatalogService

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("", response_model=list[ProjectResponse])
async def list_projects(catalog: CatalogService = Depends(get_catalog_service)):
    projects = await catalog.list_projects()
    return [ProjectResponse.model_validate(p) for p in projects]


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str, catalog: CatalogService = Depends(get_catalog_service),
):
    return ProjectResponse.model_validate(await catalog.get_project(project_id))


@router.get(
    "/{project_id}/models", response_model=list[InvestmentModelResponse],
)
async def list_models(
    project_id: str, catalog: CatalogService = Depends(get_catalog_service),
):
    models = await catalog.list_models(project_id)
    return [InvestmentModelResponse.model_validate(m) for m in models]


@router.get(
    "/{project_id}/models/{model_id}/quote", response_model=QuoteResponse,
)
async def quote(
    project_id: str,
    model_id: str,
    slots: int = Query(1, ge=1),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """Amount, maturity value and maturity date for a prospective purchase."""
    projection = await catalog.quote(project_id, model_id, slots)
    return QuoteResponse.model_validate(projection)
