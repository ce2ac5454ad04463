"""Investment Routes: purchase, portfolio listing and summary.

Invariants:
    - Every endpoint requires a session; user_id always comes from the session
    - Money fields are computed server side from the live model
    - /summary is declared before /{investment_id} so it is never parsed as an id
"""

from fastapi import APIRouter, Depends, status

from investestate.api.deps import get_current_user, get_investment_workflow
from investestate.core.records import UserRecord
from investestate.schemas.investment import (
    InvestmentCreate, InvestmentResponse, PortfolioSummaryResponse,
)
from investestate.services.investment_workflow import InvestmentWorkflow

router = APIRouter(prefix="/api/investments", tags=["investments"])


@router.post(
    "", response_model=InvestmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_investment(
    body: InvestmentCreate,
    user: UserRecord = Depends(get_current_user),
    workflow: InvestmentWorkflow = Depends(get_investment_workflow),
):
    """Reserve slots and record the investment in one step."""
    investment = await workflow.create_investment(
        user.id, body.project_id, body.model_id, body.slots,
    )
    return InvestmentResponse.model_validate(investment)


@router.get("", response_model=list[InvestmentResponse])
async def list_investments(
    user: UserRecord = Depends(get_current_user),
    workflow: InvestmentWorkflow = Depends(get_investment_workflow),
):
    investments = await workflow.list_investments(user.id)
    return [InvestmentResponse.model_validate(i) for i in investments]


@router.get("/summary", response_model=PortfolioSummaryResponse)
async def portfolio_summary(
    user: UserRecord = Depends(get_current_user),
    workflow: InvestmentWorkflow = Depends(get_investment_workflow),
):
    summary = await workflow.portfolio_summary(user.id)
    return PortfolioSummaryResponse.model_validate(summary)


@router.get("/{investment_id}", response_model=InvestmentResponse)
async def get_investment(
    investment_id: int,
    user: UserRecord = Depends(get_current_user),
    workflow: InvestmentWorkflow = Depends(get_investment_workflow),
):
    investment = await workflow.get_investment(user.id, investment_id)
    return InvestmentResponse.model_validate(investment)
