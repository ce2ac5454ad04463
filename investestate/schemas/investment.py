"""Investment Schemas: creation request, investment and portfolio responses.

Invariants:
    - InvestmentCreate carries only identifiers and a slot count; every money field
      is computed server side (client-supplied amounts are ignored)
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from investestate.core.domain_types import InvestmentStatus


class InvestmentCreate(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    project_id: str = Field(min_length=1, max_length=100)
    model_id: str = Field(min_length=1, max_length=100)
    slots: int = Field(ge=1)


class InvestmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, protected_namespaces=())

    id: int
    user_id: int
    project_id: str
    project_name: str
    model_id: str
    model_name: str
    slots: int
    amount: int
    expected_returns: float
    lock_in_period: int
    maturity_date: datetime
    created_at: datetime
    status: InvestmentStatus


class PortfolioSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_invested: int
    current_value: int
    growth_percentage: float
    active_investments: int
