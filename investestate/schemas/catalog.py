"""Catalog Schemas: projects, investment models and quotes."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    location: str
    minimum_investment: int
    estimated_returns: float
    lock_in_period: int
    available_slots: int
    image: str


class InvestmentModelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, protected_namespaces=())

    id: str
    name: str
    min_investment: int
    roi: float
    lock_in_period: int
    available_slots: int
    project_id: str


class QuoteResponse(BaseModel):
    """Projection for a prospective purchase (annual compounding)."""
    model_config = ConfigDict(from_attributes=True)

    slots: int
    amount: int
    roi: float
    lock_in_period: int
    maturity_value: int
    projected_gain: int
    maturity_date: datetime
