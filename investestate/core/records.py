"""Domain Records: immutable snapshots exchanged between stores, services and routes.

Invariants:
    - Records are frozen: stores hand out copies, mutation goes through repository methods
    - All datetimes are timezone-aware UTC
    - NewInvestment carries every computed field; stores only assign id and created_at
"""

from dataclasses import dataclass
from datetime import datetime

from investestate.core.domain_types import InvestmentStatus, WizardStep


@dataclass(frozen=True)
class ProjectRecord:
    id: str
    name: str
    location: str
    minimum_investment: int
    estimated_returns: float
    lock_in_period: int
    available_slots: int
    image: str


@dataclass(frozen=True)
class InvestmentModelRecord:
    id: str
    name: str
    min_investment: int
    roi: float
    lock_in_period: int
    available_slots: int
    project_id: str


@dataclass(frozen=True)
class NewInvestment:
    """Fully computed investment awaiting persistence."""
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
    status: InvestmentStatus = InvestmentStatus.ACTIVE


@dataclass(frozen=True)
class InvestmentRecord:
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


@dataclass(frozen=True)
class UserRecord:
    id: int
    phone_number: str
    name: str
    email: str | None
    created_at: datetime


@dataclass(frozen=True)
class OtpRecord:
    id: int
    phone_number: str
    code_hash: str
    expires_at: datetime
    used: bool
    attempts: int
    created_at: datetime
    signup_token_hash: str | None = None


@dataclass(frozen=True)
class AuthSessionRecord:
    token: str
    user_id: int
    expires_at: datetime
    created_at: datetime


@dataclass(frozen=True)
class DraftRecord:
    user_id: int
    project_id: str
    model_id: str | None
    slots: int
    quantity: int
    step: WizardStep
    version: int
    updated_at: datetime
