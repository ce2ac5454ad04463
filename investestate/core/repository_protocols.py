"""Boundary Protocols: contracts between the pure core and the storage shell.

Invariants:
    - Core NEVER imports from infrastructure: dependency arrows point inward only
    - All IO goes through these Protocol types
    - reserve_and_record is the only write path for investments and it is atomic:
      the slot decrement, the insert and the draft removal all happen, or none does
    - Repositories hand out frozen records, never live ORM objects

Design Decisions:
    - Protocol over ABC: the SQL and in-memory stores satisfy them structurally
    - Async methods: implementations do IO; callers in core stay synchronous
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from investestate.core.records import (
    AuthSessionRecord, DraftRecord, InvestmentModelRecord, InvestmentRecord,
    NewInvestment, OtpRecord, ProjectRecord, UserRecord,
)


class UserRepository(Protocol):
    async def get(self, user_id: int) -> UserRecord | None: ...
    async def get_by_phone(self, phone_number: str) -> UserRecord | None: ...
    async def create(
        self, phone_number: str, name: str, email: str | None, now: datetime,
    ) -> UserRecord: ...


class CatalogRepository(Protocol):
    async def list_projects(self) -> list[ProjectRecord]: ...
    async def get_project(self, project_id: str) -> ProjectRecord | None: ...
    async def list_models(self, project_id: str) -> list[InvestmentModelRecord]: ...
    async def get_model(self, model_id: str) -> InvestmentModelRecord | None: ...
    async def add_project(self, project: ProjectRecord) -> None: ...
    async def add_model(self, model: InvestmentModelRecord) -> None: ...


class InvestmentRepository(Protocol):
    async def get(self, investment_id: int) -> InvestmentRecord | None: ...
    async def list_by_user(self, user_id: int) -> list[InvestmentRecord]: ...
    async def reserve_and_record(
        self, new: NewInvestment,
    ) -> InvestmentRecord | None:
        """Decrement the model's slots, insert the investment and drop the user's
        draft for that project, atomically.

        Returns None (and changes nothing) when the model no longer has
        `new.slots` slots available.
        """
        ...


class OtpRepository(Protocol):
    async def create(
        self, phone_number: str, code_hash: str, expires_at: datetime, now: datetime,
    ) -> OtpRecord: ...
    async def get_latest(self, phone_number: str) -> OtpRecord | None: ...
    async def record_failed_attempt(self, otp_id: int) -> None: ...
    async def mark_used(
        self, otp_id: int, signup_token_hash: str | None = None,
    ) -> bool:
        """Consume the code, attaching a signup token hash when one is given.

        False when another request consumed it first.
        """
        ...
    async def consume_signup_token(self, otp_id: int, token_hash: str) -> bool:
        """Clear the signup token if it still matches. False when already redeemed."""
        ...


class AuthSessionRepository(Protocol):
    async def create(
        self, token: str, user_id: int, expires_at: datetime, now: datetime,
    ) -> AuthSessionRecord: ...
    async def get(self, token: str) -> AuthSessionRecord | None: ...
    async def delete(self, token: str) -> None: ...
    async def delete_expired(self, now: datetime) -> int: ...


class DraftRepository(Protocol):
    async def get(self, user_id: int, project_id: str) -> DraftRecord | None: ...
    async def save(self, draft: DraftRecord) -> DraftRecord: ...
    async def delete(self, user_id: int, project_id: str) -> None: ...


class OtpSender(Protocol):
    """Delivers an issued code to the phone. SMS transport lives outside this service."""
    async def send(self, phone_number: str, code: str) -> None: ...


class PaymentGateway(Protocol):
    async def create_payment_intent(self, amount: float) -> str:
        """Create a payment intent for `amount` (major units); returns the client secret."""
        ...


@dataclass(frozen=True)
class Repositories:
    """Everything a request needs, bound to one storage backend."""
    users: UserRepository
    catalog: CatalogRepository
    investments: InvestmentRepository
    otps: OtpRepository
    auth_sessions: AuthSessionRepository
    drafts: DraftRepository
