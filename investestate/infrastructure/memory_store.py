"""In-Memory Store: map-backed repositories with monotonic id counters.

Invariants:
    - One MemoryStore per process (get_memory_store) unless tests build their own
    - Sequential ids: users, investments and otps start at 1 and never repeat
    - Slot reservation runs under a per-model asyncio.Lock: check, decrement, insert
      and draft removal happen without an intervening await
    - Records are replaced, never mutated (frozen dataclasses + dataclasses.replace)

Design Decisions:
    - Separate repository classes over one shared MemoryState: method names overlap
      across protocols (get, create, delete)
"""

import asyncio
import itertools
from collections import defaultdict
from dataclasses import dataclass, field, replace
from datetime import datetime
from functools import lru_cache

from investestate.core.errors import PhoneAlreadyRegisteredError
from investestate.core.records import (
    AuthSessionRecord, DraftRecord, InvestmentModelRecord, InvestmentRecord,
    NewInvestment, OtpRecord, ProjectRecord, UserRecord,
)
from investestate.core.repository_protocols import Repositories
from investestate.core.slot_accounting import remaining_after


@dataclass
class MemoryState:
    users: dict[int, UserRecord] = field(default_factory=dict)
    projects: dict[str, ProjectRecord] = field(default_factory=dict)
    models: dict[str, InvestmentModelRecord] = field(default_factory=dict)
    investments: dict[int, InvestmentRecord] = field(default_factory=dict)
    otps: dict[int, OtpRecord] = field(default_factory=dict)
    auth_sessions: dict[str, AuthSessionRecord] = field(default_factory=dict)
    drafts: dict[tuple[int, str], DraftRecord] = field(default_factory=dict)

    user_ids: itertools.count = field(default_factory=lambda: itertools.count(1))
    investment_ids: itertools.count = field(default_factory=lambda: itertools.count(1))
    otp_ids: itertools.count = field(default_factory=lambda: itertools.count(1))

    model_locks: defaultdict[str, asyncio.Lock] = field(
        default_factory=lambda: defaultdict(asyncio.Lock),
    )


class MemoryUserRepository:
    def __init__(self, state: MemoryState):
        self.state = state

    async def get(self, user_id: int) -> UserRecord | None:
        return self.state.users.get(user_id)

    async def get_by_phone(self, phone_number: str) -> UserRecord | None:
        for user in self.state.users.values():
            if user.phone_number == phone_number:
                return user
        return None

    async def create(
        self, phone_number: str, name: str, email: str | None, now: datetime,
    ) -> UserRecord:
        if await self.get_by_phone(phone_number):
            raise PhoneAlreadyRegisteredError()
        user = UserRecord(
            id=next(self.state.user_ids),
            phone_number=phone_number,
            name=name,
            email=email,
            created_at=now,
        )
        self.state.users[user.id] = user
        return user


class MemoryCatalogRepository:
    def __init__(self, state: MemoryState):
        self.state = state

    async def list_projects(self) -> list[ProjectRecord]:
        return list(self.state.projects.values())

    async def get_project(self, project_id: str) -> ProjectRecord | None:
        return self.state.projects.get(project_id)

    async def list_models(self, project_id: str) -> list[InvestmentModelRecord]:
        return [
            m for m in self.state.models.values() if m.project_id == project_id
        ]

    async def get_model(self, model_id: str) -> InvestmentModelRecord | None:
        return self.state.models.get(model_id)

    async def add_project(self, project: ProjectRecord) -> None:
        self.state.projects[project.id] = project

    async def add_model(self, model: InvestmentModelRecord) -> None:
        self.state.models[model.id] = model


class MemoryInvestmentRepository:
    def __init__(self, state: MemoryState):
        self.state = state

    async def get(self, investment_id: int) -> InvestmentRecord | None:
        return self.state.investments.get(investment_id)

    async def list_by_user(self, user_id: int) -> list[InvestmentRecord]:
        found = [
            inv for inv in self.state.investments.values() if inv.user_id == user_id
        ]
        return sorted(found, key=lambda inv: inv.id, reverse=True)

    async def reserve_and_record(
        self, new: NewInvestment,
    ) -> InvestmentRecord | None:
        async with self.state.model_locks[new.model_id]:
            model = self.state.models.get(new.model_id)
            if model is None or model.available_slots < new.slots:
                return None
            self.state.models[model.id] = replace(
                model, available_slots=model.available_slots - new.slots,
            )
            project = self.state.projects.get(new.project_id)
            if project is not None:
                self.state.projects[project.id] = replace(
                    project,
                    available_slots=remaining_after(project.available_slots, new.slots),
                )
            investment = InvestmentRecord(
                id=next(self.state.investment_ids),
                user_id=new.user_id,
                project_id=new.project_id,
                project_name=new.project_name,
                model_id=new.model_id,
                model_name=new.model_name,
                slots=new.slots,
                amount=new.amount,
                expected_returns=new.expected_returns,
                lock_in_period=new.lock_in_period,
                maturity_date=new.maturity_date,
                created_at=new.created_at,
                status=new.status,
            )
            self.state.investments[investment.id] = investment
            self.state.drafts.pop((new.user_id, new.project_id), None)
            return investment


class MemoryOtpRepository:
    def __init__(self, state: MemoryState):
        self.state = state

    async def create(
        self, phone_number: str, code_hash: str, expires_at: datetime, now: datetime,
    ) -> OtpRecord:
        otp = OtpRecord(
            id=next(self.state.otp_ids),
            phone_number=phone_number,
            code_hash=code_hash,
            expires_at=expires_at,
            used=False,
            attempts=0,
            created_at=now,
        )
        self.state.otps[otp.id] = otp
        return otp

    async def get_latest(self, phone_number: str) -> OtpRecord | None:
        matches = [
            otp for otp in self.state.otps.values()
            if otp.phone_number == phone_number
        ]
        return max(matches, key=lambda otp: otp.id, default=None)

    async def record_failed_attempt(self, otp_id: int) -> None:
        otp = self.state.otps.get(otp_id)
        if otp:
            self.state.otps[otp_id] = replace(otp, attempts=otp.attempts + 1)

    async def mark_used(
        self, otp_id: int, signup_token_hash: str | None = None,
    ) -> bool:
        otp = self.state.otps.get(otp_id)
        if otp is None or otp.used:
            return False
        self.state.otps[otp_id] = replace(
            otp, used=True, signup_token_hash=signup_token_hash,
        )
        return True

    async def consume_signup_token(self, otp_id: int, token_hash: str) -> bool:
        otp = self.state.otps.get(otp_id)
        if otp is None or otp.signup_token_hash != token_hash:
            return False
        self.state.otps[otp_id] = replace(otp, signup_token_hash=None)
        return True


class MemoryAuthSessionRepository:
    def __init__(self, state: MemoryState):
        self.state = state

    async def create(
        self, token: str, user_id: int, expires_at: datetime, now: datetime,
    ) -> AuthSessionRecord:
        record = AuthSessionRecord(
            token=token, user_id=user_id, expires_at=expires_at, created_at=now,
        )
        self.state.auth_sessions[token] = record
        return record

    async def get(self, token: str) -> AuthSessionRecord | None:
        return self.state.auth_sessions.get(token)

    async def delete(self, token: str) -> None:
        self.state.auth_sessions.pop(token, None)

    async def delete_expired(self, now: datetime) -> int:
        expired = [
            token for token, record in self.state.auth_sessions.items()
            if record.expires_at <= now
        ]
        for token in expired:
            del self.state.auth_sessions[token]
        return len(expired)


class MemoryDraftRepository:
    def __init__(self, state: MemoryState):
        self.state = state

    async def get(self, user_id: int, project_id: str) -> DraftRecord | None:
        return self.state.drafts.get((user_id, project_id))

    async def save(self, draft: DraftRecord) -> DraftRecord:
        self.state.drafts[(draft.user_id, draft.project_id)] = draft
        return draft

    async def delete(self, user_id: int, project_id: str) -> None:
        self.state.drafts.pop((user_id, project_id), None)


class MemoryStore:
    """Process-local backing store for every repository protocol."""

    def __init__(self):
        self.state = MemoryState()
        self._repositories = Repositories(
            users=MemoryUserRepository(self.state),
            catalog=MemoryCatalogRepository(self.state),
            investments=MemoryInvestmentRepository(self.state),
            otps=MemoryOtpRepository(self.state),
            auth_sessions=MemoryAuthSessionRepository(self.state),
            drafts=MemoryDraftRepository(self.state),
        )

    def repositories(self) -> Repositories:
        return self._repositories


@lru_cache
def get_memory_store() -> MemoryStore:
    return MemoryStore()
