"""SQL Store: SQLAlchemy implementations of the repository protocols.

Invariants:
    - Every write method commits its own unit of work
    - reserve_and_record: conditional UPDATE (available_slots >= n) + project counter +
      INSERT + draft removal share one transaction; zero matched rows rolls back and
      returns None
    - mark_used is a conditional UPDATE (used = false): a code is consumed once
    - consume_signup_token is a conditional UPDATE on the stored hash: redeemed once
    - Rows are converted to frozen core records before leaving this module
    - Datetimes read back from SQLite come without tzinfo and are tagged UTC

Design Decisions:
    - Atomic compare-and-decrement over SELECT ... FOR UPDATE: one statement, works on
      PostgreSQL and SQLite alike
    - Catalog reads use populate_existing so a long-lived session never serves a stale
      available_slots after a reservation
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import case, delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from investestate.core.domain_types import InvestmentStatus, WizardStep
from investestate.core.errors import PhoneAlreadyRegisteredError
from investestate.core.records import (
    AuthSessionRecord, DraftRecord, InvestmentModelRecord, InvestmentRecord,
    NewInvestment, OtpRecord, ProjectRecord, UserRecord,
)
from investestate.core.repository_protocols import Repositories
from investestate.models.auth_session import AuthSession
from investestate.models.investment import Investment
from investestate.models.investment_draft import InvestmentDraft
from investestate.models.investment_model import InvestmentModel
from investestate.models.otp import Otp
from investestate.models.project import Project
from investestate.models.user import User

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ─── Row → Record ────────────────────────────────────────────────

def _user_record(row: User) -> UserRecord:
    return UserRecord(
        id=row.id,
        phone_number=row.phone_number,
        name=row.name,
        email=row.email,
        created_at=_as_utc(row.created_at),
    )


def _project_record(row: Project) -> ProjectRecord:
    return ProjectRecord(
        id=row.id,
        name=row.name,
        location=row.location,
        minimum_investment=row.minimum_investment,
        estimated_returns=row.estimated_returns,
        lock_in_period=row.lock_in_period,
        available_slots=row.available_slots,
        image=row.image,
    )


def _model_record(row: InvestmentModel) -> InvestmentModelRecord:
    return InvestmentModelRecord(
        id=row.id,
        name=row.name,
        min_investment=row.min_investment,
        roi=row.roi,
        lock_in_period=row.lock_in_period,
        available_slots=row.available_slots,
        project_id=row.project_id,
    )


def _investment_record(row: Investment) -> InvestmentRecord:
    return InvestmentRecord(
        id=row.id,
        user_id=row.user_id,
        project_id=row.project_id,
        project_name=row.project_name,
        model_id=row.model_id,
        model_name=row.model_name,
        slots=row.slots,
        amount=row.amount,
        expected_returns=row.expected_returns,
        lock_in_period=row.lock_in_period,
        maturity_date=_as_utc(row.maturity_date),
        created_at=_as_utc(row.created_at),
        status=InvestmentStatus(row.status),
    )


def _otp_record(row: Otp) -> OtpRecord:
    return OtpRecord(
        id=row.id,
        phone_number=row.phone_number,
        code_hash=row.code_hash,
        expires_at=_as_utc(row.expires_at),
        used=row.used,
        attempts=row.attempts,
        created_at=_as_utc(row.created_at),
        signup_token_hash=row.signup_token_hash,
    )


def _session_record(row: AuthSession) -> AuthSessionRecord:
    return AuthSessionRecord(
        token=row.token,
        user_id=row.user_id,
        expires_at=_as_utc(row.expires_at),
        created_at=_as_utc(row.created_at),
    )


def _draft_record(row: InvestmentDraft) -> DraftRecord:
    return DraftRecord(
        user_id=row.user_id,
        project_id=row.project_id,
        model_id=row.model_id,
        slots=row.slots,
        quantity=row.quantity,
        step=WizardStep(row.step),
        version=row.version,
        updated_at=_as_utc(row.updated_at),
    )


# ─── Repositories ────────────────────────────────────────────────

class SqlUserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: int) -> UserRecord | None:
        row = await self.db.get(User, user_id)
        return _user_record(row) if row else None

    async def get_by_phone(self, phone_number: str) -> UserRecord | None:
        result = await self.db.execute(
            select(User).where(User.phone_number == phone_number),
        )
        row = result.scalar_one_or_none()
        return _user_record(row) if row else None

    async def create(
        self, phone_number: str, name: str, email: str | None, now: datetime,
    ) -> UserRecord:
        row = User(phone_number=phone_number, name=name, email=email, created_at=now)
        self.db.add(row)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise PhoneAlreadyRegisteredError()
        return _user_record(row)


class SqlCatalogRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_projects(self) -> list[ProjectRecord]:
        result = await self.db.execute(
            select(Project)
            .order_by(Project.name)
            .execution_options(populate_existing=True),
        )
        return [_project_record(row) for row in result.scalars().all()]

    async def get_project(self, project_id: str) -> ProjectRecord | None:
        result = await self.db.execute(
            select(Project)
            .where(Project.id == project_id)
            .execution_options(populate_existing=True),
        )
        row = result.scalar_one_or_none()
        return _project_record(row) if row else None

    async def list_models(self, project_id: str) -> list[InvestmentModelRecord]:
        result = await self.db.execute(
            select(InvestmentModel)
            .where(InvestmentModel.project_id == project_id)
            .order_by(InvestmentModel.id)
            .execution_options(populate_existing=True),
        )
        return [_model_record(row) for row in result.scalars().all()]

    async def get_model(self, model_id: str) -> InvestmentModelRecord | None:
        result = await self.db.execute(
            select(InvestmentModel)
            .where(InvestmentModel.id == model_id)
            .execution_options(populate_existing=True),
        )
        row = result.scalar_one_or_none()
        return _model_record(row) if row else None

    async def add_project(self, project: ProjectRecord) -> None:
        self.db.add(Project(
            id=project.id,
            name=project.name,
            location=project.location,
            minimum_investment=project.minimum_investment,
            estimated_returns=project.estimated_returns,
            lock_in_period=project.lock_in_period,
            available_slots=project.available_slots,
            image=project.image,
        ))
        await self.db.commit()

    async def add_model(self, model: InvestmentModelRecord) -> None:
        self.db.add(InvestmentModel(
            id=model.id,
            name=model.name,
            min_investment=model.min_investment,
            roi=model.roi,
            lock_in_period=model.lock_in_period,
            available_slots=model.available_slots,
            project_id=model.project_id,
        ))
        await self.db.commit()


class SqlInvestmentRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, investment_id: int) -> InvestmentRecord | None:
        row = await self.db.get(Investment, investment_id)
        return _investment_record(row) if row else None

    async def list_by_user(self, user_id: int) -> list[InvestmentRecord]:
        result = await self.db.execute(
            select(Investment)
            .where(Investment.user_id == user_id)
            .order_by(Investment.id.desc()),
        )
        return [_investment_record(row) for row in result.scalars().all()]

    async def reserve_and_record(
        self, new: NewInvestment,
    ) -> InvestmentRecord | None:
        reserved = await self.db.execute(
            update(InvestmentModel)
            .where(InvestmentModel.id == new.model_id)
            .where(InvestmentModel.available_slots >= new.slots)
            .values(available_slots=InvestmentModel.available_slots - new.slots)
            .execution_options(synchronize_session=False),
        )
        if reserved.rowcount != 1:
            await self.db.rollback()
            logger.info(
                "Slot reservation lost",
                extra={"model_id": new.model_id, "user_id": new.user_id},
            )
            return None

        await self.db.execute(
            update(Project)
            .where(Project.id == new.project_id)
            .values(available_slots=case(
                (Project.available_slots >= new.slots,
                 Project.available_slots - new.slots),
                else_=0,
            ))
            .execution_options(synchronize_session=False),
        )
        row = Investment(
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
            status=new.status.value,
        )
        self.db.add(row)
        await self.db.execute(
            delete(InvestmentDraft)
            .where(InvestmentDraft.user_id == new.user_id)
            .where(InvestmentDraft.project_id == new.project_id),
        )
        await self.db.commit()
        return _investment_record(row)


class SqlOtpRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self, phone_number: str, code_hash: str, expires_at: datetime, now: datetime,
    ) -> OtpRecord:
        row = Otp(
            phone_number=phone_number,
            code_hash=code_hash,
            expires_at=expires_at,
            used=False,
            attempts=0,
            created_at=now,
        )
        self.db.add(row)
        await self.db.commit()
        return _otp_record(row)

    async def get_latest(self, phone_number: str) -> OtpRecord | None:
        result = await self.db.execute(
            select(Otp)
            .where(Otp.phone_number == phone_number)
            .order_by(Otp.id.desc())
            .limit(1)
            .execution_options(populate_existing=True),
        )
        row = result.scalar_one_or_none()
        return _otp_record(row) if row else None

    async def record_failed_attempt(self, otp_id: int) -> None:
        await self.db.execute(
            update(Otp)
            .where(Otp.id == otp_id)
            .values(attempts=Otp.attempts + 1)
            .execution_options(synchronize_session=False),
        )
        await self.db.commit()

    async def mark_used(
        self, otp_id: int, signup_token_hash: str | None = None,
    ) -> bool:
        result = await self.db.execute(
            update(Otp)
            .where(Otp.id == otp_id)
            .where(Otp.used.is_(False))
            .values(used=True, signup_token_hash=signup_token_hash)
            .execution_options(synchronize_session=False),
        )
        await self.db.commit()
        return result.rowcount == 1

    async def consume_signup_token(self, otp_id: int, token_hash: str) -> bool:
        result = await self.db.execute(
            update(Otp)
            .where(Otp.id == otp_id)
            .where(Otp.signup_token_hash == token_hash)
            .values(signup_token_hash=None)
            .execution_options(synchronize_session=False),
        )
        await self.db.commit()
        return result.rowcount == 1


class SqlAuthSessionRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self, token: str, user_id: int, expires_at: datetime, now: datetime,
    ) -> AuthSessionRecord:
        row = AuthSession(
            token=token, user_id=user_id, expires_at=expires_at, created_at=now,
        )
        self.db.add(row)
        await self.db.commit()
        return _session_record(row)

    async def get(self, token: str) -> AuthSessionRecord | None:
        row = await self.db.get(AuthSession, token)
        return _session_record(row) if row else None

    async def delete(self, token: str) -> None:
        await self.db.execute(delete(AuthSession).where(AuthSession.token == token))
        await self.db.commit()

    async def delete_expired(self, now: datetime) -> int:
        result = await self.db.execute(
            delete(AuthSession).where(AuthSession.expires_at <= now),
        )
        await self.db.commit()
        return result.rowcount


class SqlDraftRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _find(self, user_id: int, project_id: str) -> InvestmentDraft | None:
        result = await self.db.execute(
            select(InvestmentDraft)
            .where(InvestmentDraft.user_id == user_id)
            .where(InvestmentDraft.project_id == project_id)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def get(self, user_id: int, project_id: str) -> DraftRecord | None:
        row = await self._find(user_id, project_id)
        return _draft_record(row) if row else None

    async def save(self, draft: DraftRecord) -> DraftRecord:
        row = await self._find(draft.user_id, draft.project_id)
        if row is None:
            row = InvestmentDraft(user_id=draft.user_id, project_id=draft.project_id)
            self.db.add(row)
        row.model_id = draft.model_id
        row.slots = draft.slots
        row.quantity = draft.quantity
        row.step = int(draft.step)
        row.version = draft.version
        row.updated_at = draft.updated_at
        await self.db.commit()
        return _draft_record(row)

    async def delete(self, user_id: int, project_id: str) -> None:
        await self.db.execute(
            delete(InvestmentDraft)
            .where(InvestmentDraft.user_id == user_id)
            .where(InvestmentDraft.project_id == project_id),
        )
        await self.db.commit()


def build_sql_repositories(db: AsyncSession) -> Repositories:
    """Bind every repository to one AsyncSession (one request)."""
    return Repositories(
        users=SqlUserRepository(db),
        catalog=SqlCatalogRepository(db),
        investments=SqlInvestmentRepository(db),
        otps=SqlOtpRepository(db),
        auth_sessions=SqlAuthSessionRepository(db),
        drafts=SqlDraftRepository(db),
    )
