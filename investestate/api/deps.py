"""Request Dependencies: storage backend, services, and the authenticated user.

Invariants:
    - One Repositories bundle per request (FastAPI caches dependencies per request)
    - storage_backend "memory" shares the process-wide MemoryStore; "database" opens
      one AsyncSession per request via db_manager
    - get_current_user raises UnauthenticatedError (401) when the cookie is missing,
      unknown or expired
"""

from datetime import timedelta
from typing import AsyncGenerator

from fastapi import Depends, Request

from investestate.config import get_settings
from investestate.core.errors import PaymentProviderError
from investestate.core.records import UserRecord
from investestate.core.repository_protocols import (
    OtpSender, PaymentGateway, Repositories,
)
from investestate.infrastructure import database
from investestate.infrastructure.memory_store import get_memory_store
from investestate.infrastructure.otp_sender import LoggingOtpSender
from investestate.infrastructure.payment_gateway import StripePaymentGateway
from investestate.infrastructure.sql_store import build_sql_repositories
from investestate.services.auth_flow import AuthFlow
from investestate.services.catalog import CatalogService
from investestate.services.drafts import DraftService
from investestate.services.investment_workflow import InvestmentWorkflow


async def get_repositories() -> AsyncGenerator[Repositories, None]:
    settings = get_settings()
    if settings.storage_backend == "memory":
        yield get_memory_store().repositories()
        return
    if database.db_manager is None:
        raise RuntimeError("Database not initialized")
    async with database.db_manager.session() as db:
        yield build_sql_repositories(db)


def get_otp_sender() -> OtpSender:
    return LoggingOtpSender(log_codes=get_settings().otp_log_codes)


def get_payment_gateway() -> PaymentGateway:
    settings = get_settings()
    if not settings.stripe_secret_key:
        raise PaymentProviderError(
            "Stripe is not configured. Set the STRIPE_SECRET_KEY environment variable.",
        )
    return StripePaymentGateway(settings.stripe_secret_key, settings.payment_currency)


def get_auth_flow(
    repos: Repositories = Depends(get_repositories),
    sender: OtpSender = Depends(get_otp_sender),
) -> AuthFlow:
    return AuthFlow(repos, get_settings(), sender)


def get_catalog_service(
    repos: Repositories = Depends(get_repositories),
) -> CatalogService:
    return CatalogService(repos.catalog)


def get_investment_workflow(
    repos: Repositories = Depends(get_repositories),
) -> InvestmentWorkflow:
    return InvestmentWorkflow(repos)


def get_draft_service(
    repos: Repositories = Depends(get_repositories),
) -> DraftService:
    return DraftService(repos, timedelta(days=get_settings().draft_ttl_days))


def get_session_token(request: Request) -> str | None:
    return request.cookies.get(get_settings().session_cookie_name)


def get_signup_token(request: Request) -> str | None:
    return request.cookies.get(get_settings().signup_cookie_name)


async def get_current_user(
    token: str | None = Depends(get_session_token),
    auth: AuthFlow = Depends(get_auth_flow),
) -> UserRecord:
    return await auth.resolve_session(token)
