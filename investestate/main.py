"""InvestEstate API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map InvestEstateError → structured JSON responses
    - CORS configured from settings (not hardcoded), credentials allowed for the cookie
    - Storage initialized and catalog seeded on startup via the lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - SQLite URLs get create_all on startup; Postgres schemas come from alembic
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from investestate.api.error_handlers import register_error_handlers
from investestate.api.routes import (
    auth, drafts, health, investments, payments, projects,
)
from investestate.config import get_settings
from investestate.infrastructure.database import init_db
from investestate.infrastructure.memory_store import get_memory_store
from investestate.infrastructure.observability import setup_logging
from investestate.infrastructure.sql_store import SqlCatalogRepository
from investestate.services.catalog import seed_catalog

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = None
    if settings.storage_backend == "memory":
        if settings.seed_catalog:
            await seed_catalog(get_memory_store().repositories().catalog)
    else:
        manager = init_db(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        if settings.database_url.startswith("sqlite"):
            await manager.create_all()
        if settings.seed_catalog:
            async with manager.session() as db:
                await seed_catalog(SqlCatalogRepository(db))
    logger.info(f"InvestEstate API started ({settings.storage_backend} storage)")
    yield
    logger.info("InvestEstate API shutting down")
    if manager is not None:
        await manager.dispose()


app = FastAPI(
    title="InvestEstate API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_api_requests(request: Request, call_next):
    if not request.url.path.startswith("/api"):
        return await call_next(request)
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = round((time.perf_counter() - start) * 1000)
    logger.info(
        f"{request.method} {request.url.path} {response.status_code} in {duration_ms}ms",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response


register_error_handlers(app)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(projects.router)
app.include_router(investments.router)
app.include_router(drafts.router)
app.include_router(payments.router)
