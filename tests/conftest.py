"""Root conftest: shared test configuration."""

import os

# Tests never talk to a real payment provider or database server
os.environ.pop("STRIPE_SECRET_KEY", None)
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("STORAGE_BACKEND", "database")
os.environ.setdefault("LOG_FORMAT", "text")
