"""ORM Models: SQLAlchemy declarative models for the relational store.

Invariants:
    - All models inherit from Base (db/base.py)
    - Only infrastructure/sql_store.py and alembic touch these classes;
      everything else works with core records

Design Decisions:
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from investestate.models.user import User  # noqa: F401
from investestate.models.project import Project  # noqa: F401
from investestate.models.investment_model import InvestmentModel  # noqa: F401
from investestate.models.investment import Investment  # noqa: F401
from investestate.models.otp import Otp  # noqa: F401
from investestate.models.auth_session import AuthSession  # noqa: F401
from investestate.models.investment_draft import InvestmentDraft  # noqa: F401
