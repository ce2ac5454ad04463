"""Initial schema: users, catalog, investments, otps, auth sessions, drafts.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("phone_number", sa.String(20), nullable=False, unique=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "projects",
        sa.Column("id", sa.String(100), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("location", sa.String(300), nullable=False),
        sa.Column("minimum_investment", sa.Integer, nullable=False),
        sa.Column("estimated_returns", sa.Float, nullable=False),
        sa.Column("lock_in_period", sa.Integer, nullable=False),
        sa.Column("available_slots", sa.Integer, nullable=False),
        sa.Column("image", sa.Text, nullable=False),
    )

    op.create_table(
        "investment_models",
        sa.Column("id", sa.String(100), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("min_investment", sa.Integer, nullable=False),
        sa.Column("roi", sa.Float, nullable=False),
        sa.Column("lock_in_period", sa.Integer, nullable=False),
        sa.Column("available_slots", sa.Integer, nullable=False),
        sa.Column("project_id", sa.String(100), sa.ForeignKey("projects.id"), nullable=False),
        sa.CheckConstraint("available_slots >= 0", name="ck_investment_models_slots"),
    )
    op.create_index(
        "ix_investment_models_project_id", "investment_models", ["project_id"],
    )

    op.create_table(
        "investments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("project_id", sa.String(100), nullable=False),
        sa.Column("project_name", sa.String(200), nullable=False),
        sa.Column("model_id", sa.String(100), nullable=False),
        sa.Column("model_name", sa.String(100), nullable=False),
        sa.Column("slots", sa.Integer, nullable=False),
        sa.Column("amount", sa.Integer, nullable=False),
        sa.Column("expected_returns", sa.Float, nullable=False),
        sa.Column("lock_in_period", sa.Integer, nullable=False),
        sa.Column("maturity_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
    )
    op.create_index("ix_investments_user_id", "investments", ["user_id"])

    op.create_table(
        "otps",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("phone_number", sa.String(20), nullable=False),
        sa.Column("code_hash", sa.String(64), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("used", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("attempts", sa.Integer, nullable=False, server_default="0"),
        sa.Column("signup_token_hash", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_otps_phone_number", "otps", ["phone_number"])

    op.create_table(
        "auth_sessions",
        sa.Column("token", sa.String(128), primary_key=True),
        sa.Column(
            "user_id", sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_auth_sessions_expires_at", "auth_sessions", ["expires_at"])

    op.create_table(
        "investment_drafts",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "user_id", sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("project_id", sa.String(100), nullable=False),
        sa.Column("model_id", sa.String(100), nullable=True),
        sa.Column("slots", sa.Integer, nullable=False, server_default="1"),
        sa.Column("quantity", sa.Integer, nullable=False, server_default="1"),
        sa.Column("step", sa.Integer, nullable=False, server_default="0"),
        sa.Column("version", sa.Integer, nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "project_id", name="uq_investment_drafts_user_project"),
    )


def downgrade() -> None:
    op.drop_table("investment_drafts")
    op.drop_index("ix_auth_sessions_expires_at", table_name="auth_sessions")
    op.drop_table("auth_sessions")
    op.drop_index("ix_otps_phone_number", table_name="otps")
    op.drop_table("otps")
    op.drop_index("ix_investments_user_id", table_name="investments")
    op.drop_table("investments")
    op.drop_index("ix_investment_models_project_id", table_name="investment_models")
    op.drop_table("investment_models")
    op.drop_table("projects")
    op.drop_table("users")
