"""InvestmentModel ORM: a tier (Gold / Platinum / Virtual) offered by a project.

Invariants:
    - Always belongs to a Project (project_id FK)
    - available_slots is decremented by an atomic conditional UPDATE; never re-incremented
    - CHECK constraint keeps available_slots non-negative
"""

from sqlalchemy import CheckConstraint, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from investestate.db.base import Base


class InvestmentModel(Base):
    __tablename__ = "investment_models"
    __table_args__ = (
        CheckConstraint("available_slots >= 0", name="ck_investment_models_slots"),
    )

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    min_investment: Mapped[int] = mapped_column(Integer, nullable=False)
    roi: Mapped[float] = mapped_column(Float, nullable=False)
    lock_in_period: Mapped[int] = mapped_column(Integer, nullable=False)
    available_slots: Mapped[int] = mapped_column(Integer, nullable=False)
    project_id: Mapped[str] = mapped_column(
        String(100), ForeignKey("projects.id"), nullable=False, index=True,
    )

    project: Mapped["Project"] = relationship("Project", back_populates="models")
