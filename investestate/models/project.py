"""Project ORM: a real-estate development open for investment.

Invariants:
    - id is a human-readable slug (e.g. "aura")
    - available_slots only changes through investment reservations, never below zero
"""

from sqlalchemy import Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from investestate.db.base import Base


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    location: Mapped[str] = mapped_column(String(300), nullable=False)
    minimum_investment: Mapped[int] = mapped_column(Integer, nullable=False)
    estimated_returns: Mapped[float] = mapped_column(Float, nullable=False)
    lock_in_period: Mapped[int] = mapped_column(Integer, nullable=False)
    available_slots: Mapped[int] = mapped_column(Integer, nullable=False)
    image: Mapped[str] = mapped_column(Text, nullable=False)

    models: Mapped[list["InvestmentModel"]] = relationship(
        "InvestmentModel", back_populates="project",
    )
