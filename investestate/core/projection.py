"""Projection Math: investment amount, maturity value and maturity date.

Invariants:
    - amount = min_investment * slots, exact integer arithmetic
    - maturity value compounds annually: principal * (1 + roi/100) ** years,
      rounded half-up to a whole currency unit
    - maturity date is the same calendar day `years` later; 29 Feb lands on 28 Feb
      in non-leap target years

Design Decisions:
    - Compound interest is the single projection formula; the simple-interest
      variant (principal + principal * roi/100 * years) is not offered
    - Decimal for the power step so rounding matches the displayed figure exactly
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP


def investment_amount(min_investment: int, slots: int) -> int:
    return min_investment * slots


def maturity_value(principal: int, roi: float, years: int) -> int:
    """Value at the end of the lock-in period with annual compounding."""
    growth = (Decimal(1) + Decimal(str(roi)) / Decimal(100)) ** years
    value = Decimal(principal) * growth
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def add_years(start: datetime, years: int) -> datetime:
    """Shift `start` by whole calendar years, preserving time and tzinfo."""
    try:
        return start.replace(year=start.year + years)
    except ValueError:
        # 29 February into a non-leap year
        return start.replace(year=start.year + years, day=28)


def maturity_date(start: datetime, lock_in_period: int) -> datetime:
    return add_years(start, lock_in_period)


@dataclass(frozen=True)
class Projection:
    """Quote for a prospective purchase. Nothing here is persisted."""
    slots: int
    amount: int
    roi: float
    lock_in_period: int
    maturity_value: int
    projected_gain: int
    maturity_date: datetime


def project_investment(
    min_investment: int,
    roi: float,
    lock_in_period: int,
    slots: int,
    start: datetime,
) -> Projection:
    amount = investment_amount(min_investment, slots)
    value = maturity_value(amount, roi, lock_in_period)
    return Projection(
        slots=slots,
        amount=amount,
        roi=roi,
        lock_in_period=lock_in_period,
        maturity_value=value,
        projected_gain=value - amount,
        maturity_date=maturity_date(start, lock_in_period),
    )
