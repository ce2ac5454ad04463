"""Portfolio Summary: dashboard totals over a user's investments.

Invariants:
    - total_invested is the exact sum of amounts
    - current value compounds monthly at expected_returns / 12 per elapsed 30-day month,
      capped at the lock-in period
    - growth_percentage is the mean expected return (0.0 for an empty portfolio)
"""

from dataclasses import dataclass
from datetime import datetime

from investestate.core.domain_types import InvestmentStatus
from investestate.core.records import InvestmentRecord


DAYS_PER_MONTH = 30


@dataclass(frozen=True)
class PortfolioSummary:
    total_invested: int
    current_value: int
    growth_percentage: float
    active_investments: int


def elapsed_months(start: datetime, now: datetime) -> int:
    return max((now - start).days // DAYS_PER_MONTH, 0)


def current_value(investment: InvestmentRecord, now: datetime) -> float:
    months = min(
        elapsed_months(investment.created_at, now),
        investment.lock_in_period * 12,
    )
    monthly_rate = investment.expected_returns / 12 / 100
    return investment.amount * (1 + monthly_rate) ** months


def summarize_portfolio(
    investments: list[InvestmentRecord], now: datetime,
) -> PortfolioSummary:
    if not investments:
        return PortfolioSummary(0, 0, 0.0, 0)
    return PortfolioSummary(
        total_invested=sum(inv.amount for inv in investments),
        current_value=round(sum(current_value(inv, now) for inv in investments)),
        growth_percentage=round(
            sum(inv.expected_returns for inv in investments) / len(investments), 2,
        ),
        active_investments=sum(
            1 for inv in investments if inv.status == InvestmentStatus.ACTIVE
        ),
    )
