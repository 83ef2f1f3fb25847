from __future__ import annotations

import math
from typing import Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from college_saver.core.errors import InvalidHorizonError, InvalidInputError


# -----------------------------
# Value objects
# -----------------------------


class ProjectionInput(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    goal_amount: float = Field(gt=0)
    current_value: float = Field(default=0.0, ge=0)
    annual_return_rate: float  # fraction, e.g. 0.07
    horizon_months: int = Field(gt=0)


class ProjectionPoint(BaseModel):
    """One month of the simulation. Month 0 is the starting balance."""

    model_config = ConfigDict(frozen=True)

    month: int = Field(ge=0)
    balance: float
    contribution: float = 0.0
    growth: float = 0.0
    cumulative_contributions: float = 0.0
    cumulative_growth: float = 0.0


class ProjectionSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    monthly_contribution: float
    total_months: int
    total_contributions: float
    investment_growth: float
    final_balance: float


class YearlyBalance(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    month: int
    balance: float


class ContributionBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    contributions: float
    growth: float
    contributions_share: float
    growth_share: float


class ProjectionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    monthly_contribution: float
    summary: ProjectionSummary
    yearly: List[YearlyBalance]
    breakdown: ContributionBreakdown
    points: List[ProjectionPoint]


# -----------------------------
# Validation helpers
# -----------------------------


def _finite(name: str, value: float, *, minimum: Optional[float] = None, strict_min: bool = False) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"{name} must be a number, got {type(value).__name__}")
    value = float(value)
    if not math.isfinite(value):
        raise InvalidInputError(f"{name} must be finite, got {value}")
    if minimum is not None:
        if strict_min and value <= minimum:
            raise InvalidInputError(f"{name} must be greater than {minimum}, got {value}")
        if not strict_min and value < minimum:
            raise InvalidInputError(f"{name} must be at least {minimum}, got {value}")
    return value


def _whole_months(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"{name} must be an integer, got {type(value).__name__}")
    return value


def monthly_rate(annual_return_rate: float) -> float:
    """Per-period compounding rate shared by the solver and the simulation."""
    rate = _finite("annual_return_rate", annual_return_rate) / 12
    if rate <= -1:
        raise InvalidInputError(f"annual_return_rate {annual_return_rate} wipes out the balance every month")
    return rate


def _compound(rate: float, months: int) -> Tuple[float, float]:
    """Return ((1 + rate) ** months, (1 + rate) ** months - 1).

    Both go through log1p/expm1 so rates too small to change `1 + rate` still count.
    """
    log_growth = months * math.log1p(rate)
    try:
        factor = math.exp(log_growth)
        excess = math.expm1(log_growth)
    except OverflowError as exc:
        raise InvalidInputError(f"growth factor overflows over {months} months") from exc
    if not math.isfinite(factor):
        raise InvalidInputError(f"growth factor overflows over {months} months")
    return factor, excess


# -----------------------------
# Solver
# -----------------------------


def solve_required_contribution(
    goal_amount: float,
    current_value: float,
    annual_return_rate: float,
    months: int,
    *,
    strict: bool = False,
) -> float:
    """
    Level end-of-month contribution that grows `current_value` into `goal_amount`.

      - months <= 0 returns 0.0, or raises InvalidHorizonError when strict=True.
      - If compounding the current value alone reaches the goal, returns 0.0.
      - A zero (or vanishingly small) rate reduces the annuity factor to `months`.
    """
    goal = _finite("goal_amount", goal_amount, minimum=0.0, strict_min=True)
    current = _finite("current_value", current_value, minimum=0.0)
    rate = monthly_rate(annual_return_rate)
    months = _whole_months("months", months)

    if months <= 0:
        if strict:
            raise InvalidHorizonError(f"months must be positive, got {months}")
        return 0.0

    growth_factor, growth_excess = _compound(rate, months)
    shortfall = goal - current * growth_factor
    if shortfall <= 0:
        return 0.0

    annuity_factor = growth_excess / rate if rate != 0 else 0.0
    if annuity_factor == 0:
        return shortfall / months

    payment = shortfall / annuity_factor
    if not math.isfinite(payment):
        raise InvalidInputError(f"required contribution is not finite for {months} months at rate {rate}")
    return payment


# -----------------------------
# Simulation
# -----------------------------


def iter_projection(
    required_contribution: float,
    current_value: float,
    annual_return_rate: float,
    total_months: int,
) -> Iterator[ProjectionPoint]:
    """Yield month 0..total_months. Each call starts over from the inputs."""
    contribution = _finite("required_contribution", required_contribution)
    balance = _finite("current_value", current_value, minimum=0.0)
    rate = monthly_rate(annual_return_rate)
    total_months = _whole_months("total_months", total_months)
    if total_months < 0:
        raise InvalidHorizonError(f"total_months must not be negative, got {total_months}")

    return _walk(contribution, balance, rate, total_months)


def _walk(contribution: float, balance: float, rate: float, total_months: int) -> Iterator[ProjectionPoint]:
    total_contributions = 0.0
    total_growth = 0.0

    yield ProjectionPoint(month=0, balance=balance)

    for month in range(1, total_months + 1):
        # growth on last month's balance; the contribution lands at month end
        growth = balance * rate
        total_growth += growth
        total_contributions += contribution
        balance += contribution + growth

        if not math.isfinite(balance):
            raise InvalidInputError(f"balance overflowed at month {month}")

        yield ProjectionPoint(
            month=month,
            balance=balance,
            contribution=contribution,
            growth=growth,
            cumulative_contributions=total_contributions,
            cumulative_growth=total_growth,
        )


def simulate(
    required_contribution: float,
    current_value: float,
    annual_return_rate: float,
    total_months: int,
) -> List[ProjectionPoint]:
    return list(iter_projection(required_contribution, current_value, annual_return_rate, total_months))


# -----------------------------
# Summaries for the charts and headline figures
# -----------------------------


def summarize(goal_amount: float, monthly_contribution: float, points: List[ProjectionPoint]) -> ProjectionSummary:
    """
    Headline numbers shown next to the charts.

    investment_growth keeps the legacy definition (goal minus what was paid in),
    which is not the same as the simulated cumulative growth.
    """
    if not points:
        raise InvalidInputError("cannot summarize an empty projection")
    total_months = points[-1].month
    total_contributions = monthly_contribution * total_months
    return ProjectionSummary(
        monthly_contribution=monthly_contribution,
        total_months=total_months,
        total_contributions=total_contributions,
        investment_growth=goal_amount - total_contributions,
        final_balance=points[-1].balance,
    )


def year_end_balances(points: List[ProjectionPoint]) -> List[YearlyBalance]:
    return [
        YearlyBalance(year=point.month // 12, month=point.month, balance=point.balance)
        for point in points
        if point.month % 12 == 0
    ]


def contribution_breakdown(points: List[ProjectionPoint]) -> ContributionBreakdown:
    if not points:
        raise InvalidInputError("cannot break down an empty projection")
    last = points[-1]
    total = last.cumulative_contributions + last.cumulative_growth
    if total == 0:
        contributions_share = growth_share = 0.0
    else:
        contributions_share = last.cumulative_contributions / total
        growth_share = last.cumulative_growth / total
    return ContributionBreakdown(
        contributions=last.cumulative_contributions,
        growth=last.cumulative_growth,
        contributions_share=contributions_share,
        growth_share=growth_share,
    )


def project_goal(request: ProjectionInput, *, strict: bool = False) -> ProjectionResult:
    """Solve for the contribution, simulate it, and derive the chart data."""
    payment = solve_required_contribution(
        request.goal_amount,
        request.current_value,
        request.annual_return_rate,
        request.horizon_months,
        strict=strict,
    )
    points = simulate(payment, request.current_value, request.annual_return_rate, request.horizon_months)
    return ProjectionResult(
        monthly_contribution=payment,
        summary=summarize(request.goal_amount, payment, points),
        yearly=year_end_balances(points),
        breakdown=contribution_breakdown(points),
        points=points,
    )


__all__ = [
    "ProjectionInput",
    "ProjectionPoint",
    "ProjectionSummary",
    "YearlyBalance",
    "ContributionBreakdown",
    "ProjectionResult",
    "monthly_rate",
    "solve_required_contribution",
    "iter_projection",
    "simulate",
    "summarize",
    "year_end_balances",
    "contribution_breakdown",
    "project_goal",
]
