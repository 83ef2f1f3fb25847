"""Pure projection engine: horizon, required contribution and monthly simulation."""

from college_saver.core.errors import (
    HorizonExpiredError,
    InvalidDateError,
    InvalidHorizonError,
    InvalidInputError,
    ProjectionError,
)
from college_saver.core.horizon import Horizon, compute_horizon
from college_saver.core.projection import (
    ContributionBreakdown,
    ProjectionInput,
    ProjectionPoint,
    ProjectionResult,
    ProjectionSummary,
    YearlyBalance,
    contribution_breakdown,
    iter_projection,
    project_goal,
    simulate,
    solve_required_contribution,
    summarize,
    year_end_balances,
)

__all__ = [
    "ContributionBreakdown",
    "Horizon",
    "HorizonExpiredError",
    "InvalidDateError",
    "InvalidHorizonError",
    "InvalidInputError",
    "ProjectionError",
    "ProjectionInput",
    "ProjectionPoint",
    "ProjectionResult",
    "ProjectionSummary",
    "YearlyBalance",
    "compute_horizon",
    "contribution_breakdown",
    "iter_projection",
    "project_goal",
    "simulate",
    "solve_required_contribution",
    "summarize",
    "year_end_balances",
]
