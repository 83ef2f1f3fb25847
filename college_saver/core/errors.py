"""Error types raised by the projection engine."""

from __future__ import annotations

from typing import Optional


class ProjectionError(ValueError):
    code = "projection_error"


class InvalidDateError(ProjectionError):
    """Birth date is missing, malformed, or not a real calendar date."""

    code = "invalid_date"


class HorizonExpiredError(ProjectionError):
    """The 18th birthday is not in the future, so there is nothing to project."""

    code = "horizon_expired"

    def __init__(self, message: str, diff_days: Optional[int] = None):
        super().__init__(message)
        self.diff_days = diff_days


class InvalidHorizonError(ProjectionError):
    code = "invalid_horizon"


class InvalidInputError(ProjectionError):
    """Non-finite, negative-where-disallowed or wrongly typed numeric input."""

    code = "invalid_input"
