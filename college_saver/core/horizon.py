from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from college_saver.core.errors import HorizonExpiredError, InvalidDateError

TARGET_AGE_YEARS = 18
DAYS_PER_YEAR = 365
DAYS_PER_MONTH = 30
_MICROSECONDS_PER_DAY = 86_400 * 1_000_000

DateLike = Union[date, datetime, str]

# YYYY-MM-DD, optionally followed by an ISO time and offset
_ISO_DATE_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})(T\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:\d{2})?)?$")


class Horizon(BaseModel):
    """Time left until the target date, in the 365-day-year / 30-day-month approximation."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    years_remaining: int = Field(ge=0)
    # remainders of 360..364 days give 12, kept for output parity
    months_remaining: int = Field(ge=0, le=12)
    total_months: int = Field(ge=0)

    @model_validator(mode="after")
    def check_total(self) -> "Horizon":
        if self.total_months != self.years_remaining * 12 + self.months_remaining:
            raise ValueError("total_months must equal years_remaining * 12 + months_remaining")
        return self


def parse_birth_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidDateError("birth date is empty")
        match = _ISO_DATE_RE.match(text)
        if match is None:
            raise InvalidDateError(f"invalid birth date {value!r}: expected YYYY-MM-DD")
        try:
            return date.fromisoformat(match.group(1))
        except ValueError as exc:
            raise InvalidDateError(f"invalid birth date {value!r}: {exc}") from exc
    raise InvalidDateError(f"birth date must be a date or ISO string, got {type(value).__name__}")


def target_date(birth: date, years: int = TARGET_AGE_YEARS) -> date:
    """Same month/day `years` later; Feb 29 rolls over to Mar 1 in non-leap years."""
    try:
        return birth.replace(year=birth.year + years)
    except ValueError:
        return date(birth.year + years, 3, 1)


def _naive(now: Union[date, datetime]) -> datetime:
    if isinstance(now, datetime):
        if now.tzinfo is not None:
            return now.astimezone(timezone.utc).replace(tzinfo=None)
        return now
    if isinstance(now, date):
        return datetime(now.year, now.month, now.day)
    raise InvalidDateError(f"now must be a date or datetime, got {type(now).__name__}")


def days_until(target: date, now: Union[date, datetime]) -> int:
    """Whole days from `now` to midnight of `target`, rounded up."""
    delta = datetime(target.year, target.month, target.day) - _naive(now)
    micros = (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds
    return -((-micros) // _MICROSECONDS_PER_DAY)


def split_days(diff_days: int) -> tuple[int, int]:
    """Split a day count into (years, months) the way the legacy calculator did.

    Years use floor division. The remainder is taken against the truncated quotient,
    so it keeps the dividend's sign and negative spans come out negative rather
    than wrapping around.
    """
    years = diff_days // DAYS_PER_YEAR
    remainder = diff_days - int(diff_days / DAYS_PER_YEAR) * DAYS_PER_YEAR
    months = remainder // DAYS_PER_MONTH
    return years, months


def compute_horizon(birth_date: DateLike, now: Union[date, datetime]) -> Horizon:
    """Remaining horizon from `now` until the child turns 18.

    Raises InvalidDateError for a malformed birth date and HorizonExpiredError when the
    resulting horizon is not at least one month.
    """
    birth = parse_birth_date(birth_date)
    try:
        target = target_date(birth)
    except (ValueError, OverflowError) as exc:
        raise InvalidDateError(f"no 18th birthday for {birth.isoformat()}: {exc}") from exc

    diff_days = days_until(target, now)
    years, months = split_days(diff_days)
    total = years * 12 + months

    if total <= 0:
        raise HorizonExpiredError(
            f"target date {target.isoformat()} is not far enough in the future",
            diff_days=diff_days,
        )

    return Horizon(years_remaining=years, months_remaining=months, total_months=total)


__all__ = [
    "DAYS_PER_MONTH",
    "DAYS_PER_YEAR",
    "TARGET_AGE_YEARS",
    "Horizon",
    "compute_horizon",
    "days_until",
    "parse_birth_date",
    "split_days",
    "target_date",
]
