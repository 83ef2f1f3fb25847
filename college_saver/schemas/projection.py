"""Data contracts for the horizon and projection endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class HorizonRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    birthDate: str = Field(..., description="Child's date of birth, YYYY-MM-DD.")
    now: Optional[datetime] = Field(None, description="Override for the current time; defaults to the server clock.")


class ProjectionRequest(BaseModel):
    """Inputs for a full 529 projection."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    birthDate: str = Field(..., description="Child's date of birth, YYYY-MM-DD.")
    now: Optional[datetime] = None

    goalAmount: float = Field(..., gt=0)
    annualReturnRate: float = Field(
        ...,
        ge=-0.5,
        le=1,
        description="Annualized return rate expressed as a decimal (e.g. 0.07 for 7%).",
    )

    currentValue: Optional[float] = Field(None, ge=0)
    shares: Optional[float] = Field(None, ge=0, description="Fund shares held; valued at unitPrice or a looked-up price.")
    ticker: Optional[str] = Field(None, min_length=1, max_length=12)
    unitPrice: Optional[float] = Field(None, gt=0)

    @model_validator(mode="after")
    def check_holdings(self) -> "ProjectionRequest":
        if self.currentValue is not None and self.shares is not None:
            raise ValueError("give either currentValue or shares, not both")
        if self.shares is not None and self.unitPrice is None and not self.ticker:
            raise ValueError("shares need a ticker or a unitPrice")
        return self


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HorizonResponse(_CamelModel):
    years_remaining: int
    months_remaining: int
    total_months: int


class PointResponse(_CamelModel):
    month: int
    balance: float
    contribution: float
    growth: float
    cumulative_contributions: float
    cumulative_growth: float


class SummaryResponse(_CamelModel):
    monthly_contribution: float
    total_months: int
    total_contributions: float
    investment_growth: float
    final_balance: float


class YearlyBalanceResponse(_CamelModel):
    year: int
    month: int
    balance: float


class BreakdownResponse(_CamelModel):
    contributions: float
    growth: float
    contributions_share: float
    growth_share: float


class ProjectionResponse(_CamelModel):
    horizon: HorizonResponse
    current_value: float
    unit_price: Optional[float] = None
    price_source: Optional[Literal["request", "session", "quote", "fallback"]] = None
    monthly_contribution: float
    summary: SummaryResponse
    yearly: List[YearlyBalanceResponse]
    breakdown: BreakdownResponse
    points: List[PointResponse]
