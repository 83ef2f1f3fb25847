"""Unit-price lookup for valuing existing fund shares.

The projection engine never depends on this module; callers resolve a price here and
pass the resulting current value into the core as a plain number.
"""

from __future__ import annotations

import math
from typing import Dict, Literal, Mapping, Optional, Protocol, Tuple

from college_saver.core.errors import InvalidInputError
from college_saver.domain.session import SessionContext
from college_saver.utils.logging import get_logger

logger = get_logger("pricing")

PriceOrigin = Literal["session", "quote", "fallback"]

# Approximate share prices used when no live quote is available.
DEFAULT_FALLBACK_PRICES: Dict[str, float] = {
    "VTI": 280.0,
    "VOO": 500.0,
    "VT": 115.0,
    "VXUS": 62.0,
    "BND": 72.0,
    "SPY": 545.0,
}


class QuoteUnavailable(Exception):
    pass


class QuoteSource(Protocol):
    def get_price(self, ticker: str) -> float:
        ...


def _normalize(ticker: str) -> str:
    sym = (ticker or "").strip().upper()
    if not sym:
        raise InvalidInputError("ticker is empty")
    return sym


class FallbackTableQuoteSource:
    """Fixed ticker -> price table; misses raise QuoteUnavailable."""

    def __init__(self, table: Optional[Mapping[str, float]] = None) -> None:
        source = DEFAULT_FALLBACK_PRICES if table is None else table
        self.table = {sym.strip().upper(): float(price) for sym, price in source.items()}

    def get_price(self, ticker: str) -> float:
        sym = _normalize(ticker)
        if sym not in self.table:
            raise QuoteUnavailable(f"no fallback price for {sym}")
        return self.table[sym]


def resolve_unit_price(
    ticker: str,
    source: Optional[QuoteSource],
    fallback: QuoteSource,
    session: SessionContext,
) -> Tuple[float, PriceOrigin]:
    """
    Price for `ticker`, in order of preference:
      1) the price already stored in the session
      2) the live source, tried at most once per session
      3) the fallback table
    The chosen price is stored back into the session.
    """
    sym = _normalize(ticker)

    if session.unit_price is not None:
        return session.unit_price, "session"

    if source is not None and not session.price_attempted:
        session.price_attempted = True
        try:
            price = _checked_price(sym, source.get_price(sym))
        except QuoteUnavailable as exc:
            logger.warning(f"quote_unavailable symbol={sym} err={exc}")
        else:
            session.remember_price(price)
            return price, "quote"

    price = _checked_price(sym, fallback.get_price(sym))
    session.remember_price(price)
    return price, "fallback"


def _checked_price(symbol: str, price: float) -> float:
    try:
        value = float(price)
    except (TypeError, ValueError) as exc:
        raise QuoteUnavailable(f"non-numeric price for {symbol}: {price!r}") from exc
    if not math.isfinite(value) or value <= 0:
        raise QuoteUnavailable(f"unusable price for {symbol}: {value}")
    return value


def current_value_from_shares(shares: float, unit_price: float) -> float:
    for name, value in (("shares", shares), ("unit_price", unit_price)):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidInputError(f"{name} must be a number")
        if not math.isfinite(value) or value < 0:
            raise InvalidInputError(f"{name} must be a finite non-negative number, got {value}")
    return float(shares) * float(unit_price)
