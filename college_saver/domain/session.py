from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class SessionContext:
    """
    Caller-owned price state for one calculator session:
      - unit_price: last resolved fund price, reused for the rest of the session
      - price_attempted: the live quote lookup has been tried once already
    """

    unit_price: Optional[float] = None
    price_attempted: bool = False

    def remember_price(self, price: float) -> None:
        self.unit_price = price
