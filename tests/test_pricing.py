from __future__ import annotations

import pytest

from college_saver.core.errors import InvalidInputError
from college_saver.domain.pricing import (
    FallbackTableQuoteSource,
    QuoteUnavailable,
    current_value_from_shares,
    resolve_unit_price,
)
from college_saver.domain.session import SessionContext


class FakeQuoteSource:
    def __init__(self, price=None, error=None):
        self.price = price
        self.error = error
        self.calls = []

    def get_price(self, ticker: str) -> float:
        self.calls.append(ticker)
        if self.error is not None:
            raise self.error
        return self.price


def fallback() -> FallbackTableQuoteSource:
    return FallbackTableQuoteSource({"vti": 250.0, "VOO": 400.0})


def test_fallback_table_is_case_insensitive():
    table = fallback()
    assert table.get_price("VTI") == 250.0
    assert table.get_price(" voo ") == 400.0

    with pytest.raises(QuoteUnavailable):
        table.get_price("ZZZZ")


def test_default_fallback_table_has_prices():
    assert FallbackTableQuoteSource().get_price("vti") > 0


def test_live_quote_is_used_and_cached_in_session():
    source = FakeQuoteSource(price=301.5)
    session = SessionContext()

    assert resolve_unit_price("vti", source, fallback(), session) == (301.5, "quote")
    assert session.price_attempted is True
    assert session.unit_price == 301.5

    # second lookup in the same session never reaches the source
    assert resolve_unit_price("vti", source, fallback(), session) == (301.5, "session")
    assert source.calls == ["VTI"]


def test_unavailable_quote_falls_back_to_table():
    source = FakeQuoteSource(error=QuoteUnavailable("timeout"))
    session = SessionContext()

    assert resolve_unit_price("VTI", source, fallback(), session) == (250.0, "fallback")
    assert session.price_attempted is True
    assert session.unit_price == 250.0


def test_quote_is_attempted_only_once_per_session():
    source = FakeQuoteSource(price=301.5)
    session = SessionContext(price_attempted=True)

    assert resolve_unit_price("VTI", source, fallback(), session) == (250.0, "fallback")
    assert source.calls == []


@pytest.mark.parametrize("bad_price", [0.0, -3.0, float("nan"), "n/a"])
def test_unusable_quotes_fall_back(bad_price):
    source = FakeQuoteSource(price=bad_price)
    assert resolve_unit_price("VOO", source, fallback(), SessionContext()) == (400.0, "fallback")


def test_no_source_goes_straight_to_table():
    session = SessionContext()
    assert resolve_unit_price("VOO", None, fallback(), session) == (400.0, "fallback")
    assert session.price_attempted is False


def test_unknown_ticker_everywhere_raises():
    source = FakeQuoteSource(error=QuoteUnavailable("down"))
    with pytest.raises(QuoteUnavailable):
        resolve_unit_price("ZZZZ", source, fallback(), SessionContext())


def test_empty_ticker_is_an_input_error():
    with pytest.raises(InvalidInputError):
        resolve_unit_price("  ", None, fallback(), SessionContext())


def test_current_value_from_shares():
    assert current_value_from_shares(10, 25.5) == 255.0
    assert current_value_from_shares(0, 25.5) == 0.0

    for shares, price in [(-1, 10.0), (1, float("inf")), (True, 10.0)]:
        with pytest.raises(InvalidInputError):
            current_value_from_shares(shares, price)


def test_new_session_holds_only_price_state():
    session = SessionContext()

    assert session.unit_price is None
    assert session.price_attempted is False

    session.remember_price(312.5)
    assert session.unit_price == 312.5
    assert session.price_attempted is False
