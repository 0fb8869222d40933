import asyncio
from decimal import Decimal
from typing import Optional

import pytest

from arbscan.services.arbitrage import ForexRateProvider
from arbscan.services.venues import BaseVenue, VenueRegistry


class FakeVenue(BaseVenue):
    """Venue with a canned price, error or hang."""

    def __init__(
        self,
        venue_id: str,
        price: Optional[float] = None,
        error: Optional[Exception] = None,
        hang: bool = False,
    ):
        self.venue_id = venue_id
        self.price = price
        self.error = error
        self.hang = hang
        self.symbols: list[str] = []
        self.cancelled = False
        self.closed = False

    async def fetch_last_price(self, symbol: str) -> Optional[float]:
        self.symbols.append(symbol)
        if self.hang:
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if self.error is not None:
            raise self.error
        return self.price

    async def close(self) -> None:
        self.closed = True


class FakeRateProvider(ForexRateProvider):
    """Returns a fixed rate table, or raises if given an error."""

    def __init__(self, rates: Optional[dict] = None, error: Optional[Exception] = None):
        super().__init__(url="http://rates.invalid", timeout_sec=1.0)
        self.rates = {k: Decimal(str(v)) for k, v in (rates or {"INR": 83.50, "USD": 1}).items()}
        self.error = error
        self.calls = 0

    async def get_rates(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return dict(self.rates)


@pytest.fixture
def make_registry():
    def _make(*venues: BaseVenue) -> VenueRegistry:
        return VenueRegistry(venues)

    return _make
