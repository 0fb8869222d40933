"""
ccxt-backed venue.

Wraps one ccxt.async_support exchange instance. Symbols use the unified
ccxt format: "BTC/USDT".
"""

import logging
from typing import Any, Optional

import ccxt.async_support as ccxt_async

from arbscan.services.venues.base import BaseVenue

logger = logging.getLogger(__name__)


class CcxtVenue(BaseVenue):
    """Last-price lookups through a ccxt async exchange client."""

    def __init__(self, venue_id: str, exchange: Any):
        self.venue_id = venue_id
        self._exchange = exchange

    @classmethod
    def create(cls, venue_id: str) -> "CcxtVenue":
        """
        Build a venue for a ccxt exchange id.

        Raises ValueError if ccxt does not know the id.
        """
        if venue_id not in ccxt_async.exchanges:
            raise ValueError(f"Unknown ccxt exchange: {venue_id}")

        exchange_class = getattr(ccxt_async, venue_id)
        exchange = exchange_class({"enableRateLimit": True})
        return cls(venue_id, exchange)

    async def fetch_last_price(self, symbol: str) -> Optional[float]:
        ticker = await self._exchange.fetch_ticker(symbol)
        return ticker.get("last")

    async def close(self) -> None:
        try:
            await self._exchange.close()
        except Exception as e:
            logger.warning("Failed to close %s client: %s", self.venue_id, e)
