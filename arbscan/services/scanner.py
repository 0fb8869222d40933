"""
Scanner service: fetches last prices from all registered venues.

Supports:
- Per-venue timeout; the lookup is cancelled when the timeout fires
- Parallel fan-out across venues, waiting for every venue to settle
- Partial failure: failed venues are dropped, never retried
"""

import asyncio
import logging
import time
from collections.abc import Iterable
from decimal import Decimal, InvalidOperation
from typing import Optional

import ccxt

from arbscan.core.config import settings
from arbscan.core.exceptions import InsufficientMarketData
from arbscan.services.venues import VenueQuote, VenueRegistry

logger = logging.getLogger(__name__)

# An arbitrage needs somewhere to buy and somewhere else to sell
MIN_VENUES = 2


class QuoteFetcher:
    """Fetches one venue's last traded price, bounded by a timeout."""

    def __init__(
        self,
        registry: VenueRegistry,
        timeout_sec: Optional[float] = None,
        quote_currency: Optional[str] = None,
    ):
        self.registry = registry
        self.timeout_sec = timeout_sec if timeout_sec is not None else settings.QUOTE_TIMEOUT_SEC
        self.quote_currency = quote_currency or settings.QUOTE_CURRENCY

    def market_symbol(self, symbol: str) -> str:
        """Market symbol for a coin: BTC -> BTC/USDT."""
        return f"{symbol}/{self.quote_currency}"

    async def fetch_quote(self, venue_id: str, symbol: str) -> VenueQuote:
        """
        Fetch the last traded price of `symbol` on one venue.

        Never raises: timeouts and lookup errors come back as an ERROR quote.
        """
        if venue_id not in self.registry:
            logger.warning("%s: venue not registered", venue_id)
            return VenueQuote.failure(venue_id, "not registered")

        venue = self.registry.get(venue_id)
        market = self.market_symbol(symbol)

        try:
            last = await asyncio.wait_for(
                venue.fetch_last_price(market), timeout=self.timeout_sec
            )
        except asyncio.TimeoutError:
            logger.warning(
                "%s %s: no price within %.1fs", venue_id, market, self.timeout_sec
            )
            return VenueQuote.failure(venue_id, "timeout")
        except (ccxt.NetworkError, ccxt.ExchangeError) as e:
            logger.warning("%s %s: %s: %s", venue_id, market, type(e).__name__, e)
            return VenueQuote.failure(venue_id, type(e).__name__)
        except Exception as e:
            logger.warning(
                "%s %s: unexpected lookup error %s: %s",
                venue_id,
                market,
                type(e).__name__,
                e,
            )
            return VenueQuote.failure(venue_id, type(e).__name__)

        price = _to_price(last)
        if price is None:
            logger.warning("%s %s: no usable last price (%r)", venue_id, market, last)
            return VenueQuote.failure(venue_id, "no price")

        logger.debug("%s %s: last=%s", venue_id, market, price)
        return VenueQuote.success(venue_id, price)


class QuoteScanner:
    """Fans out QuoteFetcher calls across venues and keeps the successes."""

    def __init__(self, fetcher: QuoteFetcher):
        self.fetcher = fetcher

    async def scan_all(
        self, symbol: str, venues: Optional[Iterable[str]] = None
    ) -> list[VenueQuote]:
        """
        Fetch `symbol` from every venue concurrently.

        Returns the successful quotes, in venue order.
        Raises InsufficientMarketData when fewer than two venues succeed.
        """
        venue_ids = list(venues) if venues is not None else self.fetcher.registry.venue_ids
        scan_start = time.monotonic()

        results = await asyncio.gather(
            *(self.fetcher.fetch_quote(venue_id, symbol) for venue_id in venue_ids)
        )
        valid = [q for q in results if q.ok]

        logger.info(
            "Scan %s: %d/%d venues priced in %.2fs (failed: %s)",
            symbol,
            len(valid),
            len(results),
            time.monotonic() - scan_start,
            ", ".join(f"{q.venue_id}={q.error}" for q in results if not q.ok) or "none",
        )

        if len(valid) < MIN_VENUES:
            raise InsufficientMarketData()

        return valid


def _to_price(value) -> Optional[Decimal]:
    """Convert a ticker price to a positive Decimal, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not price.is_finite() or price <= 0:
        return None
    return price
