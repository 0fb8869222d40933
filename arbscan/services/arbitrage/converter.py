"""
Forex rate provider for local currency <-> USD conversion.

Fetches live rates on every call (no caching) and falls back to a static
table when the rate service is unavailable.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import aiohttp

from arbscan.core.config import settings

logger = logging.getLogger(__name__)

# Currency code -> units of that currency per 1 USD
RateTable = dict[str, Decimal]


class ForexRateProvider:
    """
    Supplies USD exchange rates for local currencies.

    Usage:
        provider = ForexRateProvider()
        rates = await provider.get_rates()
        usd_to_inr = rate_for(rates, "INR")
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout_sec: Optional[float] = None,
        fallback_rates: Optional[dict[str, float]] = None,
    ):
        self.url = url or settings.FOREX_API_URL
        self.timeout_sec = timeout_sec if timeout_sec is not None else settings.FOREX_TIMEOUT_SEC
        self.fallback_rates = _to_rate_table(
            fallback_rates if fallback_rates is not None else settings.FALLBACK_RATES
        )

    async def get_rates(self) -> RateTable:
        """
        Fetch the current USD rate table.

        Never raises: any failure returns a copy of the fallback table.
        """
        try:
            data = await self._fetch_rates()
        except Exception as e:
            logger.warning("Forex rates unavailable (%s: %s), using fallback", type(e).__name__, e)
            return dict(self.fallback_rates)

        rates = _to_rate_table(data.get("rates") if isinstance(data, dict) else None)
        if not rates:
            logger.warning("Forex API: unexpected response format, using fallback")
            return dict(self.fallback_rates)

        rates["USD"] = Decimal("1")
        logger.debug("Fetched %d forex rates", len(rates))
        return rates

    async def _fetch_rates(self) -> Any:
        """GET the rate service and return its decoded JSON body."""
        timeout = aiohttp.ClientTimeout(total=self.timeout_sec)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(self.url) as resp:
                resp.raise_for_status()
                return await resp.json(content_type=None)


def rate_for(rates: RateTable, currency: str) -> Decimal:
    """Rate for a currency; unknown currencies are treated as USD (1)."""
    return rates.get(currency.upper(), Decimal("1"))


def _to_rate_table(raw: Any) -> RateTable:
    """Keep the positive numeric entries of a {code: rate} mapping."""
    if not isinstance(raw, dict):
        return {}

    table: RateTable = {}
    for code, value in raw.items():
        if not isinstance(code, str) or isinstance(value, bool):
            continue
        try:
            rate = Decimal(str(value))
        except (InvalidOperation, ValueError):
            continue
        if rate.is_finite() and rate > 0:
            table[code.upper()] = rate
    return table
