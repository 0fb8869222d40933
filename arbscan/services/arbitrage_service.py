"""
Arbitrage service - coordinates one arbitrage request.

Workflow:
1. Validate and normalise the request (coin, amount, currency, forex fee)
2. Fetch forex rates (fallback table on failure)
3. Scan all venues for the coin's last price
4. Compute the best buy/sell round trip
5. Format the report
"""

import logging
import math
import re
from decimal import Decimal
from typing import Optional

from arbscan.core.exceptions import InvalidRequest
from arbscan.schemas.arbitrage import ArbitrageReport
from arbscan.services.arbitrage import ArbitrageCalculator, ForexRateProvider
from arbscan.services.report import build_report
from arbscan.services.scanner import QuoteScanner

logger = logging.getLogger(__name__)

_SYMBOL_RE = re.compile(r"^[A-Z0-9]{1,15}$")
_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")


class ArbitrageService:
    """
    Runs the rates -> scan -> calculate -> report pipeline.

    Collaborators are injected so tests can swap in fakes.
    """

    def __init__(
        self,
        scanner: QuoteScanner,
        rate_provider: ForexRateProvider,
        calculator: Optional[ArbitrageCalculator] = None,
    ):
        self.scanner = scanner
        self.rate_provider = rate_provider
        self.calculator = calculator or ArbitrageCalculator()

    async def analyze(
        self,
        symbol: str,
        amount: float,
        currency: str,
        forex_fee_pct: float,
    ) -> ArbitrageReport:
        """
        Compute the arbitrage report for one coin.

        Raises:
            InvalidRequest: unusable coin, amount, currency or fee
            InsufficientMarketData: fewer than two venues priced the coin
        """
        symbol = symbol.strip().upper()
        currency = currency.strip().upper()
        principal = _validate(symbol, amount, currency, forex_fee_pct)
        _check_exit_fee(forex_fee_pct, self.calculator.fees.extra_exit_fee_for(currency))
        fee_pct = Decimal(str(forex_fee_pct))

        rates = await self.rate_provider.get_rates()
        quotes = await self.scanner.scan_all(symbol)

        result = self.calculator.compute_arbitrage(
            quotes,
            principal_local=principal,
            local_currency=currency,
            rates=rates,
            forex_fee_pct=fee_pct,
        )

        logger.info(
            "%s: buy %s @ %s, sell %s @ %s, net %.2f %s (ROI %.2f%%)",
            symbol,
            result.buy_venue,
            result.buy_price,
            result.sell_venue,
            result.sell_price,
            result.net_profit_local,
            currency,
            result.roi_pct,
        )

        return build_report(
            result,
            symbol=symbol,
            principal_local=principal,
            local_currency=currency,
            forex_fee_pct=fee_pct,
            quotes=quotes,
            quote_currency=self.scanner.fetcher.quote_currency,
        )


def _validate(symbol: str, amount: float, currency: str, forex_fee_pct: float) -> Decimal:
    """Check request parameters; return the principal as Decimal."""
    if not _SYMBOL_RE.match(symbol):
        raise InvalidRequest(f"Invalid coin symbol: {symbol!r}")
    if not _CURRENCY_RE.match(currency):
        raise InvalidRequest(f"Invalid currency code: {currency!r}")
    if not math.isfinite(amount) or amount <= 0:
        raise InvalidRequest("amount must be a positive number")
    if not math.isfinite(forex_fee_pct) or not 0 <= forex_fee_pct < 100:
        raise InvalidRequest("forex_fee must be between 0 and 100")
    return Decimal(str(amount))


def _check_exit_fee(forex_fee_pct: float, extra_exit_fee_pct: Decimal) -> None:
    """The exit leg must leave something: forex fee + extra exit fee < 100%."""
    if Decimal(str(forex_fee_pct)) + extra_exit_fee_pct >= 100:
        raise InvalidRequest(
            f"forex_fee plus the {extra_exit_fee_pct}% exit fee must stay below 100"
        )
