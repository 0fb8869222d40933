"""
Arbitrage profit calculator.

Round trip: local currency -> USDT -> coin (cheapest venue) ->
transfer -> USDT (dearest venue) -> local currency.

Handles:
- Currency conversion (local -> USDT and back)
- Fee calculation (forex + crypto + currency-specific exit fee)
- Net profit estimation in USDT and local currency
- ROI calculation
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from arbscan.core.exceptions import InsufficientMarketData
from arbscan.services.arbitrage.converter import RateTable, rate_for
from arbscan.services.arbitrage.fees import FeeSchedule, fee_schedule
from arbscan.services.venues import VenueQuote

logger = logging.getLogger(__name__)

_HUNDRED = Decimal("100")


@dataclass(frozen=True)
class ArbitrageResult:
    """Best buy/sell pair and the projected outcome of trading it."""

    buy_venue: str
    sell_venue: str
    buy_price: Decimal  # USDT per coin
    sell_price: Decimal
    gross_gap_pct: Decimal  # Before fees

    stable_in: Decimal  # USDT after the entry forex fee
    stable_out: Decimal  # USDT after selling, net of crypto fees
    net_profit_stable: Decimal

    final_local: Decimal  # Local currency after the exit fee
    net_profit_local: Decimal
    roi_pct: Decimal

    exit_fee_rate: Decimal  # Fraction, forex fee + extra
    extra_exit_fee_pct: Decimal  # Percent, 0 when none applies


def select_buy_sell(quotes: Iterable[VenueQuote]) -> tuple[VenueQuote, VenueQuote]:
    """
    Pick (cheapest, dearest) among successful quotes.

    Ties on price go to the lexicographically smallest venue id, on both sides.
    Raises InsufficientMarketData with fewer than two candidates.
    """
    candidates = [q for q in quotes if q.ok and q.price is not None]
    if len(candidates) < 2:
        raise InsufficientMarketData()

    buy = min(candidates, key=lambda q: (q.price, q.venue_id))
    sell = min(candidates, key=lambda q: (-q.price, q.venue_id))
    return buy, sell


class ArbitrageCalculator:
    """
    Computes the projected profit of a cross-venue round trip.

    Usage:
        calc = ArbitrageCalculator()
        result = calc.compute_arbitrage(
            quotes, principal_local=Decimal("100000"), local_currency="INR",
            rates={"INR": Decimal("83.50")}, forex_fee_pct=Decimal("2.5"),
        )
    """

    def __init__(self, fees: Optional[FeeSchedule] = None):
        self.fees = fees or fee_schedule

    def compute_arbitrage(
        self,
        quotes: Iterable[VenueQuote],
        principal_local: Decimal,
        local_currency: str,
        rates: RateTable,
        forex_fee_pct: Decimal,
    ) -> ArbitrageResult:
        """
        Simulate buying on the cheapest venue and selling on the dearest.

        Args:
            quotes: Venue quotes; only successful ones are considered
            principal_local: Investment in local currency
            local_currency: ISO code of the investment currency
            rates: Currency -> USD rate table; missing currency counts as 1
            forex_fee_pct: Forex fee charged on entry and exit, percent

        Returns:
            ArbitrageResult (profit may be negative)
        """
        principal_local = Decimal(principal_local)
        forex_fee_pct = Decimal(forex_fee_pct)

        buy, sell = select_buy_sell(quotes)
        usd_to_local = rate_for(rates, local_currency)

        # Local -> USDT
        stable_in = (principal_local / usd_to_local) * (
            1 - self.fees.forex_fee_rate(forex_fee_pct)
        )

        # USDT -> coin -> USDT
        stable_out = (
            (stable_in / buy.price) * sell.price * (1 - self.fees.crypto_fee_rate)
        )
        net_profit_stable = stable_out - stable_in

        # USDT -> local
        exit_fee_rate = self.fees.exit_fee_rate(local_currency, forex_fee_pct)
        final_local = stable_out * usd_to_local * (1 - exit_fee_rate)
        net_profit_local = final_local - principal_local

        roi_pct = net_profit_local / principal_local * _HUNDRED
        gross_gap_pct = (sell.price - buy.price) / buy.price * _HUNDRED

        logger.debug(
            "Buy %s @ %s, sell %s @ %s: gap %.2f%%, net %.2f %s",
            buy.venue_id,
            buy.price,
            sell.venue_id,
            sell.price,
            gross_gap_pct,
            net_profit_local,
            local_currency,
        )

        return ArbitrageResult(
            buy_venue=buy.venue_id,
            sell_venue=sell.venue_id,
            buy_price=buy.price,
            sell_price=sell.price,
            gross_gap_pct=gross_gap_pct,
            stable_in=stable_in,
            stable_out=stable_out,
            net_profit_stable=net_profit_stable,
            final_local=final_local,
            net_profit_local=net_profit_local,
            roi_pct=roi_pct,
            exit_fee_rate=exit_fee_rate,
            extra_exit_fee_pct=self.fees.extra_exit_fee_for(local_currency),
        )


# Singleton instance
arbitrage_calculator = ArbitrageCalculator()
