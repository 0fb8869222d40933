"""
Fee schedule for the fiat -> USDT -> crypto -> USDT -> fiat round trip.

Includes:
- Forex fee on entry and exit (caller supplied, percent)
- Combined crypto trading + transfer fee (fixed 0.6%)
- Extra exit fee per local currency (e.g. 1% TDS on INR)
"""

from decimal import Decimal
from typing import Optional

from arbscan.core.config import settings

# Buy taker fee + withdrawal + sell taker fee, as a fraction of the position
CRYPTO_FEE_RATE = Decimal("0.006")

_HUNDRED = Decimal("100")


class FeeSchedule:
    """Turns fee percentages into the rates applied by the calculator."""

    def __init__(self, extra_exit_fee_pct: Optional[dict[str, float]] = None):
        table = extra_exit_fee_pct if extra_exit_fee_pct is not None else settings.EXTRA_EXIT_FEE_PCT
        self.extra_exit_fee_pct: dict[str, Decimal] = {
            code.upper(): Decimal(str(pct)) for code, pct in table.items()
        }
        self.crypto_fee_rate = CRYPTO_FEE_RATE

    def forex_fee_rate(self, forex_fee_pct: Decimal) -> Decimal:
        """2.5 -> 0.025."""
        return Decimal(forex_fee_pct) / _HUNDRED

    def extra_exit_fee_for(self, currency: str) -> Decimal:
        """Extra exit fee percent for a currency, 0 when none applies."""
        return self.extra_exit_fee_pct.get(currency.upper(), Decimal("0"))

    def exit_fee_rate(self, currency: str, forex_fee_pct: Decimal) -> Decimal:
        """Forex fee plus any currency-specific extra, as a fraction."""
        return self.forex_fee_rate(forex_fee_pct) + self.extra_exit_fee_for(currency) / _HUNDRED


# Singleton instance
fee_schedule = FeeSchedule()
