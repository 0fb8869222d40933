"""
Arbitrage calculation and profit estimation utilities.
"""

from arbscan.services.arbitrage.calculator import (
    ArbitrageCalculator,
    ArbitrageResult,
    arbitrage_calculator,
    select_buy_sell,
)
from arbscan.services.arbitrage.converter import ForexRateProvider, RateTable, rate_for
from arbscan.services.arbitrage.fees import CRYPTO_FEE_RATE, FeeSchedule, fee_schedule

__all__ = [
    "ArbitrageCalculator",
    "ArbitrageResult",
    "arbitrage_calculator",
    "select_buy_sell",
    "ForexRateProvider",
    "RateTable",
    "rate_for",
    "CRYPTO_FEE_RATE",
    "FeeSchedule",
    "fee_schedule",
]
