"""
Shapes an ArbitrageResult into the API report.
"""

from collections.abc import Iterable
from decimal import Decimal
from typing import Optional

from arbscan.core.config import settings
from arbscan.schemas.arbitrage import (
    ArbitrageDeal,
    ArbitrageReport,
    InputSummary,
    ProfitLossReport,
    ReportConfig,
    VenuePrice,
)
from arbscan.services.arbitrage import ArbitrageResult
from arbscan.services.venues import VenueQuote


def build_report(
    result: ArbitrageResult,
    symbol: str,
    principal_local: Decimal,
    local_currency: str,
    forex_fee_pct: Decimal,
    quotes: Iterable[VenueQuote] = (),
    quote_currency: Optional[str] = None,
) -> ArbitrageReport:
    """Build the response body for one arbitrage request."""
    stable = quote_currency or settings.QUOTE_CURRENCY
    investment = f"{_plain(principal_local)} {local_currency}"
    fee = f"{_plain(forex_fee_pct)}%"

    return ArbitrageReport(
        config=ReportConfig(
            coin=symbol,
            investment=investment,
            applied_forex_fee=fee,
        ),
        input_summary=InputSummary(
            initial_investment=investment,
            converted_to_usdt=f"{result.stable_in:.2f} {stable}",
        ),
        arbitrage_deal=ArbitrageDeal(
            route=f"Buy on {result.buy_venue.upper()} ➔ Sell on {result.sell_venue.upper()}",
            buy_price=f"${_plain(result.buy_price)}",
            sell_price=f"${_plain(result.sell_price)}",
            gross_gap=f"{result.gross_gap_pct:.2f}%",
            venues_scanned=[
                VenuePrice(venue=q.venue_id, price=float(q.price))
                for q in quotes
                if q.ok
            ],
        ),
        profit_loss_report=ProfitLossReport(
            net_usdt_profit=f"{result.net_profit_stable:.2f} {stable}",
            net_local_profit=f"{result.net_profit_local:.2f} {local_currency}",
            roi_percentage=f"{result.roi_pct:.2f}%",
        ),
        execution_checklist=_checklist(result, stable, fee),
    )


def _checklist(result: ArbitrageResult, stable: str, fee: str) -> list[str]:
    if result.extra_exit_fee_pct > 0:
        note = (
            f"Note: {_plain(result.extra_exit_fee_pct)}% TDS is included "
            "in local profit calculation."
        )
    else:
        note = "Note: Standard exit fees applied."

    return [
        f"1. Buy {stable} using your local bank (Est. {fee} fee applied)",
        f"2. Transfer {stable} to {result.buy_venue}",
        f"3. Execute trade and transfer to {result.sell_venue}",
        "4. Convert back to local currency and withdraw",
        note,
    ]


def _plain(value: Decimal) -> str:
    """Decimal without exponent or trailing zeros: 100000.0 -> '100000'."""
    return f"{Decimal(value).normalize():f}"
