from fastapi import APIRouter, Depends, Path, Query, Request

from arbscan.core.config import settings
from arbscan.schemas.arbitrage import ArbitrageReport, ErrorResponse
from arbscan.services.arbitrage_service import ArbitrageService

router = APIRouter(prefix="/arbitrage", tags=["arbitrage"])


def get_arbitrage_service(request: Request) -> ArbitrageService:
    """The service built at startup (see main.lifespan)."""
    return request.app.state.arbitrage_service


@router.get(
    "/{coin}",
    response_model=ArbitrageReport,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_arbitrage(
    coin: str = Path(..., description="Coin symbol, e.g. BTC"),
    amount: float = Query(settings.DEFAULT_AMOUNT, description="Investment in local currency"),
    currency: str = Query(settings.DEFAULT_CURRENCY, description="ISO code of the local currency"),
    forex_fee: float = Query(
        settings.DEFAULT_FOREX_FEE_PCT, description="Forex fee in percent, each way"
    ),
    service: ArbitrageService = Depends(get_arbitrage_service),
):
    """
    Best cross-venue arbitrage for a coin, priced in USDT.

    Example: /api/v1/arbitrage/BTC?amount=100000&currency=INR&forex_fee=2

    Buys on the cheapest venue and sells on the dearest, after converting
    the investment to USDT. Fees: forex on entry and exit, 0.6% crypto
    trading/transfer, plus any currency-specific exit fee (1% TDS for INR).
    """
    return await service.analyze(coin, amount, currency, forex_fee)
