from pydantic import BaseModel


class ReportConfig(BaseModel):
    coin: str
    investment: str  # "100000 INR"
    applied_forex_fee: str  # "2.5%"


class InputSummary(BaseModel):
    initial_investment: str
    converted_to_usdt: str  # "1167.66 USDT"


class VenuePrice(BaseModel):
    venue: str
    price: float


class ArbitrageDeal(BaseModel):
    route: str  # "Buy on BINANCE ➔ Sell on OKX"
    buy_price: str  # "$64000.5"
    sell_price: str
    gross_gap: str  # "0.42%"
    venues_scanned: list[VenuePrice] = []


class ProfitLossReport(BaseModel):
    net_usdt_profit: str
    net_local_profit: str
    roi_percentage: str


class ArbitrageReport(BaseModel):
    config: ReportConfig
    input_summary: InputSummary
    arbitrage_deal: ArbitrageDeal
    profit_loss_report: ProfitLossReport
    execution_checklist: list[str]


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    message: str
    timestamp: str
