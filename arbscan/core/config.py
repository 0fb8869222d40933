from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "ArbScan API"
    DEBUG: bool = False

    # Venues (ccxt exchange ids), queried in parallel on every request
    VENUE_IDS: list[str] = ["binance", "bybit", "okx", "kucoin", "gateio"]
    QUOTE_CURRENCY: str = "USDT"  # Stable unit every coin is priced in
    QUOTE_TIMEOUT_SEC: float = 10.0  # Per-venue ticker timeout

    # Forex
    FOREX_API_URL: str = "https://api.exchangerate-api.com/v4/latest/USD"
    FOREX_TIMEOUT_SEC: float = 10.0
    FALLBACK_RATES: dict[str, float] = {"INR": 83.50, "AED": 3.67, "USD": 1.0}

    # Extra exit fee (percent) on top of the forex fee, per local currency.
    # INR: 1% TDS withheld when cashing out crypto gains.
    EXTRA_EXIT_FEE_PCT: dict[str, float] = {"INR": 1.0}

    # Request defaults
    DEFAULT_AMOUNT: float = 100000.0
    DEFAULT_CURRENCY: str = "INR"
    DEFAULT_FOREX_FEE_PCT: float = 2.5

    # Rate limiting (per client, sliding window)
    RATE_LIMIT_MAX_REQUESTS: int = 50
    RATE_LIMIT_WINDOW_SEC: float = 60.0

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
