"""
Errors surfaced to API callers.

Per-venue and forex failures never get here: they are absorbed where they
happen. Only request-level failures are raised as ArbitrageError.
"""


class ArbitrageError(Exception):
    """Base class for request-level failures."""

    status_code: int = 500


class InsufficientMarketData(ArbitrageError):
    """Fewer than two venues reported a usable price."""

    def __init__(self, message: str = "Not enough market data"):
        super().__init__(message)


class InvalidRequest(ArbitrageError):
    """Caller supplied an unusable amount, currency, fee or symbol."""

    status_code = 400
