"""
Base classes and types for exchange venues.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional


class QuoteStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class VenueQuote:
    """Outcome of one last-price lookup on one venue."""

    venue_id: str  # "binance", "okx", ...
    status: QuoteStatus
    price: Optional[Decimal] = None  # Quote currency per unit; None on error
    error: Optional[str] = None  # Short reason, for logs only

    @property
    def ok(self) -> bool:
        return self.status is QuoteStatus.SUCCESS

    @classmethod
    def success(cls, venue_id: str, price: Decimal) -> "VenueQuote":
        return cls(venue_id=venue_id, status=QuoteStatus.SUCCESS, price=price)

    @classmethod
    def failure(cls, venue_id: str, error: str) -> "VenueQuote":
        return cls(venue_id=venue_id, status=QuoteStatus.ERROR, error=error)


class BaseVenue(ABC):
    """Abstract base for anything that can report a last traded price."""

    venue_id: str = ""

    @abstractmethod
    async def fetch_last_price(self, symbol: str) -> Optional[float]:
        """
        Return the last traded price for a market symbol ("BTC/USDT").

        Raises the connector's network/exchange errors on failure.
        Returns None when the venue has the market but no last price.
        """
        ...

    async def close(self) -> None:
        """Release network resources. Override when the venue holds any."""
        return None
