"""
Venue registry: exchanges queried for last traded prices.

Default venues (ccxt ids): binance, bybit, okx, kucoin, gateio.
"""

from arbscan.services.venues.base import BaseVenue, QuoteStatus, VenueQuote
from arbscan.services.venues.ccxt_venue import CcxtVenue
from arbscan.services.venues.registry import VenueRegistry, build_ccxt_registry

__all__ = [
    "BaseVenue",
    "CcxtVenue",
    "QuoteStatus",
    "VenueQuote",
    "VenueRegistry",
    "build_ccxt_registry",
]
