"""
Venue registry.

Holds the venue clients for the lifetime of the app. Built once at startup
and passed to whatever needs it; tests build their own with fake venues.
"""

import logging
from collections.abc import Iterable, Iterator

from arbscan.services.venues.base import BaseVenue
from arbscan.services.venues.ccxt_venue import CcxtVenue

logger = logging.getLogger(__name__)


class VenueRegistry:
    """Ordered mapping of venue id -> venue client."""

    def __init__(self, venues: Iterable[BaseVenue] = ()):
        self._venues: dict[str, BaseVenue] = {}
        for venue in venues:
            self.register(venue)

    def register(self, venue: BaseVenue) -> None:
        if venue.venue_id in self._venues:
            raise ValueError(f"Venue already registered: {venue.venue_id}")
        self._venues[venue.venue_id] = venue

    def get(self, venue_id: str) -> BaseVenue:
        try:
            return self._venues[venue_id]
        except KeyError:
            raise KeyError(f"Venue not registered: {venue_id}") from None

    @property
    def venue_ids(self) -> list[str]:
        return list(self._venues)

    def __contains__(self, venue_id: object) -> bool:
        return venue_id in self._venues

    def __iter__(self) -> Iterator[BaseVenue]:
        return iter(self._venues.values())

    def __len__(self) -> int:
        return len(self._venues)

    async def close(self) -> None:
        """Close every venue client."""
        for venue in self._venues.values():
            await venue.close()
        logger.info("Closed %d venue clients", len(self._venues))


def build_ccxt_registry(venue_ids: Iterable[str]) -> VenueRegistry:
    """
    Create one ccxt client per venue id.

    Ids ccxt does not know are skipped with a warning.
    """
    registry = VenueRegistry()
    for venue_id in venue_ids:
        try:
            registry.register(CcxtVenue.create(venue_id))
        except ValueError as e:
            logger.warning("Skipping venue: %s", e)

    logger.info(
        "Venue registry initialized: %d venues (%s)",
        len(registry),
        ", ".join(registry.venue_ids),
    )
    return registry
