"""Departure query service port."""

from typing import Protocol

from wayline.domain.models.departure_lookup import StopDepartures


class DepartureQueryService(Protocol):
    """Port for retrieving the departure board of a stop."""

    async def get_departures(self, feed_onestop_id: str, stop_id: str) -> StopDepartures:
        """Get categorized departures for a stop."""
        ...
