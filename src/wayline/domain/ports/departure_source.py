"""Departure source port."""

from typing import Protocol

from wayline.domain.models.departure import RawDeparture
from wayline.domain.models.departure_key import DepartureKey


class DepartureSource(Protocol):
    """Port for fetching upcoming departures of a stop from upstream."""

    async def fetch_departures(self, key: DepartureKey, window_limit: int) -> list[RawDeparture]:
        """Fetch at most ``window_limit`` departures, in upstream order.

        Raises:
            UpstreamUnavailableError: If the upstream call fails.
        """
        ...
