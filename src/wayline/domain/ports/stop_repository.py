"""Stop repository port (geo store)."""

from typing import Protocol

from wayline.domain.models.geo_query import GeoQuery
from wayline.domain.models.raw_stop import RawStop


class StopRepository(Protocol):
    """Port for spatial stop lookups."""

    async def find_stops_near(self, query: GeoQuery, limit: int = 30) -> list[RawStop]:
        """Find stops within the query radius, nearest first.

        Returned stops carry no route associations.
        """
        ...

    async def find_stop(self, feed_onestop_id: str, stop_id: str) -> RawStop | None:
        """Find a single stop of a feed."""
        ...
