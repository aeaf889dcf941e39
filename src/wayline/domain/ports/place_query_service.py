"""Place query service port."""

from typing import Protocol

from wayline.domain.models.geo_query import GeoQuery
from wayline.domain.models.place import Place


class PlaceQueryService(Protocol):
    """Port for finding merged places around a point."""

    async def find_places(self, query: GeoQuery) -> list[Place]:
        """Find places near the query point."""
        ...
