"""Route repository port."""

from collections.abc import Iterable
from typing import Protocol

from wayline.domain.models.raw_stop import RawStop
from wayline.domain.models.route_line import RouteLine
from wayline.domain.models.route_ref import RouteRef


class RouteRepository(Protocol):
    """Port for route data: routes serving a stop and drawable route lines."""

    async def find_routes_for_stop(self, stop: RawStop) -> list[RouteRef]:
        """Get the routes serving a stop.

        Raises:
            ProviderDataError: If the provider's route data cannot be read.
        """
        ...

    async def find_route_lines(self, feed_onestop_ids: Iterable[str]) -> list[RouteLine]:
        """Get routes with stored geometry belonging to the given feeds."""
        ...
