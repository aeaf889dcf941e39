"""Route line query service port."""

from typing import Protocol

from wayline.domain.models.route_line import RouteLine


class RouteLineQueryService(Protocol):
    """Port for the route lines drawn on the map."""

    async def get_route_lines(self) -> list[RouteLine]:
        """Get route lines of the providers that show them."""
        ...
