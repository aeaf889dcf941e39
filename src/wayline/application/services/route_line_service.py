"""Service for the route lines drawn on the map."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wayline.domain.models.route_line import RouteLine
    from wayline.domain.ports import ProviderRegistry, RouteRepository

logger = logging.getLogger(__name__)


class RouteLineService:
    """Serves route geometries of providers configured with ``showlines``."""

    def __init__(
        self, route_repository: RouteRepository, provider_registry: ProviderRegistry
    ) -> None:
        self._route_repository = route_repository
        self._provider_registry = provider_registry

    async def get_route_lines(self) -> list[RouteLine]:
        """Get route lines, limited to providers that show lines."""
        shown = [
            provider.onestop_id
            for provider in self._provider_registry.get_providers()
            if provider.show_lines
        ]
        if not shown:
            logger.debug("No provider shows route lines")
            return []

        lines = await self._route_repository.find_route_lines(shown)
        allowed = set(shown)
        return [line for line in lines if line.route.provider_id in allowed]
