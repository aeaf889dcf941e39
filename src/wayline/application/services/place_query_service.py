"""Service for finding merged places around a point."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from wayline.application.services.stop_merge_engine import (
    MergeGroups,
    StopMergeEngine,
    unique_routes,
)
from wayline.domain.errors import ProviderDataError

if TYPE_CHECKING:
    from wayline.domain.models.geo_query import GeoQuery
    from wayline.domain.models.place import Place
    from wayline.domain.models.raw_stop import RawStop
    from wayline.domain.models.route_ref import RouteRef
    from wayline.domain.ports import ProviderRegistry, RouteRepository, StopRepository

logger = logging.getLogger(__name__)


class PlaceQueryService:
    """Queries the geo store and merges the result into places."""

    def __init__(
        self,
        stop_repository: StopRepository,
        route_repository: RouteRepository,
        provider_registry: ProviderRegistry,
        merge_engine: StopMergeEngine | None = None,
        page_size: int = 30,
    ) -> None:
        """Initialize the service.

        Args:
            stop_repository: Spatial stop lookups.
            route_repository: Route associations per stop.
            provider_registry: Provider configuration, source of merge groups.
            merge_engine: Engine used to cluster stops.
            page_size: Maximum number of stops taken from the geo store.
        """
        self._stop_repository = stop_repository
        self._route_repository = route_repository
        self._provider_registry = provider_registry
        self._merge_engine = merge_engine or StopMergeEngine()
        self._page_size = page_size

    async def find_places(self, query: GeoQuery) -> list[Place]:
        """Find places within the query radius, nearest first."""
        stops = await self._stop_repository.find_stops_near(query, limit=self._page_size)
        stops_with_routes = await self._attach_routes(stops)

        merge_groups = MergeGroups.from_providers(self._provider_registry.get_providers())
        places = self._merge_engine.merge(stops_with_routes, merge_groups, origin=query.origin)

        logger.debug(
            f"Found {len(places)} places for ({query.latitude}, {query.longitude}) "
            f"within {query.radius_meters}m"
        )
        return places

    async def _routes_for(self, stop: RawStop) -> list[RouteRef]:
        """Get routes for a stop. Bike stations have none to look up."""
        if stop.is_bike_station:
            return []
        return await self._route_repository.find_routes_for_stop(stop)

    async def _attach_routes(self, stops: list[RawStop]) -> list[RawStop]:
        """Attach routes to every stop, dropping providers whose data cannot be read.

        A provider failing for any of its stops contributes no stops at all,
        while the rest of the query proceeds.
        """
        results = await asyncio.gather(
            *(self._routes_for(stop) for stop in stops), return_exceptions=True
        )

        failed_providers: set[str] = set()
        for stop, result in zip(stops, results, strict=True):
            if isinstance(result, ProviderDataError):
                failed_providers.add(stop.provider_id)
            elif isinstance(result, BaseException):
                raise result

        for provider_id in sorted(failed_providers):
            logger.warning(
                f"Route data for provider {provider_id} unavailable, "
                f"omitting its stops from the result"
            )

        return [
            replace(stop, routes=unique_routes(result))
            for stop, result in zip(stops, results, strict=True)
            if stop.provider_id not in failed_providers and not isinstance(result, BaseException)
        ]
