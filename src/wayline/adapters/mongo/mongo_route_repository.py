"""MongoDB route repository adapter."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import PyMongoError

from wayline.adapters.mongo.constants import (
    FEEDS_COLLECTION,
    ROUTE_STOPS_COLLECTION,
    ROUTES_COLLECTION,
)
from wayline.adapters.mongo.document_parser import parse_geometry, parse_route
from wayline.domain.errors import ProviderDataError
from wayline.domain.models.route_line import RouteLine
from wayline.domain.ports.route_repository import RouteRepository

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pymongo.asynchronous.database import AsyncDatabase

    from wayline.domain.models.raw_stop import RawStop
    from wayline.domain.models.route_ref import RouteRef

logger = logging.getLogger(__name__)


class MongoRouteRepository(RouteRepository):
    """Route data from the ``routes`` collection.

    Routes serving a stop are read through the ``routestops`` join collection.
    """

    def __init__(self, database: AsyncDatabase) -> None:
        """Initialize with a pymongo async database handle."""
        self._route_stops = database[ROUTE_STOPS_COLLECTION]
        self._routes = database[ROUTES_COLLECTION]
        self._feeds = database[FEEDS_COLLECTION]

    async def _feed_onestop_ids(self, feed_ids: set[Any]) -> dict[Any, str]:
        if not feed_ids:
            return {}
        cursor = self._feeds.find({"_id": {"$in": list(feed_ids)}}, {"onestop_id": 1})
        return {feed["_id"]: feed.get("onestop_id", "") async for feed in cursor}

    async def find_routes_for_stop(self, stop: RawStop) -> list[RouteRef]:
        """Get the routes serving a stop, in join-collection order.

        Raises:
            ProviderDataError: If the stored data cannot be read.
        """
        if not stop.record_id:
            return []
        try:
            stop_object_id = ObjectId(stop.record_id)
        except InvalidId as e:
            raise ProviderDataError(stop.provider_id, f"invalid stop record id: {e}") from e

        try:
            links = await self._route_stops.find({"stop_id": stop_object_id}).to_list(length=None)
            route_ids = [link["route_id"] for link in links if "route_id" in link]
            if not route_ids:
                return []

            routes_by_id = {
                route["_id"]: route
                async for route in self._routes.find({"_id": {"$in": route_ids}})
            }
            feed_ids = {route.get("feed_id") for route in routes_by_id.values()}
            onestop_ids = await self._feed_onestop_ids(feed_ids - {None})
        except PyMongoError as e:
            logger.error(f"Failed to read routes for stop {stop.stop_id}: {e}")
            raise ProviderDataError(stop.provider_id, f"route lookup failed: {e}") from e

        routes: list[RouteRef] = []
        for route_id in route_ids:
            document = routes_by_id.get(route_id)
            if document is not None:
                routes.append(parse_route(document, onestop_ids.get(document.get("feed_id"), "")))
        return routes

    async def find_route_lines(self, feed_onestop_ids: Iterable[str]) -> list[RouteLine]:
        """Get routes with stored geometry for the given feeds.

        Routes whose geometry cannot be read are skipped.
        """
        onestop_ids = list(feed_onestop_ids)
        if not onestop_ids:
            return []

        feeds = {
            feed["_id"]: feed
            async for feed in self._feeds.find({"onestop_id": {"$in": onestop_ids}})
        }
        if not feeds:
            return []

        cursor = self._routes.find(
            {"feed_id": {"$in": list(feeds)}, "geometry": {"$ne": None}}
        )
        lines: list[RouteLine] = []
        skipped = 0
        async for document in cursor:
            geometry = parse_geometry(document.get("geometry"))
            if geometry is None:
                skipped += 1
                continue
            feed = feeds[document["feed_id"]]
            lines.append(
                RouteLine(
                    route=parse_route(document, feed.get("onestop_id", "")),
                    geometry=geometry,
                    feed_name=feed.get("name", ""),
                )
            )

        if skipped:
            logger.warning(f"Skipped {skipped} routes with unreadable geometry")
        return lines
