"""MongoDB stop repository adapter."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from wayline.adapters.mongo.constants import FEEDS_COLLECTION, STOPS_COLLECTION
from wayline.adapters.mongo.document_parser import parse_stop
from wayline.domain.ports.stop_repository import StopRepository

if TYPE_CHECKING:
    from bson import ObjectId
    from pymongo.asynchronous.database import AsyncDatabase

    from wayline.domain.models.geo_query import GeoQuery
    from wayline.domain.models.raw_stop import RawStop

logger = logging.getLogger(__name__)


class MongoStopRepository(StopRepository):
    """Stop lookups on the ``stops`` collection's 2dsphere ``location`` index."""

    def __init__(self, database: AsyncDatabase) -> None:
        """Initialize with a pymongo async database handle."""
        self._stops = database[STOPS_COLLECTION]
        self._feeds = database[FEEDS_COLLECTION]

    @staticmethod
    def build_near_filter(query: GeoQuery) -> dict[str, Any]:
        """Build the ``$near`` filter for a query.

        Only parent stations and stops without a parent are returned, so
        platforms of one station do not show up as separate stops.
        """
        near_filter: dict[str, Any] = {
            "location": {
                "$near": {
                    "$geometry": {
                        "type": "Point",
                        "coordinates": [query.longitude, query.latitude],
                    },
                    "$maxDistance": query.radius_meters,
                }
            },
            "$or": [
                {"location_type": 1},
                {"parent_station": None},
                {"parent_station": ""},
            ],
        }
        if not query.include_bike_stations:
            near_filter["is_bike_station"] = {"$ne": True}
        return near_filter

    async def _load_feeds(self, feed_ids: set[ObjectId]) -> dict[Any, dict[str, Any]]:
        """Load feed documents by id."""
        if not feed_ids:
            return {}
        cursor = self._feeds.find({"_id": {"$in": list(feed_ids)}})
        return {feed["_id"]: feed async for feed in cursor}

    async def find_stops_near(self, query: GeoQuery, limit: int = 30) -> list[RawStop]:
        """Find stops within the query radius, nearest first."""
        cursor = self._stops.find(self.build_near_filter(query)).limit(limit)
        documents = await cursor.to_list(length=limit)

        feeds = await self._load_feeds({doc["feed_id"] for doc in documents if "feed_id" in doc})
        stops = [parse_stop(doc, feeds.get(doc.get("feed_id"))) for doc in documents]
        logger.debug(f"Geo store returned {len(stops)} stops within {query.radius_meters}m")
        return stops

    async def find_stop(self, feed_onestop_id: str, stop_id: str) -> RawStop | None:
        """Find a single stop of a feed."""
        feed = await self._feeds.find_one({"onestop_id": feed_onestop_id})
        if feed is None:
            return None

        document = await self._stops.find_one({"stop_id": stop_id, "feed_id": feed["_id"]})
        if document is None:
            return None
        return parse_stop(document, feed)
