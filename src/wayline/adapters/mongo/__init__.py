"""MongoDB geo store adapters."""

from wayline.adapters.mongo.mongo_route_repository import MongoRouteRepository
from wayline.adapters.mongo.mongo_stop_repository import MongoStopRepository

__all__ = ["MongoRouteRepository", "MongoStopRepository"]
