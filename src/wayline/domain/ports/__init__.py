"""Ports (interfaces) for the ports-and-adapters architecture."""

from wayline.domain.ports.departure_query_service import DepartureQueryService
from wayline.domain.ports.departure_source import DepartureSource
from wayline.domain.ports.place_query_service import PlaceQueryService
from wayline.domain.ports.provider_registry import ProviderRegistry
from wayline.domain.ports.route_line_query_service import RouteLineQueryService
from wayline.domain.ports.route_repository import RouteRepository
from wayline.domain.ports.stop_repository import StopRepository

__all__ = [
    "DepartureQueryService",
    "DepartureSource",
    "PlaceQueryService",
    "ProviderRegistry",
    "RouteLineQueryService",
    "RouteRepository",
    "StopRepository",
]
