"""Domain models for Wayline."""

from wayline.domain.models.cached_departure_set import CachedDepartureSet
from wayline.domain.models.departure import Departure, RawDeparture
from wayline.domain.models.departure_key import DepartureKey
from wayline.domain.models.departure_lookup import DepartureLookup, StopDepartures
from wayline.domain.models.geo_query import GeoQuery
from wayline.domain.models.place import Place
from wayline.domain.models.provider_config import ProviderConfig
from wayline.domain.models.raw_stop import RawStop
from wayline.domain.models.route_line import RouteLine
from wayline.domain.models.route_ref import DEFAULT_ROUTE_COLOR, RouteRef

__all__ = [
    "DEFAULT_ROUTE_COLOR",
    "CachedDepartureSet",
    "Departure",
    "DepartureKey",
    "DepartureLookup",
    "GeoQuery",
    "Place",
    "ProviderConfig",
    "RawDeparture",
    "RawStop",
    "RouteLine",
    "RouteRef",
    "StopDepartures",
]
