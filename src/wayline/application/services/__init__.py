"""Application services."""

from wayline.application.services.departure_cache import DepartureCache
from wayline.application.services.departure_service import DepartureService
from wayline.application.services.place_query_service import PlaceQueryService
from wayline.application.services.route_line_service import RouteLineService
from wayline.application.services.stop_merge_engine import (
    MergeGroups,
    StopMergeEngine,
    normalize_stop_name,
)

__all__ = [
    "DepartureCache",
    "DepartureService",
    "MergeGroups",
    "PlaceQueryService",
    "RouteLineService",
    "StopMergeEngine",
    "normalize_stop_name",
]
