"""Domain layer - core models, ports and errors."""

from wayline.domain.errors import (
    InvalidQueryError,
    NotFoundError,
    ProviderDataError,
    UpstreamUnavailableError,
    WaylineError,
)
from wayline.domain.models import (
    Departure,
    DepartureKey,
    GeoQuery,
    Place,
    RawStop,
    RouteRef,
)

__all__ = [
    "Departure",
    "DepartureKey",
    "GeoQuery",
    "InvalidQueryError",
    "NotFoundError",
    "Place",
    "ProviderDataError",
    "RawStop",
    "RouteRef",
    "UpstreamUnavailableError",
    "WaylineError",
]
