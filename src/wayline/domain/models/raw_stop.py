"""Raw stop domain model."""

from dataclasses import dataclass

from wayline.domain.models.route_ref import RouteRef


@dataclass(frozen=True)
class RawStop:
    """A stop record as returned by the geo store for a single provider."""

    stop_id: str
    name: str
    latitude: float
    longitude: float
    provider_id: str  # Feed onestop id, e.g. "f-ezp8-metrovalencia"
    routes: tuple[RouteRef, ...] = ()
    provider_name: str = ""
    is_bike_station: bool = False
    bike_capacity: int | None = None
    bike_provider_type: str | None = None
    bike_provider_id: str | None = None
    record_id: str | None = None  # Storage identifier used to look up route associations
