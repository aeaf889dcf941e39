"""Place domain model."""

from dataclasses import dataclass

from wayline.domain.models.route_ref import RouteRef


@dataclass(frozen=True)
class Place:
    """Client-facing representation of one or more physical stops.

    A combined place is built from stops of several mergeable providers that
    share a normalized name; its location and name come from the first member.
    """

    stop_id: str
    name: str
    latitude: float
    longitude: float
    provider_id: str
    routes: tuple[RouteRef, ...]
    distance_meters: int
    combined: bool = False
    contributing_providers: tuple[str, ...] = ()
    provider_name: str = ""
    is_bike_station: bool = False
    bike_capacity: int | None = None
    bike_provider_type: str | None = None
    bike_provider_id: str | None = None

    @property
    def coordinates(self) -> tuple[float, float]:
        """GeoJSON ordered coordinates (longitude, latitude)."""
        return (self.longitude, self.latitude)
