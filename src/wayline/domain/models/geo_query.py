"""Geographic query domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class GeoQuery:
    """All stops within ``radius_meters`` of a point."""

    latitude: float
    longitude: float
    radius_meters: int
    include_bike_stations: bool = True

    @property
    def origin(self) -> tuple[float, float]:
        """Query point as (latitude, longitude)."""
        return (self.latitude, self.longitude)
