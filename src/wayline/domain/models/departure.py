"""Departure domain models."""

from dataclasses import dataclass

from wayline.domain.models.route_ref import RouteRef


@dataclass(frozen=True)
class RawDeparture:
    """A departure entry as returned by an upstream departure source.

    ``departure_time`` is a GTFS clock time ("HH:MM:SS") that may exceed 24h
    for trips running past midnight.
    """

    departure_time: str
    trip_id: str
    route: RouteRef
    headsign: str
    is_realtime: bool
    arrival_time: str = ""
    stop_sequence: int = 0
    service_date: str = ""
    schedule_relationship: str = "STATIC"


@dataclass(frozen=True)
class Departure:
    """A departure placed on the timeline relative to a reference time."""

    departure_time: str
    trip_id: str
    route: RouteRef
    headsign: str
    minutes_from_now: float
    is_realtime: bool
    arrival_time: str = ""
    stop_sequence: int = 0
    service_date: str = ""
    schedule_relationship: str = "STATIC"

    @property
    def identity(self) -> tuple[str, str]:
        """Key used to recognise the same departure across fetches."""
        return (self.trip_id, self.departure_time)
