"""Departure lookup result domain models."""

from dataclasses import dataclass
from datetime import datetime

from wayline.domain.models.departure import Departure
from wayline.domain.models.raw_stop import RawStop


@dataclass(frozen=True)
class DepartureLookup:
    """Departures bucketed relative to the time of the lookup."""

    past: tuple[Departure, ...]
    upcoming: tuple[Departure, ...]
    later: tuple[Departure, ...]
    served_from_cache: bool
    server_time: datetime  # When the underlying data was fetched upstream
    expires_at: datetime
    stale: bool = False  # Upstream refresh failed and older data was served instead


@dataclass(frozen=True)
class StopDepartures:
    """Departure board of a stop, ready for presentation."""

    stop: RawStop
    lookup: DepartureLookup
    current_time: datetime
