"""Departure cache key domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DepartureKey:
    """Identifies the departures board of one stop within one feed."""

    feed_onestop_id: str
    stop_id: str

    def __str__(self) -> str:
        return f"{self.feed_onestop_id}:{self.stop_id}"
