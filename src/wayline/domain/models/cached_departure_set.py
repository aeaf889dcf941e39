"""Cached departure set domain model."""

from dataclasses import dataclass
from datetime import datetime

from wayline.domain.models.departure import Departure
from wayline.domain.models.departure_key import DepartureKey


@dataclass(frozen=True)
class CachedDepartureSet:
    """Departures of one stop as categorized at fetch time.

    ``minutes_from_now`` of every departure is relative to
    ``server_time_at_fetch``. ``past`` is ordered most-recent-first,
    ``upcoming`` and ``later`` soonest-first.
    """

    key: DepartureKey
    server_time_at_fetch: datetime
    past: tuple[Departure, ...]
    upcoming: tuple[Departure, ...]
    later: tuple[Departure, ...]
    expires_at: datetime

    def all_departures(self) -> list[Departure]:
        """Return every cached departure, past first."""
        return [*self.past, *self.upcoming, *self.later]

    def is_expired(self, now: datetime) -> bool:
        """Check whether the entry has outlived its TTL."""
        return self.expires_at <= now
