"""Protocol for departure caching."""

from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Protocol

from wayline.domain.models.departure import RawDeparture
from wayline.domain.models.departure_key import DepartureKey
from wayline.domain.models.departure_lookup import DepartureLookup

DepartureFetcher = Callable[[DepartureKey, int], Awaitable[list[RawDeparture]]]


class DepartureCacheProtocol(Protocol):
    """Protocol for a time-aware departure cache keyed by (feed, stop)."""

    async def get_departures(
        self,
        key: DepartureKey,
        fetcher: DepartureFetcher,
        now: datetime | None = None,
    ) -> DepartureLookup:
        """Get categorized departures, fetching through ``fetcher`` when needed.

        Args:
            key: The (feed, stop) pair.
            fetcher: Called with the key and a window limit on cache miss.
            now: Reference time. Defaults to the cache's clock.

        Returns:
            Departures bucketed into past, upcoming and later.
        """
        ...

    async def evict_expired(self, now: datetime | None = None) -> int:
        """Remove entries past their TTL.

        Returns:
            Number of evicted entries.
        """
        ...

    def __len__(self) -> int:
        """Number of cached keys."""
        ...
