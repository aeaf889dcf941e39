"""Service for the departure board of a stop."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from wayline.domain.errors import InvalidQueryError, NotFoundError
from wayline.domain.models.departure_key import DepartureKey
from wayline.domain.models.departure_lookup import StopDepartures

if TYPE_CHECKING:
    from wayline.domain.contracts.clock import ClockProtocol
    from wayline.domain.contracts.departure_cache import DepartureCacheProtocol
    from wayline.domain.models.raw_stop import RawStop
    from wayline.domain.ports import DepartureSource, ProviderRegistry, StopRepository

logger = logging.getLogger(__name__)


class DepartureService:
    """Resolves a stop and serves its departures through the cache."""

    def __init__(
        self,
        stop_repository: StopRepository,
        provider_registry: ProviderRegistry,
        departure_source: DepartureSource,
        cache: DepartureCacheProtocol,
        clock: ClockProtocol,
    ) -> None:
        """Initialize the service.

        Args:
            stop_repository: Used to check the stop exists and to read its name.
            provider_registry: Used to check the feed is a configured provider.
            departure_source: Upstream departures, called by the cache on miss.
            cache: Departure cache.
            clock: Source of the current time.
        """
        self._stop_repository = stop_repository
        self._provider_registry = provider_registry
        self._departure_source = departure_source
        self._cache = cache
        self._clock = clock
        self._resolved_stops: dict[DepartureKey, RawStop] = {}

    async def get_departures(self, feed_onestop_id: str, stop_id: str) -> StopDepartures:
        """Get categorized departures for a stop.

        Raises:
            InvalidQueryError: If an identifier is missing.
            NotFoundError: If the provider or the stop is unknown.
            UpstreamUnavailableError: If departures cannot be fetched and none are cached.
        """
        if not feed_onestop_id or not stop_id:
            raise InvalidQueryError("stop_id and feed_onestop_id are required")

        if self._provider_registry.get_provider(feed_onestop_id) is None:
            raise NotFoundError(f"Provider not found: {feed_onestop_id}")

        key = DepartureKey(feed_onestop_id=feed_onestop_id, stop_id=stop_id)
        stop = await self._resolve_stop(key)

        now = self._clock.now()
        lookup = await self._cache.get_departures(
            key, self._departure_source.fetch_departures, now=now
        )
        return StopDepartures(stop=stop, lookup=lookup, current_time=now)

    async def _resolve_stop(self, key: DepartureKey) -> RawStop:
        """Look a stop up once; later requests for it skip the geo store."""
        stop = self._resolved_stops.get(key)
        if stop is not None:
            return stop

        stop = await self._stop_repository.find_stop(key.feed_onestop_id, key.stop_id)
        if stop is None:
            raise NotFoundError(f"Stop not found: {key}")
        self._resolved_stops[key] = stop
        return stop
