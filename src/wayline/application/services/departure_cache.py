"""Real-time departure cache with temporal re-categorization.

Cached departures are re-placed on the timeline at every read by subtracting
the time elapsed since the fetch, so repeated reads of the same key report
steadily decreasing minute counts without another upstream call. An entry is
refreshed when it has expired or when fewer than ``bucket_size`` departures
are still ahead; departures that have just become past are carried over into
the refreshed entry.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from wayline.application.services.departure_timing import build_departures
from wayline.domain.contracts.departure_cache import DepartureCacheProtocol
from wayline.domain.errors import UpstreamUnavailableError
from wayline.domain.models.cached_departure_set import CachedDepartureSet
from wayline.domain.models.departure_lookup import DepartureLookup

if TYPE_CHECKING:
    from wayline.domain.contracts.clock import ClockProtocol
    from wayline.domain.contracts.departure_cache import DepartureFetcher
    from wayline.domain.models.departure import Departure, RawDeparture
    from wayline.domain.models.departure_key import DepartureKey

logger = logging.getLogger(__name__)


class DepartureCache(DepartureCacheProtocol):
    """Process-wide departure cache keyed by (feed, stop)."""

    def __init__(
        self,
        clock: ClockProtocol,
        timezone: str = "Europe/Madrid",
        ttl_seconds: int = 2 * 60 * 60,
        bucket_size: int = 5,
        window_limit: int = 30,
        broadened_window_limit: int = 60,
        fetch_timeout_seconds: float = 15.0,
    ) -> None:
        """Initialize the cache.

        Args:
            clock: Source of the current time.
            timezone: Locale timezone of the GTFS clock times.
            ttl_seconds: Lifetime of an entry regardless of its contents.
            bucket_size: Size of each of the past, upcoming and later buckets.
            window_limit: Departures requested by the first upstream call.
            broadened_window_limit: Departures requested by the retry.
            fetch_timeout_seconds: Upper bound for a single upstream call.
        """
        self._clock = clock
        self._timezone = timezone
        self._ttl = timedelta(seconds=ttl_seconds)
        self._bucket_size = bucket_size
        self._window_limit = window_limit
        self._broadened_window_limit = broadened_window_limit
        self._fetch_timeout_seconds = fetch_timeout_seconds
        self._entries: dict[DepartureKey, CachedDepartureSet] = {}
        self._in_flight: dict[DepartureKey, asyncio.Task[CachedDepartureSet]] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def peek(self, key: DepartureKey) -> CachedDepartureSet | None:
        """Return the stored entry for a key without adjusting it."""
        return self._entries.get(key)

    async def get_departures(
        self,
        key: DepartureKey,
        fetcher: DepartureFetcher,
        now: datetime | None = None,
    ) -> DepartureLookup:
        """Get departures for a key, serving from cache while it is sufficient.

        Raises:
            UpstreamUnavailableError: If a fetch was needed, failed, and no
                cached entry exists to fall back to.
        """
        now = now or self._clock.now()
        entry = self._entries.get(key)

        salvaged: list[Departure] = []
        adjusted: list[Departure] = []
        if entry is not None:
            adjusted = self._adjusted_departures(entry, now)
            upcoming_count = sum(1 for d in adjusted if d.minutes_from_now >= 0)

            if entry.is_expired(now):
                logger.info(f"Cached departures for {key} expired, refreshing")
            elif upcoming_count >= self._bucket_size:
                logger.debug(f"Cache hit for {key} ({upcoming_count} upcoming)")
                return self._lookup(adjusted, entry, served_from_cache=True)
            else:
                logger.info(
                    f"Cached departures for {key} insufficient "
                    f"({upcoming_count} upcoming), refreshing"
                )
            salvaged = self._most_recent_past(adjusted)

        try:
            fresh = await self._refresh(key, fetcher, now, salvaged)
        except UpstreamUnavailableError as e:
            if entry is None:
                raise
            logger.warning(f"Serving stale departures for {key}, refresh failed: {e}")
            return self._lookup(adjusted, entry, served_from_cache=True, stale=True)

        return self._lookup(self._adjusted_departures(fresh, now), fresh, served_from_cache=False)

    async def evict_expired(self, now: datetime | None = None) -> int:
        """Remove entries past their TTL."""
        now = now or self._clock.now()
        async with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.info(f"Evicted {len(expired)} expired departure cache entries")
        return len(expired)

    def _adjusted_departures(self, entry: CachedDepartureSet, now: datetime) -> list[Departure]:
        """Re-place every cached departure relative to ``now``, soonest first."""
        elapsed_minutes = (now - entry.server_time_at_fetch).total_seconds() / 60
        adjusted = [
            replace(departure, minutes_from_now=departure.minutes_from_now - elapsed_minutes)
            for departure in entry.all_departures()
        ]
        adjusted.sort(key=lambda departure: departure.minutes_from_now)
        return adjusted

    def _most_recent_past(self, departures: list[Departure]) -> list[Departure]:
        """Past departures, most recent first, capped at the bucket size."""
        past = [departure for departure in departures if departure.minutes_from_now < 0]
        past.sort(key=lambda departure: departure.minutes_from_now, reverse=True)
        return past[: self._bucket_size]

    def _lookup(
        self,
        departures: list[Departure],
        entry: CachedDepartureSet,
        served_from_cache: bool,
        stale: bool = False,
    ) -> DepartureLookup:
        """Bucket time-adjusted departures for the caller."""
        ahead = [departure for departure in departures if departure.minutes_from_now >= 0]
        size = self._bucket_size
        return DepartureLookup(
            past=tuple(self._most_recent_past(departures)),
            upcoming=tuple(ahead[:size]),
            later=tuple(ahead[size : 2 * size]),
            served_from_cache=served_from_cache,
            server_time=entry.server_time_at_fetch,
            expires_at=entry.expires_at,
            stale=stale,
        )

    async def _refresh(
        self,
        key: DepartureKey,
        fetcher: DepartureFetcher,
        now: datetime,
        salvaged: list[Departure],
    ) -> CachedDepartureSet:
        """Refresh a key, joining a refresh already in flight for it."""
        async with self._lock:
            task = self._in_flight.get(key)
            if task is None:
                task = asyncio.create_task(self._fetch_and_store(key, fetcher, now, salvaged))
                self._in_flight[key] = task
                task.add_done_callback(lambda done: self._forget_in_flight(key, done))
            else:
                logger.debug(f"Joining in-flight departure fetch for {key}")
        # A cancelled caller must not cancel the fetch other callers wait on
        return await asyncio.shield(task)

    def _forget_in_flight(self, key: DepartureKey, task: asyncio.Task[CachedDepartureSet]) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]

    async def _fetch_and_store(
        self,
        key: DepartureKey,
        fetcher: DepartureFetcher,
        now: datetime,
        salvaged: list[Departure],
    ) -> CachedDepartureSet:
        """Fetch departures upstream and store them merged with salvaged past ones."""
        departures = await self._fetch_with_broadening(key, fetcher, now)

        # Fresh copies win over salvaged ones of the same (trip, time)
        seen: set[tuple[str, str]] = set()
        merged: list[Departure] = []
        for departure in [*departures, *salvaged]:
            if departure.identity not in seen:
                seen.add(departure.identity)
                merged.append(departure)
        merged.sort(key=lambda departure: departure.minutes_from_now)

        past = [departure for departure in merged if departure.minutes_from_now < 0]
        ahead = [departure for departure in merged if departure.minutes_from_now >= 0]
        size = self._bucket_size
        entry = CachedDepartureSet(
            key=key,
            server_time_at_fetch=now,
            past=tuple(self._most_recent_past(past)),
            upcoming=tuple(ahead[:size]),
            later=tuple(ahead[size : 2 * size]),
            expires_at=now + self._ttl,
        )
        self._entries[key] = entry
        logger.debug(
            f"Cached departures for {key}: {len(entry.past)} past, "
            f"{len(entry.upcoming)} upcoming, {len(entry.later)} later"
        )
        return entry

    async def _fetch_with_broadening(
        self, key: DepartureKey, fetcher: DepartureFetcher, now: datetime
    ) -> list[Departure]:
        """Fetch departures, retrying once with a larger window if too few lie ahead."""
        raw = await self._call_fetcher(fetcher, key, self._window_limit)
        departures = build_departures(raw, now, self._timezone)

        upcoming_count = sum(1 for d in departures if d.minutes_from_now >= 0)
        if upcoming_count >= self._bucket_size:
            return departures

        logger.info(
            f"Only {upcoming_count} upcoming departures for {key}, "
            f"broadening window to {self._broadened_window_limit}"
        )
        try:
            broadened = await self._call_fetcher(fetcher, key, self._broadened_window_limit)
        except UpstreamUnavailableError as e:
            logger.error(f"Broadened departure fetch for {key} failed, keeping first result: {e}")
            return departures
        return build_departures(broadened, now, self._timezone)

    async def _call_fetcher(
        self, fetcher: DepartureFetcher, key: DepartureKey, window_limit: int
    ) -> list[RawDeparture]:
        """Call the fetcher under the upstream timeout."""
        try:
            async with asyncio.timeout(self._fetch_timeout_seconds):
                return await fetcher(key, window_limit)
        except TimeoutError as e:
            raise UpstreamUnavailableError(
                f"Departure fetch for {key} timed out after {self._fetch_timeout_seconds}s"
            ) from e
