"""Placing upstream departures on a minutes-from-now timeline."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from wayline.domain.models.departure import Departure

if TYPE_CHECKING:
    from collections.abc import Iterable

    from wayline.domain.models.departure import RawDeparture

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60
HALF_DAY_MINUTES = 12 * 60


def parse_clock_minutes(clock_time: str) -> int:
    """Convert a GTFS "HH:MM[:SS]" time into minutes after local midnight.

    Hours of 24 and above belong to the following service day and wrap
    around. Malformed values count as midnight.
    """
    parts = clock_time.split(":") if clock_time else []
    try:
        hours = int(parts[0])
        minutes = int(parts[1])
    except (IndexError, ValueError):
        logger.debug(f"Unparseable departure time {clock_time!r}, treating as 00:00")
        return 0

    if hours >= 24:
        hours -= 24
    return hours * 60 + minutes


def minutes_until(clock_time: str, now_local: datetime) -> float:
    """Minutes from ``now_local`` until a GTFS clock time.

    Seconds of ``now_local`` count, so the result is exact relative to it.
    Differences more than half a day in the past are taken to mean the
    departure belongs to the next day.
    """
    current = now_local.hour * 60 + now_local.minute + now_local.second / 60
    difference = parse_clock_minutes(clock_time) - current
    if difference < -HALF_DAY_MINUTES:
        difference += MINUTES_PER_DAY
    return difference


def build_departures(
    raw_departures: Iterable[RawDeparture], now: datetime, timezone: str
) -> list[Departure]:
    """Place raw departures relative to ``now``, soonest first.

    Sorting is stable, so departures at the same minute keep upstream order.
    """
    now_local = now.astimezone(ZoneInfo(timezone))
    departures = [
        Departure(
            departure_time=raw.departure_time,
            trip_id=raw.trip_id,
            route=raw.route,
            headsign=raw.headsign,
            minutes_from_now=minutes_until(raw.departure_time, now_local),
            is_realtime=raw.is_realtime,
            arrival_time=raw.arrival_time,
            stop_sequence=raw.stop_sequence,
            service_date=raw.service_date,
            schedule_relationship=raw.schedule_relationship,
        )
        for raw in raw_departures
    ]
    departures.sort(key=lambda departure: departure.minutes_from_now)
    return departures
