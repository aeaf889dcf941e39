"""Parser for TransitLand stop departure responses."""

import logging
from typing import Any

from wayline.domain.models.departure import RawDeparture
from wayline.domain.models.route_ref import DEFAULT_ROUTE_COLOR, RouteRef

logger = logging.getLogger(__name__)


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def extract_departures(data: Any) -> list[dict[str, Any]]:
    """Extract the departure list of the first stop in a response."""
    stops = _as_dict(data).get("stops")
    if not isinstance(stops, list) or not stops:
        return []
    departures = _as_dict(stops[0]).get("departures")
    return [d for d in departures if isinstance(d, dict)] if isinstance(departures, list) else []


def parse_departure(entry: dict[str, Any], feed_onestop_id: str) -> RawDeparture:
    """Convert one TransitLand departure into a raw departure."""
    trip = _as_dict(entry.get("trip"))
    route = _as_dict(trip.get("route"))

    is_realtime = bool(
        _as_dict(entry.get("departure")).get("estimated")
        or _as_dict(entry.get("arrival")).get("estimated")
    )

    return RawDeparture(
        departure_time=entry.get("departure_time") or "",
        trip_id=str(trip.get("trip_id") or ""),
        route=RouteRef(
            short_name=str(route.get("route_short_name") or ""),
            color=route.get("route_color") or DEFAULT_ROUTE_COLOR,
            type=_as_int(route.get("route_type")),
            provider_id=feed_onestop_id,
            route_id=str(route.get("route_id") or ""),
            long_name=route.get("route_long_name") or "",
        ),
        headsign=trip.get("trip_headsign") or "",
        is_realtime=is_realtime,
        arrival_time=entry.get("arrival_time") or "",
        stop_sequence=_as_int(entry.get("stop_sequence")),
        service_date=entry.get("service_date") or "",
        schedule_relationship=entry.get("schedule_relationship") or "STATIC",
    )


def parse_departures(data: Any, feed_onestop_id: str) -> list[RawDeparture]:
    """Parse all departures of a response, preserving upstream order."""
    departures = [parse_departure(entry, feed_onestop_id) for entry in extract_departures(data)]
    logger.debug(f"Parsed {len(departures)} departures for feed {feed_onestop_id}")
    return departures
