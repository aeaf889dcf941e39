"""JSON serialization of places and departures."""

import math
from datetime import datetime
from typing import Any

from wayline.domain.models.departure import Departure
from wayline.domain.models.departure_lookup import StopDepartures
from wayline.domain.models.place import Place
from wayline.domain.models.route_line import RouteLine
from wayline.domain.models.route_ref import RouteRef


def _iso(moment: datetime) -> str:
    return moment.isoformat().replace("+00:00", "Z")


def route_to_dict(route: RouteRef) -> dict[str, Any]:
    """Serialize a route reference."""
    return {
        "route_short_name": route.short_name,
        "route_color": route.color,
        "route_type": route.type,
        "feed_onestop_id": route.provider_id,
    }


def place_to_feature(place: Place) -> dict[str, Any]:
    """Serialize a place as a GeoJSON Feature."""
    properties: dict[str, Any] = {
        "stop_id": place.stop_id,
        "stop_name": place.name,
        "feed_onestop_id": place.provider_id,
        "feed_name": place.provider_name,
        "routes": [route_to_dict(route) for route in place.routes],
        "totalRoutes": len(place.routes),
        "distance": place.distance_meters,
        "combined": place.combined,
        "providers": list(place.contributing_providers),
    }
    if place.is_bike_station:
        properties.update(
            {
                "is_bike_station": True,
                "bike_capacity": place.bike_capacity,
                "provider_type": place.bike_provider_type,
                "provider_id": place.bike_provider_id,
                "type": "bike",
            }
        )
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": list(place.coordinates)},
        "properties": properties,
    }


def places_to_feature_collection(places: list[Place]) -> dict[str, Any]:
    """Serialize places as a GeoJSON FeatureCollection."""
    return {"type": "FeatureCollection", "features": [place_to_feature(p) for p in places]}


def departure_to_dict(departure: Departure) -> dict[str, Any]:
    """Serialize a departure; minutes are floored to whole minutes."""
    return {
        "departure_time": departure.departure_time,
        "arrival_time": departure.arrival_time,
        "route": {
            "route_id": departure.route.route_id,
            "route_short_name": departure.route.short_name,
            "route_long_name": departure.route.long_name,
            "route_color": departure.route.color,
            "route_type": departure.route.type,
            "feed_onestop_id": departure.route.provider_id,
        },
        "trip_id": departure.trip_id,
        "trip_headsign": departure.headsign,
        "stop_sequence": departure.stop_sequence,
        "minutes_from_now": math.floor(departure.minutes_from_now),
        "realtime": departure.is_realtime,
        "service_date": departure.service_date,
        "schedule_relationship": departure.schedule_relationship,
    }


def stop_departures_to_dict(board: StopDepartures) -> dict[str, Any]:
    """Serialize the departure board of a stop."""
    lookup = board.lookup
    return {
        "stop_name": board.stop.name,
        "stop_id": board.stop.stop_id,
        "feed_onestop_id": board.stop.provider_id,
        "current_time": _iso(board.current_time),
        "server_time": int(lookup.server_time.timestamp() * 1000),
        "departures": {
            "past": [departure_to_dict(d) for d in lookup.past],
            "upcoming": [departure_to_dict(d) for d in lookup.upcoming],
            "later": [departure_to_dict(d) for d in lookup.later],
        },
        "cached": lookup.served_from_cache,
        "stale": lookup.stale,
        "cache_expires": _iso(lookup.expires_at),
    }


def route_line_to_feature(line: RouteLine) -> dict[str, Any]:
    """Serialize a route line as a GeoJSON Feature."""
    return {
        "type": "Feature",
        "properties": {
            "route_short_name": line.route.short_name,
            "route_long_name": line.route.long_name,
            "route_color": line.route.color,
            "route_type": line.route.type,
            "feed_onestop_id": line.route.provider_id,
            "feed_name": line.feed_name,
        },
        "geometry": line.geometry,
    }


def route_lines_to_feature_collection(lines: list[RouteLine]) -> dict[str, Any]:
    """Serialize route lines as a GeoJSON FeatureCollection."""
    return {
        "type": "FeatureCollection",
        "features": [route_line_to_feature(line) for line in lines],
    }
