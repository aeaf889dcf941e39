"""Conversion of stored MongoDB documents into domain models."""

import json
from typing import Any

from wayline.adapters.mongo.constants import DEFAULT_ROUTE_SHORT_NAME, DEFAULT_ROUTE_TYPE
from wayline.domain.models.raw_stop import RawStop
from wayline.domain.models.route_ref import DEFAULT_ROUTE_COLOR, RouteRef


def parse_stop(document: dict[str, Any], feed: dict[str, Any] | None) -> RawStop:
    """Build a raw stop from a stop document and its feed document."""
    feed = feed or {}
    bike_capacity = document.get("bike_capacity")
    return RawStop(
        stop_id=str(document.get("stop_id", "")),
        name=document.get("stop_name") or "",
        latitude=float(document.get("stop_lat", 0.0)),
        longitude=float(document.get("stop_lon", 0.0)),
        provider_id=feed.get("onestop_id", ""),
        provider_name=feed.get("name", ""),
        is_bike_station=bool(document.get("is_bike_station", False)),
        bike_capacity=int(bike_capacity) if bike_capacity is not None else None,
        bike_provider_type=document.get("provider_type"),
        bike_provider_id=document.get("provider_id"),
        record_id=str(document["_id"]) if "_id" in document else None,
    )


def parse_route(document: dict[str, Any], feed_onestop_id: str) -> RouteRef:
    """Build a route reference from a route document.

    Missing display fields fall back to the defaults used by the map client.
    """
    route_type = document.get("route_type")
    return RouteRef(
        short_name=document.get("route_short_name") or DEFAULT_ROUTE_SHORT_NAME,
        color=document.get("route_color") or DEFAULT_ROUTE_COLOR,
        type=int(route_type) if route_type else DEFAULT_ROUTE_TYPE,
        provider_id=feed_onestop_id,
        route_id=str(document.get("route_id", "")),
        long_name=document.get("route_long_name") or "",
    )


def parse_geometry(value: Any) -> dict[str, Any] | None:
    """Read a stored route geometry, which may be a GeoJSON object or its JSON text.

    Unreadable geometries yield ``None``.
    """
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            return None
    if isinstance(value, dict) and "type" in value:
        return value
    return None
