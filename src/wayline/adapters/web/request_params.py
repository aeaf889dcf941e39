"""Parsing and validation of HTTP query parameters."""

import math
from collections.abc import Mapping

from wayline.domain.errors import InvalidQueryError
from wayline.domain.models.geo_query import GeoQuery

_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_coordinate(params: Mapping[str, str], name: str, bound: float) -> float:
    raw = params.get(name)
    if raw is None or raw.strip() == "":
        raise InvalidQueryError("Latitude and longitude are required")
    try:
        value = float(raw)
    except ValueError as e:
        raise InvalidQueryError(f"{name} must be a number, got {raw!r}") from e
    if not math.isfinite(value) or abs(value) > bound:
        raise InvalidQueryError(f"{name} must be between -{bound:g} and {bound:g}")
    return value


def parse_geo_query(
    params: Mapping[str, str], default_radius: int = 1000, max_radius: int = 5000
) -> GeoQuery:
    """Build a geo query from ``lat``, ``lon`` and optional ``radius`` and ``bikes``.

    Raises:
        InvalidQueryError: If coordinates are missing or invalid, or the radius
            is not a positive integer within ``max_radius``.
    """
    latitude = _parse_coordinate(params, "lat", 90)
    longitude = _parse_coordinate(params, "lon", 180)

    raw_radius = params.get("radius")
    if raw_radius is None or raw_radius.strip() == "":
        radius = default_radius
    else:
        try:
            radius = int(raw_radius)
        except ValueError as e:
            raise InvalidQueryError(f"radius must be an integer, got {raw_radius!r}") from e
        if radius <= 0 or radius > max_radius:
            raise InvalidQueryError(f"radius must be between 1 and {max_radius} meters")

    include_bikes = params.get("bikes", "true").strip().lower() not in _FALSE_VALUES
    return GeoQuery(
        latitude=latitude,
        longitude=longitude,
        radius_meters=radius,
        include_bike_stations=include_bikes,
    )


def parse_departure_params(params: Mapping[str, str]) -> tuple[str, str]:
    """Extract (feed onestop id, stop id), accepting snake_case or camelCase names.

    Raises:
        InvalidQueryError: If either identifier is missing.
    """
    stop_id = (params.get("stop_id") or params.get("stopId") or "").strip()
    feed_id = (params.get("feed_onestop_id") or params.get("feedId") or "").strip()
    if not stop_id or not feed_id:
        raise InvalidQueryError("stop_id and feed_onestop_id are required")
    return feed_id, stop_id
