"""Tests for HTTP query parameter parsing."""

import pytest

from wayline.adapters.web.request_params import parse_departure_params, parse_geo_query
from wayline.domain.errors import InvalidQueryError


class TestParseGeoQuery:
    """Tests for place query parameters."""

    def test_when_all_parameters_valid_then_query_built(self) -> None:
        """Given lat, lon and radius, when parsing, then a geo query is returned."""
        query = parse_geo_query({"lat": "39.4699", "lon": "-0.3763", "radius": "500"})

        assert query.latitude == 39.4699
        assert query.longitude == -0.3763
        assert query.radius_meters == 500
        assert query.include_bike_stations is True

    def test_when_radius_missing_then_default_used(self) -> None:
        """Given no radius, when parsing, then the default radius applies."""
        query = parse_geo_query({"lat": "39.47", "lon": "-0.37"}, default_radius=800)

        assert query.radius_meters == 800

    @pytest.mark.parametrize(
        "params",
        [
            {"lon": "-0.37"},
            {"lat": "39.47"},
            {"lat": "", "lon": "-0.37"},
            {"lat": "north", "lon": "-0.37"},
            {"lat": "91", "lon": "-0.37"},
            {"lat": "39.47", "lon": "-181"},
            {"lat": "nan", "lon": "-0.37"},
        ],
    )
    def test_when_coordinates_missing_or_invalid_then_rejected(self, params: dict) -> None:
        """Given missing or out-of-range coordinates, when parsing, then InvalidQueryError."""
        with pytest.raises(InvalidQueryError):
            parse_geo_query(params)

    @pytest.mark.parametrize("radius", ["0", "-5", "5001", "wide", "1.5"])
    def test_when_radius_invalid_then_rejected(self, radius: str) -> None:
        """Given a radius outside 1..max or not an integer, when parsing, then rejected."""
        with pytest.raises(InvalidQueryError, match="radius"):
            parse_geo_query({"lat": "39.47", "lon": "-0.37", "radius": radius}, max_radius=5000)

    def test_when_bikes_disabled_then_bike_stations_excluded(self) -> None:
        """Given bikes=false, when parsing, then bike stations are excluded."""
        query = parse_geo_query({"lat": "39.47", "lon": "-0.37", "bikes": "False"})

        assert query.include_bike_stations is False

    def test_when_query_built_then_origin_is_lat_lon(self) -> None:
        """Given a query, when reading its origin, then it is (latitude, longitude)."""
        query = parse_geo_query({"lat": "39.47", "lon": "-0.37"})

        assert query.origin == (39.47, -0.37)


class TestParseDepartureParams:
    """Tests for departure query parameters."""

    def test_when_snake_case_names_then_parsed(self) -> None:
        """Given stop_id and feed_onestop_id, when parsing, then both are returned."""
        assert parse_departure_params({"stop_id": "118", "feed_onestop_id": "f-metro"}) == (
            "f-metro",
            "118",
        )

    def test_when_camel_case_names_then_parsed(self) -> None:
        """Given stopId and feedId, when parsing, then both are returned."""
        assert parse_departure_params({"stopId": " 118 ", "feedId": "f-metro"}) == (
            "f-metro",
            "118",
        )

    def test_when_identifier_missing_then_rejected(self) -> None:
        """Given no feed id, when parsing, then InvalidQueryError is raised."""
        with pytest.raises(InvalidQueryError, match="required"):
            parse_departure_params({"stop_id": "118"})
