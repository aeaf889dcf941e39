"""Tests for domain models."""

from datetime import UTC, datetime, timedelta

import pytest

from wayline.domain.errors import ProviderDataError, UpstreamUnavailableError, WaylineError
from wayline.domain.models import (
    CachedDepartureSet,
    Departure,
    DepartureKey,
    ProviderConfig,
    RouteRef,
)

NOW = datetime(2024, 1, 15, 11, 0, tzinfo=UTC)
ROUTE = RouteRef(short_name="3", color="#e30613", type=1, provider_id="f-metro")


def _departure(trip_id: str, minutes: float) -> Departure:
    return Departure(
        departure_time="12:00:00",
        trip_id=trip_id,
        route=ROUTE,
        headsign="Rafelbunyol",
        minutes_from_now=minutes,
        is_realtime=False,
    )


def test_departure_key_string_joins_feed_and_stop() -> None:
    """Given a key, when formatting, then feed and stop ids are joined with a colon."""
    assert str(DepartureKey(feed_onestop_id="f-metro", stop_id="118")) == "f-metro:118"


def test_route_identity_ignores_display_attributes() -> None:
    """Given routes differing only in color, when comparing identities, then they match."""
    other = RouteRef(short_name="3", color="#000000", type=3, provider_id="f-metro")

    assert ROUTE.identity == other.identity


def test_cached_set_lists_past_then_upcoming_then_later() -> None:
    """Given a cached set, when listing departures, then buckets are concatenated in order."""
    entry = CachedDepartureSet(
        key=DepartureKey(feed_onestop_id="f-metro", stop_id="118"),
        server_time_at_fetch=NOW,
        past=(_departure("p", -1),),
        upcoming=(_departure("u", 2),),
        later=(_departure("l", 40),),
        expires_at=NOW + timedelta(hours=2),
    )

    assert [d.trip_id for d in entry.all_departures()] == ["p", "u", "l"]
    assert entry.is_expired(NOW + timedelta(hours=1)) is False
    assert entry.is_expired(NOW + timedelta(hours=2)) is True


def test_provider_config_is_immutable() -> None:
    """Given a provider config, when assigning a field, then validation fails."""
    provider = ProviderConfig(onestop_id="f-metro")

    with pytest.raises(ValueError):
        provider.name = "changed"


def test_provider_config_keeps_unknown_fields() -> None:
    """Given extra registry fields, when parsing, then they are kept for display."""
    provider = ProviderConfig.model_validate({"onestop_id": "f-metro", "region": "Valencia"})

    assert provider.display_metadata()["region"] == "Valencia"


def test_domain_errors_share_base_class() -> None:
    """Given domain errors, when inspecting, then they derive from WaylineError with context."""
    upstream = UpstreamUnavailableError("bad gateway", status_code=502)
    provider = ProviderDataError("f-tram", "corrupt")

    assert isinstance(upstream, WaylineError)
    assert upstream.status_code == 502
    assert provider.provider_id == "f-tram"
    assert str(provider) == "f-tram: corrupt"
