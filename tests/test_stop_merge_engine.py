"""Tests for cross-provider stop merging."""

import pytest

from wayline.application.services.stop_merge_engine import (
    MergeGroups,
    StopMergeEngine,
    haversine_meters,
    normalize_stop_name,
    unique_routes,
)
from wayline.domain.models import ProviderConfig, RawStop, RouteRef

METRO = "f-metro"
TRAM = "f-tram"
BUS = "f-bus"
BIKES = "f-bikes"


def _stop(
    stop_id: str,
    name: str,
    provider_id: str,
    routes: tuple[RouteRef, ...] = (),
    latitude: float = 39.4699,
    longitude: float = -0.3763,
    is_bike_station: bool = False,
) -> RawStop:
    return RawStop(
        stop_id=stop_id,
        name=name,
        latitude=latitude,
        longitude=longitude,
        provider_id=provider_id,
        routes=routes,
        is_bike_station=is_bike_station,
    )


def _route(short_name: str, provider_id: str) -> RouteRef:
    return RouteRef(short_name=short_name, color="#ff0000", type=1, provider_id=provider_id)


@pytest.fixture
def metro_tram_groups() -> MergeGroups:
    """Metro and tram mergeable with each other, bus and bikes alone."""
    return MergeGroups.from_providers(
        [
            ProviderConfig(onestop_id=METRO, mergeable={TRAM: True}),
            ProviderConfig(onestop_id=TRAM, mergeable={METRO: True}),
            ProviderConfig(onestop_id=BUS, mergeable={METRO: False}),
            ProviderConfig(onestop_id=BIKES),
        ]
    )


class TestNormalizeStopName:
    """Tests for stop name normalization."""

    def test_when_name_has_diacritics_then_they_are_stripped(self) -> None:
        """Given accented characters, when normalizing, then base letters remain."""
        assert normalize_stop_name("Plaça d'Espanya") == "placa despanya"

    def test_when_name_has_mixed_case_and_punctuation_then_both_removed(self) -> None:
        """Given mixed case and punctuation, when normalizing, then only lowercase words remain."""
        assert normalize_stop_name("  Colón - Renfe.  ") == "colon  renfe"

    def test_when_names_differ_only_by_accent_then_normalized_equal(self) -> None:
        """Given two spellings of one stop, when normalizing, then results are equal."""
        assert normalize_stop_name("Colón") == normalize_stop_name("COLON")

    def test_when_name_is_only_symbols_then_empty(self) -> None:
        """Given a name without letters or digits, when normalizing, then result is empty."""
        assert normalize_stop_name("--/--") == ""

    def test_when_normalizing_twice_then_result_is_stable(self) -> None:
        """Given a normalized name, when normalizing again, then it does not change."""
        once = normalize_stop_name("Àngel Guimerà")

        assert normalize_stop_name(once) == once


class TestHaversine:
    """Tests for great-circle distance."""

    def test_when_points_are_identical_then_distance_is_zero(self) -> None:
        """Given the same point twice, when measuring, then distance is zero."""
        assert haversine_meters(39.47, -0.37, 39.47, -0.37) == 0

    def test_when_points_are_one_degree_of_latitude_apart_then_about_111km(self) -> None:
        """Given points one degree of latitude apart, when measuring, then about 111 km."""
        distance = haversine_meters(39.0, -0.37, 40.0, -0.37)

        assert 111_000 < distance < 111_400


class TestMergeGroups:
    """Tests for merge group construction."""

    def test_when_providers_declare_each_other_then_same_group(
        self, metro_tram_groups: MergeGroups
    ) -> None:
        """Given mutual declarations, when building groups, then providers can merge."""
        assert metro_tram_groups.can_merge(METRO, TRAM)
        assert metro_tram_groups.can_merge(TRAM, METRO)

    def test_when_declaration_is_false_then_providers_stay_apart(
        self, metro_tram_groups: MergeGroups
    ) -> None:
        """Given mergeable=false, when building groups, then providers cannot merge."""
        assert not metro_tram_groups.can_merge(BUS, METRO)

    def test_when_provider_declares_nothing_then_it_has_no_group(
        self, metro_tram_groups: MergeGroups
    ) -> None:
        """Given a provider without mergeable table, when building groups, then it never merges."""
        assert metro_tram_groups.group_of(BIKES) is None
        assert not metro_tram_groups.can_merge(BIKES, BIKES)

    def test_when_provider_declares_empty_table_then_merges_with_itself(
        self, metro_tram_groups: MergeGroups
    ) -> None:
        """Given a declared but partnerless provider, when building groups, then own group only."""
        assert metro_tram_groups.can_merge(BUS, BUS)
        assert not metro_tram_groups.can_merge(BUS, TRAM)

    def test_when_declarations_chain_then_groups_are_transitive(self) -> None:
        """Given A~B and B~C, when building groups, then A and C share a group."""
        groups = MergeGroups.from_providers(
            [
                ProviderConfig(onestop_id="a", mergeable={"b": True}),
                ProviderConfig(onestop_id="b", mergeable={"c": True}),
                ProviderConfig(onestop_id="c", mergeable={}),
            ]
        )

        assert groups.can_merge("a", "c")
        assert groups.groups() == [frozenset({"a", "b", "c"})]

    def test_when_declaration_is_one_sided_then_still_mergeable(self) -> None:
        """Given only A declaring B, when building groups, then A and B share a group."""
        groups = MergeGroups.from_providers(
            [
                ProviderConfig(onestop_id="a", mergeable={"b": True}),
                ProviderConfig(onestop_id="b"),
            ]
        )

        assert groups.can_merge("a", "b")

    def test_when_declaration_value_is_not_boolean_then_ignored(self) -> None:
        """Given a truthy non-boolean value, when building groups, then no merge declared."""
        groups = MergeGroups.from_providers(
            [ProviderConfig(onestop_id="a", mergeable={"b": "yes"}), ProviderConfig(onestop_id="b")]
        )

        assert not groups.can_merge("a", "b")


class TestUniqueRoutes:
    """Tests for route deduplication."""

    def test_when_routes_repeat_then_first_occurrence_kept(self) -> None:
        """Given duplicate (short name, provider) pairs, when deduplicating, then order is kept."""
        first = _route("1", METRO)
        duplicate = RouteRef(short_name="1", color="#000000", type=1, provider_id=METRO)
        other = _route("1", TRAM)

        assert unique_routes([first, other, duplicate]) == (first, other)


class TestStopMergeEngine:
    """Tests for stop merging."""

    def test_when_mergeable_providers_share_a_name_then_one_combined_place(
        self, metro_tram_groups: MergeGroups
    ) -> None:
        """Given "Colon" from two mergeable providers, when merging, then one place with both."""
        stops = [
            _stop("m1", "Colon", METRO, routes=(_route("3", METRO), _route("5", METRO))),
            _stop("t1", "Colón", TRAM, routes=(_route("4", TRAM),)),
        ]

        places = StopMergeEngine().merge(stops, metro_tram_groups)

        assert len(places) == 1
        place = places[0]
        assert place.combined is True
        assert place.contributing_providers == (METRO, TRAM)
        assert [route.short_name for route in place.routes] == ["3", "5", "4"]
        assert place.name == "Colon"
        assert place.stop_id == "m1"

    def test_when_providers_are_not_mergeable_then_separate_places(
        self, metro_tram_groups: MergeGroups
    ) -> None:
        """Given stops of non-mergeable providers, when merging, then each stays its own place."""
        stops = [
            _stop("m1", "Plaça de l'Ajuntament", METRO),
            _stop("b1", "Pl Ajuntament", BIKES, is_bike_station=True),
        ]

        places = StopMergeEngine().merge(stops, metro_tram_groups)

        assert len(places) == 2
        assert all(not place.combined for place in places)

    def test_when_names_differ_then_mergeable_stops_stay_apart(
        self, metro_tram_groups: MergeGroups
    ) -> None:
        """Given mergeable providers with different names, when merging, then no merge."""
        stops = [_stop("m1", "Xàtiva", METRO), _stop("t1", "Colon", TRAM)]

        places = StopMergeEngine().merge(stops, metro_tram_groups)

        assert [place.stop_id for place in places] == ["m1", "t1"]

    def test_when_same_name_from_unrelated_provider_then_not_merged(
        self, metro_tram_groups: MergeGroups
    ) -> None:
        """Given same name from a provider in another group, when merging, then two places."""
        stops = [_stop("m1", "Colon", METRO), _stop("x1", "Colon", BUS)]

        places = StopMergeEngine().merge(stops, metro_tram_groups)

        assert len(places) == 2

    def test_when_bike_stations_share_a_name_then_never_merged(self) -> None:
        """Given two bike stations with the same name, when merging, then they stay separate."""
        groups = MergeGroups.from_providers([ProviderConfig(onestop_id=BIKES, mergeable={})])
        stops = [
            _stop("b1", "Colon", BIKES, is_bike_station=True),
            _stop("b2", "Colon", BIKES, is_bike_station=True),
        ]

        places = StopMergeEngine().merge(stops, groups)

        assert len(places) == 2
        assert all(place.is_bike_station for place in places)

    def test_when_names_normalize_to_empty_then_not_merged(
        self, metro_tram_groups: MergeGroups
    ) -> None:
        """Given names without letters, when merging, then stops are kept apart."""
        stops = [_stop("m1", "...", METRO), _stop("t1", "!!", TRAM)]

        places = StopMergeEngine().merge(stops, metro_tram_groups)

        assert len(places) == 2

    def test_when_merging_then_places_follow_first_member_order(
        self, metro_tram_groups: MergeGroups
    ) -> None:
        """Given interleaved stops, when merging, then order follows each place's first stop."""
        stops = [
            _stop("m1", "Colon", METRO),
            _stop("x1", "Xàtiva", BUS),
            _stop("t1", "Colon", TRAM),
            _stop("t2", "Alameda", TRAM),
        ]

        places = StopMergeEngine().merge(stops, metro_tram_groups)

        assert [place.stop_id for place in places] == ["m1", "x1", "t2"]

    def test_when_partners_link_through_a_third_provider_then_one_place(self) -> None:
        """Given A~C and B~C, when merging same-named stops, then all join the first place."""
        groups = MergeGroups.from_providers(
            [
                ProviderConfig(onestop_id="a", mergeable={"c": True}),
                ProviderConfig(onestop_id="b", mergeable={"c": True}),
                ProviderConfig(onestop_id="c", mergeable={}),
            ]
        )
        stops = [_stop("a1", "Colon", "a"), _stop("c1", "Colon", "c"), _stop("b1", "Colon", "b")]

        places = StopMergeEngine().merge(stops, groups)

        assert len(places) == 1
        assert places[0].contributing_providers == ("a", "c", "b")

    def test_when_origin_given_then_distance_is_rounded_metres(
        self, metro_tram_groups: MergeGroups
    ) -> None:
        """Given a query origin, when merging, then distance to the first member is set."""
        stops = [_stop("m1", "Colon", METRO, latitude=39.47, longitude=-0.37)]

        places = StopMergeEngine().merge(stops, metro_tram_groups, origin=(39.471, -0.37))

        assert places[0].distance_meters == 111

    def test_when_merge_is_applied_to_its_own_output_then_unchanged(
        self, metro_tram_groups: MergeGroups
    ) -> None:
        """Given merged places turned back into stops, when merging again, then same places."""
        engine = StopMergeEngine()
        stops = [
            _stop("m1", "Colon", METRO, routes=(_route("3", METRO),)),
            _stop("t1", "Colon", TRAM, routes=(_route("4", TRAM),)),
            _stop("x1", "Xàtiva", BUS),
        ]
        first = engine.merge(stops, metro_tram_groups)
        as_stops = [
            _stop(place.stop_id, place.name, place.provider_id, routes=place.routes)
            for place in first
        ]

        second = engine.merge(as_stops, metro_tram_groups)

        assert [(p.stop_id, p.routes) for p in second] == [(p.stop_id, p.routes) for p in first]

    def test_when_no_stops_then_no_places(self, metro_tram_groups: MergeGroups) -> None:
        """Given an empty result, when merging, then no places are returned."""
        assert StopMergeEngine().merge([], metro_tram_groups) == []
