"""Cross-provider stop merging.

Stops returned by independent providers for one geographic query are grouped
into places. Two stops end up in the same place only when their normalized
names are equal and their providers belong to the same merge group.
"""

from __future__ import annotations

import logging
import math
import re
import unicodedata
from collections.abc import Iterable
from typing import TYPE_CHECKING

from wayline.domain.models.place import Place

if TYPE_CHECKING:
    from wayline.domain.models.provider_config import ProviderConfig
    from wayline.domain.models.raw_stop import RawStop
    from wayline.domain.models.route_ref import RouteRef

logger = logging.getLogger(__name__)

EARTH_RADIUS_METERS = 6_371_000

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9\s]")


def normalize_stop_name(name: str) -> str:
    """Normalize a stop name for comparison.

    Diacritics are stripped, the result is lowercased, anything other than
    ASCII letters, digits and whitespace is removed and the ends are trimmed.
    """
    decomposed = unicodedata.normalize("NFD", name)
    without_marks = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_ALPHANUMERIC.sub("", without_marks.lower()).strip()


def haversine_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in metres."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    )
    return EARTH_RADIUS_METERS * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


class MergeGroups:
    """Equivalence classes of providers declared as mutually mergeable.

    Built once with union-find over every ``mergeable[partner] is True``
    declaration; lookups afterwards are plain dict reads.
    """

    def __init__(self, group_of: dict[str, str]) -> None:
        """Initialize from a provider id -> group representative mapping."""
        self._group_of = group_of

    @classmethod
    def from_providers(cls, providers: Iterable[ProviderConfig]) -> MergeGroups:
        """Build merge groups from provider configurations.

        Providers that never appear in a merge declaration (neither declaring
        a ``mergeable`` table nor being named as a partner) get no group and
        never merge, not even with themselves.
        """
        parent: dict[str, str] = {}

        def find(provider_id: str) -> str:
            root = provider_id
            while parent[root] != root:
                root = parent[root]
            while parent[provider_id] != root:
                parent[provider_id], provider_id = root, parent[provider_id]
            return root

        def union(first: str, second: str) -> None:
            parent.setdefault(first, first)
            parent.setdefault(second, second)
            first_root, second_root = find(first), find(second)
            if first_root != second_root:
                parent[second_root] = first_root

        for provider in providers:
            if not provider.declares_mergeability():
                continue
            parent.setdefault(provider.onestop_id, provider.onestop_id)
            for partner in provider.mergeable_partners():
                union(provider.onestop_id, partner)

        return cls({provider_id: find(provider_id) for provider_id in parent})

    def group_of(self, provider_id: str) -> str | None:
        """Return the representative of the provider's group, if any."""
        return self._group_of.get(provider_id)

    def can_merge(self, first: str, second: str) -> bool:
        """Check whether stops of two providers may be merged."""
        first_group = self._group_of.get(first)
        return first_group is not None and first_group == self._group_of.get(second)

    def groups(self) -> list[frozenset[str]]:
        """Return every group as a set of provider ids."""
        members: dict[str, set[str]] = {}
        for provider_id, root in self._group_of.items():
            members.setdefault(root, set()).add(provider_id)
        return [frozenset(group) for group in members.values()]


def unique_routes(routes: Iterable[RouteRef]) -> tuple[RouteRef, ...]:
    """Deduplicate routes by (short name, provider), keeping first occurrences."""
    seen: set[tuple[str, str]] = set()
    result: list[RouteRef] = []
    for route in routes:
        if route.identity in seen:
            continue
        seen.add(route.identity)
        result.append(route)
    return tuple(result)


class StopMergeEngine:
    """Clusters raw stops into display-ready places."""

    def merge(
        self,
        raw_stops: list[RawStop],
        merge_groups: MergeGroups,
        origin: tuple[float, float] | None = None,
    ) -> list[Place]:
        """Merge same-place stops of mergeable providers.

        Within a set of stops sharing a normalized name, each stop joins the
        first existing cluster holding at least one compatible member, so
        clustering follows input order. Bike stations are never clustered.

        Args:
            raw_stops: Stops in nearest-first order, routes attached.
            merge_groups: Provider merge groups.
            origin: Query point (latitude, longitude) used for distances.

        Returns:
            Places ordered by the position of their first member.
        """
        clusters: list[list[RawStop]] = []
        clusters_by_name: dict[str, list[list[RawStop]]] = {}

        for stop in raw_stops:
            name_key = "" if stop.is_bike_station else normalize_stop_name(stop.name)
            if not name_key:
                clusters.append([stop])
                continue

            candidates = clusters_by_name.setdefault(name_key, [])
            for cluster in candidates:
                if any(merge_groups.can_merge(stop.provider_id, m.provider_id) for m in cluster):
                    cluster.append(stop)
                    break
            else:
                cluster = [stop]
                candidates.append(cluster)
                clusters.append(cluster)

        places = [self._to_place(cluster, origin) for cluster in clusters]
        combined_count = sum(1 for place in places if place.combined)
        if combined_count:
            logger.debug(
                f"Merged {len(raw_stops)} stops into {len(places)} places "
                f"({combined_count} combined)"
            )
        return places

    def _to_place(self, cluster: list[RawStop], origin: tuple[float, float] | None) -> Place:
        """Build a place from a cluster, taking location and name from its first member."""
        first = cluster[0]
        providers = tuple(dict.fromkeys(stop.provider_id for stop in cluster))
        routes = unique_routes(route for stop in cluster for route in stop.routes)

        distance = 0
        if origin is not None:
            distance = round(haversine_meters(origin[0], origin[1], first.latitude, first.longitude))

        return Place(
            stop_id=first.stop_id,
            name=first.name,
            latitude=first.latitude,
            longitude=first.longitude,
            provider_id=first.provider_id,
            routes=routes,
            distance_meters=distance,
            combined=len(cluster) > 1,
            contributing_providers=providers,
            provider_name=first.provider_name,
            is_bike_station=first.is_bike_station,
            bike_capacity=first.bike_capacity,
            bike_provider_type=first.bike_provider_type,
            bike_provider_id=first.bike_provider_id,
        )
