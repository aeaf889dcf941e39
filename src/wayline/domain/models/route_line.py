"""Route line domain model."""

from dataclasses import dataclass, field
from typing import Any

from wayline.domain.models.route_ref import RouteRef


@dataclass(frozen=True)
class RouteLine:
    """A route together with its drawable GeoJSON geometry."""

    route: RouteRef
    geometry: dict[str, Any] = field(hash=False)
    feed_name: str = ""
