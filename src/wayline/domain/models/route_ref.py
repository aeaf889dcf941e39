"""Route reference domain model."""

from dataclasses import dataclass

DEFAULT_ROUTE_COLOR = "#6b46c1"


@dataclass(frozen=True)
class RouteRef:
    """A route serving a stop, as published by one provider.

    Two references denote the same route only when both ``short_name`` and
    ``provider_id`` match. Color and type are display attributes.
    """

    short_name: str
    color: str
    type: int
    provider_id: str
    route_id: str = ""
    long_name: str = ""

    @property
    def identity(self) -> tuple[str, str]:
        """Key used for route deduplication."""
        return (self.short_name, self.provider_id)
