"""Provider configuration domain model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProviderConfig(BaseModel):
    """Static description of one data provider (GTFS feed or bike-share network)."""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    onestop_id: str
    name: str = ""
    # Partner onestop id -> declared mergeability. Values are kept as loaded;
    # only literal ``True`` counts as a merge declaration.
    mergeable: dict[str, Any] | None = None
    show_lines: bool = Field(default=False, alias="showlines")
    color: str | None = None
    logo: str | None = None
    kind: str | None = Field(default=None, alias="type")

    def mergeable_partners(self) -> list[str]:
        """Return partner ids explicitly declared mergeable with this provider."""
        if not isinstance(self.mergeable, dict):
            return []
        return [partner for partner, can_merge in self.mergeable.items() if can_merge is True]

    def declares_mergeability(self) -> bool:
        """Check whether the provider takes part in merge declarations at all."""
        return isinstance(self.mergeable, dict)

    def display_metadata(self) -> dict[str, Any]:
        """Return the fields shown to clients."""
        return self.model_dump(by_alias=True, exclude={"mergeable"}, exclude_none=True)

    @field_validator("mergeable", mode="before")
    @classmethod
    def ignore_malformed_mergeable(cls, v: Any) -> dict[str, Any] | None:
        """Treat a ``mergeable`` value that is not a table as absent."""
        return v if isinstance(v, dict) else None
