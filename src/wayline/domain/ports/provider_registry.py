"""Provider registry port."""

from typing import Protocol

from wayline.domain.models.provider_config import ProviderConfig


class ProviderRegistry(Protocol):
    """Port for static provider configuration."""

    def get_providers(self) -> list[ProviderConfig]:
        """Get all configured providers."""
        ...

    def get_provider(self, onestop_id: str) -> ProviderConfig | None:
        """Get a provider by its onestop id."""
        ...
