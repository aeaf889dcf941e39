"""Provider registry loaded from a static JSON or TOML file."""

import json
import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from wayline.domain.models.provider_config import ProviderConfig
from wayline.domain.ports.provider_registry import ProviderRegistry

logger = logging.getLogger(__name__)


class StaticProviderRegistry(ProviderRegistry):
    """In-memory provider registry."""

    def __init__(self, providers: list[ProviderConfig]) -> None:
        """Initialize with the configured providers."""
        self._providers = list(providers)
        self._by_id = {provider.onestop_id: provider for provider in self._providers}

    def get_providers(self) -> list[ProviderConfig]:
        """Get all configured providers."""
        return list(self._providers)

    def get_provider(self, onestop_id: str) -> ProviderConfig | None:
        """Get a provider by its onestop id."""
        return self._by_id.get(onestop_id)


class ProviderRegistryLoader:
    """Loads the provider registry from a file.

    JSON files hold ``{"providers": [...]}``, TOML files a ``[[providers]]``
    array of tables.
    """

    @staticmethod
    def _read_file(path: Path) -> dict[str, Any]:
        """Read the registry file according to its suffix."""
        if path.suffix.lower() == ".toml":
            with open(path, "rb") as f:
                return tomllib.load(f)
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Provider registry {path} must contain an object")
        return data

    @staticmethod
    def parse(data: dict[str, Any]) -> list[ProviderConfig]:
        """Parse provider entries, skipping invalid ones."""
        entries = data.get("providers", [])
        if not isinstance(entries, list):
            raise ValueError("Provider registry 'providers' must be a list")

        providers: list[ProviderConfig] = []
        for entry in entries:
            if not isinstance(entry, dict):
                logger.warning(f"Skipping provider entry that is not a table: {entry!r}")
                continue
            try:
                provider = ProviderConfig.model_validate(entry)
            except ValidationError as e:
                logger.warning(f"Skipping invalid provider entry {entry.get('onestop_id')!r}: {e}")
                continue

            ignored = [
                partner
                for partner, value in (provider.mergeable or {}).items()
                if not isinstance(value, bool)
            ]
            if ignored:
                logger.warning(
                    f"Provider {provider.onestop_id}: ignoring non-boolean mergeable "
                    f"entries for {', '.join(ignored)}"
                )
            providers.append(provider)
        return providers

    @classmethod
    def load(cls, providers_file: str) -> StaticProviderRegistry:
        """Load the registry from ``providers_file``.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file structure is invalid.
        """
        path = Path(providers_file)
        if not path.exists():
            raise FileNotFoundError(f"Provider registry not found: {path}")

        providers = cls.parse(cls._read_file(path))
        logger.info(f"Loaded {len(providers)} provider(s) from {path}")
        return StaticProviderRegistry(providers)
