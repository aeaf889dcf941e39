"""Configuration adapters."""

from wayline.adapters.config.app_config import AppConfig
from wayline.adapters.config.provider_registry_loader import (
    ProviderRegistryLoader,
    StaticProviderRegistry,
)

__all__ = ["AppConfig", "ProviderRegistryLoader", "StaticProviderRegistry"]
