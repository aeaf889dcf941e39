"""Adapters layer - external system integrations."""

from wayline.adapters.config import AppConfig, ProviderRegistryLoader
from wayline.adapters.mongo import MongoRouteRepository, MongoStopRepository
from wayline.adapters.transitland import TransitLandDepartureSource

__all__ = [
    "AppConfig",
    "MongoRouteRepository",
    "MongoStopRepository",
    "ProviderRegistryLoader",
    "TransitLandDepartureSource",
]
