"""TransitLand API adapters."""

from wayline.adapters.transitland.transitland_departure_source import TransitLandDepartureSource

__all__ = ["TransitLandDepartureSource"]
