"""Web adapters."""

from wayline.adapters.web.starlette_app import StarletteWebAdapter

__all__ = ["StarletteWebAdapter"]
