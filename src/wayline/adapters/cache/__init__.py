"""Cache maintenance adapters."""

from wayline.adapters.cache.cache_sweeper import CacheSweeper

__all__ = ["CacheSweeper"]
