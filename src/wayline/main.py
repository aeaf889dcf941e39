"""Main entry point for the wayline places and departures service."""

import asyncio
import logging
import sys

import aiohttp
from pymongo import AsyncMongoClient

from wayline.adapters.cache import CacheSweeper
from wayline.adapters.clock import SystemClock
from wayline.adapters.config import AppConfig, ProviderRegistryLoader
from wayline.adapters.mongo import MongoRouteRepository, MongoStopRepository
from wayline.adapters.transitland import TransitLandDepartureSource
from wayline.adapters.web import StarletteWebAdapter
from wayline.application.services import (
    DepartureCache,
    DepartureService,
    PlaceQueryService,
    RouteLineService,
)

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure root logging to stderr."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


async def main() -> None:
    """Main application entry point."""
    config = AppConfig()
    configure_logging(config.log_level)

    try:
        provider_registry = ProviderRegistryLoader.load(config.providers_file)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Invalid provider registry: {e}")
        sys.exit(1)

    if not provider_registry.get_providers():
        logger.error("No providers configured.")
        logger.error(f"Please list providers in {config.providers_file}.")
        sys.exit(1)

    mongo_client: AsyncMongoClient = AsyncMongoClient(config.mongodb_uri)
    database = mongo_client[config.mongodb_database]
    clock = SystemClock()

    try:
        # One session for all upstream departure requests
        async with aiohttp.ClientSession() as session:
            departure_source = TransitLandDepartureSource(
                session,
                api_key=config.transitland_api_key,
                base_url=config.transitland_base_url,
                timeout_seconds=config.upstream_timeout_seconds,
            )
            if not config.transitland_api_key:
                logger.warning("TRANSITLAND_API_KEY is not set, departure requests may fail")

            stop_repository = MongoStopRepository(database)
            route_repository = MongoRouteRepository(database)
            departure_cache = DepartureCache(
                clock,
                timezone=config.timezone,
                ttl_seconds=config.departure_cache_ttl_seconds,
                bucket_size=config.departure_bucket_size,
                window_limit=config.departure_window_limit,
                broadened_window_limit=config.departure_broadened_window_limit,
                fetch_timeout_seconds=config.upstream_timeout_seconds,
            )

            place_service = PlaceQueryService(
                stop_repository,
                route_repository,
                provider_registry,
                page_size=config.places_page_size,
            )
            departure_service = DepartureService(
                stop_repository,
                provider_registry,
                departure_source,
                departure_cache,
                clock,
            )

            web_adapter = StarletteWebAdapter(
                place_service,
                departure_service,
                RouteLineService(route_repository, provider_registry),
                provider_registry,
                config,
                cache_sweeper=CacheSweeper(
                    departure_cache, config.cache_sweep_interval_seconds
                ),
            )

            try:
                await web_adapter.start()
            except KeyboardInterrupt:
                logger.info("Shutting down...")
                await web_adapter.stop()
    finally:
        await mongo_client.close()


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
