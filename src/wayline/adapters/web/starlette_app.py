"""Starlette web adapter exposing places and departures over HTTP."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.routing import Route

from wayline.adapters.config import AppConfig
from wayline.adapters.web.rate_limit_middleware import RateLimitMiddleware
from wayline.adapters.web.request_params import parse_departure_params, parse_geo_query
from wayline.adapters.web.serializers import (
    places_to_feature_collection,
    route_lines_to_feature_collection,
    stop_departures_to_dict,
)
from wayline.domain.errors import (
    InvalidQueryError,
    NotFoundError,
    UpstreamUnavailableError,
)

if TYPE_CHECKING:
    from starlette.requests import Request

    from wayline.domain.contracts.cache_sweeper import CacheSweeperProtocol
    from wayline.domain.ports import (
        DepartureQueryService,
        PlaceQueryService,
        ProviderRegistry,
        RouteLineQueryService,
    )

logger = logging.getLogger(__name__)


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


class StarletteWebAdapter:
    """Builds and serves the HTTP API."""

    def __init__(
        self,
        place_service: PlaceQueryService,
        departure_service: DepartureQueryService,
        route_line_service: RouteLineQueryService,
        provider_registry: ProviderRegistry,
        config: AppConfig,
        cache_sweeper: CacheSweeperProtocol | None = None,
    ) -> None:
        """Initialize the web adapter.

        Args:
            place_service: Service answering place queries.
            departure_service: Service answering departure board queries.
            route_line_service: Service answering route line queries.
            provider_registry: Provider metadata served to clients.
            config: Application configuration.
            cache_sweeper: Background cache maintenance started with the server.
        """
        if not isinstance(config, AppConfig):
            raise TypeError("config must be an AppConfig instance")
        if not callable(getattr(place_service, "find_places", None)):
            raise TypeError("place_service must implement PlaceQueryService protocol")
        if not callable(getattr(departure_service, "get_departures", None)):
            raise TypeError("departure_service must implement DepartureQueryService protocol")
        if not callable(getattr(route_line_service, "get_route_lines", None)):
            raise TypeError("route_line_service must implement RouteLineQueryService protocol")

        self.place_service = place_service
        self.departure_service = departure_service
        self.route_line_service = route_line_service
        self.provider_registry = provider_registry
        self.config = config
        self.cache_sweeper = cache_sweeper
        self._server: Any | None = None

    async def places(self, request: Request) -> Response:
        """GET /places?lat&lon&radius - nearby places as GeoJSON."""
        try:
            query = parse_geo_query(
                request.query_params,
                default_radius=self.config.default_radius_meters,
                max_radius=self.config.max_radius_meters,
            )
        except InvalidQueryError as e:
            return _error(str(e), 400)

        try:
            places = await self.place_service.find_places(query)
        except Exception as e:
            logger.error(f"Error fetching places: {e}", exc_info=True)
            return _error("Failed to fetch stops", 500)

        return JSONResponse(places_to_feature_collection(places))

    async def departures(self, request: Request) -> Response:
        """GET /departures?stop_id&feed_onestop_id - categorized departures of a stop."""
        try:
            feed_onestop_id, stop_id = parse_departure_params(request.query_params)
            board = await self.departure_service.get_departures(feed_onestop_id, stop_id)
        except InvalidQueryError as e:
            return _error(str(e), 400)
        except NotFoundError as e:
            return _error(str(e), 404)
        except UpstreamUnavailableError as e:
            logger.error(f"Departures unavailable: {e}")
            return _error("Failed to fetch departures", 502)
        except Exception as e:
            logger.error(f"Error fetching departures: {e}", exc_info=True)
            return _error("Failed to fetch departures", 500)

        return JSONResponse(stop_departures_to_dict(board))

    async def routes(self, _request: Request) -> Response:
        """GET /routes - route geometries of providers showing lines, as GeoJSON."""
        try:
            lines = await self.route_line_service.get_route_lines()
        except Exception as e:
            logger.error(f"Error fetching routes: {e}", exc_info=True)
            return _error("Failed to fetch routes", 500)

        return JSONResponse(route_lines_to_feature_collection(lines))

    async def providers(self, _request: Request) -> Response:
        """GET /providers - provider display metadata."""
        return JSONResponse(
            {
                "providers": [
                    provider.display_metadata()
                    for provider in self.provider_registry.get_providers()
                ]
            }
        )

    async def healthz(self, _request: Request) -> Response:
        """Health check endpoint for load balancers and monitoring."""
        return PlainTextResponse("Ok")

    def build_app(self) -> Starlette:
        """Create the Starlette application."""
        routes = [
            Route("/places", self.places, methods=["GET"]),
            Route("/api/stops", self.places, methods=["GET"]),
            Route("/departures", self.departures, methods=["GET"]),
            Route("/api/departures-realtime", self.departures, methods=["GET"]),
            Route("/routes", self.routes, methods=["GET"]),
            Route("/api/routes", self.routes, methods=["GET"]),
            Route("/providers", self.providers, methods=["GET"]),
            Route("/healthz", self.healthz, methods=["GET"]),
        ]
        middleware = [
            Middleware(
                RateLimitMiddleware,
                requests_per_minute=self.config.rate_limit_per_minute,
            )
        ]
        return Starlette(routes=routes, middleware=middleware)

    async def start(self) -> None:
        """Start background tasks and serve until shutdown."""
        import uvicorn

        if self.cache_sweeper is not None:
            await self.cache_sweeper.start()

        server_config = uvicorn.Config(
            self.build_app(),
            host=self.config.host,
            port=self.config.port,
            log_level=self.config.log_level.lower(),
        )
        self._server = uvicorn.Server(server_config)
        logger.info(f"Serving on http://{self.config.host}:{self.config.port}")
        try:
            await self._server.serve()
        finally:
            await self.stop()

    async def stop(self) -> None:
        """Stop background tasks and ask the server to exit."""
        if self.cache_sweeper is not None:
            await self.cache_sweeper.stop()
        if self._server:
            self._server.should_exit = True
