"""TransitLand departure source adapter."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import aiohttp

from wayline.adapters.api_request_logger import log_api_request
from wayline.adapters.transitland.constants import (
    TRANSITLAND_API_KEY_HEADER,
    TRANSITLAND_DEFAULT_BASE_URL,
    TRANSITLAND_DEPARTURES_PATH,
)
from wayline.adapters.transitland.departure_parser import parse_departures
from wayline.domain.errors import UpstreamUnavailableError
from wayline.domain.ports.departure_source import DepartureSource

if TYPE_CHECKING:
    from wayline.domain.models.departure import RawDeparture
    from wayline.domain.models.departure_key import DepartureKey

logger = logging.getLogger(__name__)


class TransitLandDepartureSource(DepartureSource):
    """Fetches stop departures from the TransitLand REST API."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        api_key: str = "",
        base_url: str = TRANSITLAND_DEFAULT_BASE_URL,
        timeout_seconds: float = 10.0,
    ) -> None:
        """Initialize the source.

        Args:
            session: Shared aiohttp session.
            api_key: TransitLand API key.
            base_url: Base URL of the REST API.
            timeout_seconds: Total timeout of one request.
        """
        self._session = session
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    def _departures_url(self, key: DepartureKey) -> str:
        path = TRANSITLAND_DEPARTURES_PATH.format(
            feed_onestop_id=key.feed_onestop_id, stop_id=key.stop_id
        )
        return f"{self._base_url}{path}"

    async def _log_error_response(self, response: aiohttp.ClientResponse, url: str) -> None:
        """Log error response details."""
        error_text = await response.text()
        error_body = error_text[:500] if error_text else "(empty response body)"
        retry_after = response.headers.get("Retry-After")
        extra_info = f" [Retry-After: {retry_after}]" if retry_after else ""
        logger.error(
            f"TransitLand API returned status {response.status} for {url}: {error_body}{extra_info}"
        )

    async def _read_response(self, response: aiohttp.ClientResponse, url: str) -> Any:
        """Return the decoded JSON body of a successful response."""
        if response.status != 200:
            await self._log_error_response(response, url)
            raise UpstreamUnavailableError(
                f"TransitLand API returned status {response.status}", status_code=response.status
            )
        return await response.json()

    async def fetch_departures(self, key: DepartureKey, window_limit: int) -> list[RawDeparture]:
        """Fetch at most ``window_limit`` departures for a stop."""
        url = self._departures_url(key)
        params = {"limit": window_limit}
        headers = {TRANSITLAND_API_KEY_HEADER: self._api_key}
        log_api_request("GET", url, params=params, headers=headers)

        try:
            async with self._session.get(
                url, params=params, headers=headers, timeout=self._timeout
            ) as response:
                data = await self._read_response(response, url)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"Error fetching TransitLand departures for {key}: {e!r}")
            raise UpstreamUnavailableError(f"TransitLand request for {key} failed: {e!r}") from e

        departures = parse_departures(data, key.feed_onestop_id)
        logger.debug(f"Fetched {len(departures)} departures for {key} (limit {window_limit})")
        return departures
