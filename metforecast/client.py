"""ForecastClient: locate the user, pick the data source and fetch the forecast with retries."""

import asyncio
import logging

import requests

from metforecast.config import DEVELOPMENT, Coordinates, RequestConfig, Settings
from metforecast.errors import ForecastError, LocationUnavailable
from metforecast.geocode import IPLocationProvider
from metforecast.http_client import make_session
from metforecast.retry import MAX_ATTEMPTS, send_with_retry
from metforecast.transport import ForecastRequest, build_backend_request, build_direct_request

logger = logging.getLogger(__name__)


class ForecastClient:
    """
    Met Office forecast client.

    In development mode requests go straight to the Met Office API with the
    API key; in any other mode they go to our backend, which holds the key.
    One instance serves one fetch at a time.

    Args:
        settings: environment settings; read from os.environ when omitted.
        mode: overrides settings.mode ("development" or anything else).
        location_provider: object with `async locate() -> Coordinates`.
            Defaults to IP geolocation.
        session: requests session shared by all requests.
        sleep: awaitable used for backoff delays.
        attempts: attempts per fetch, including the first.
        retry_client_errors: set False to stop retrying on 4xx responses.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        mode: str | None = None,
        location_provider=None,
        session: requests.Session | None = None,
        sleep=asyncio.sleep,
        attempts: int = MAX_ATTEMPTS,
        retry_client_errors: bool = True,
    ):
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        self.settings = settings or Settings.from_env()
        self.mode = (mode or self.settings.mode).lower()
        self.session = session or make_session()
        self.location_provider = (
            location_provider if location_provider is not None else IPLocationProvider(self.session)
        )
        self.sleep = sleep
        self.attempts = attempts
        self.retry_client_errors = retry_client_errors
        self.config = RequestConfig()
        self.location: Coordinates | None = None

    def set_coordinates(self, latitude, longitude) -> None:
        self.config = self.config.with_coordinates(latitude, longitude)

    def set_timestep(self, timestep) -> None:
        """Accepts "hourly", "three-hourly" or "daily"; raises InvalidParameter otherwise."""
        self.config = self.config.with_timestep(timestep)

    def set_api_key(self, api_key: str) -> None:
        self.config = self.config.with_api_key(api_key)

    async def resolve_location(self) -> Coordinates:
        """Current device coordinates from the location provider. Raises LocationUnavailable."""
        if self.location_provider is None:
            raise LocationUnavailable("Geolocation is not supported in this environment.")
        return await self.location_provider.locate()

    async def fetch_direct(self, config: RequestConfig | None = None):
        """Call the Met Office API directly. Exposes the API key; do not use in production."""
        config = self.config if config is None else config
        request = build_direct_request(config, self.settings)
        logger.warning(
            "Calling the Met Office API directly. The API key is sent from this process; "
            "not safe for production."
        )
        return await self._send(request)

    async def fetch_via_backend(self, config: RequestConfig | None = None):
        """Ask our backend for the forecast at the configured coordinates."""
        config = self.config if config is None else config
        return await self._send(build_backend_request(config, self.settings))

    async def fetch_current(self):
        """Forecast for the device location, from the source matching self.mode."""
        try:
            self.location = await self.resolve_location()
            self.set_coordinates(self.location.latitude, self.location.longitude)
            if self.mode == DEVELOPMENT:
                return await self.fetch_direct()
            return await self.fetch_via_backend()
        except ForecastError as e:
            logger.error("Error fetching weather data: %s", e)
            raise

    async def fetch_manual(self, latitude, longitude, timestep="hourly"):
        """Direct-mode forecast for explicit coordinates, skipping geolocation."""
        self.set_coordinates(latitude, longitude)
        if timestep:
            self.set_timestep(timestep)
        self.location = Coordinates(latitude, longitude, source="manual")
        return await self.fetch_direct()

    async def _send(self, request: ForecastRequest):
        return await send_with_retry(
            self.session,
            request,
            attempts=self.attempts,
            timeout=self.settings.request_timeout,
            sleep=self.sleep,
            retry_client_errors=self.retry_client_errors,
        )
