"""Request configuration and environment settings for the forecast client."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum

from dotenv import load_dotenv

from metforecast.errors import InvalidParameter, MissingCoordinates

DEFAULT_DEV_API_BASE_URL = "https://data.hub.api.metoffice.gov.uk/sitespecific/v0/point/"
DEVELOPMENT = "development"
PRODUCTION = "production"


class Timestep(str, Enum):
    """Frequency of the forecast points returned by the Met Office API."""

    HOURLY = "hourly"
    THREE_HOURLY = "three-hourly"
    DAILY = "daily"

    @classmethod
    def parse(cls, value) -> "Timestep":
        """Return the Timestep for value, raising InvalidParameter for anything else."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidParameter(
                "The available frequencies for timesteps are hourly, three-hourly or daily."
            ) from None


def _flag(value: bool) -> str:
    return "TRUE" if value else "FALSE"


@dataclass(frozen=True)
class Coordinates:
    """A resolved location. name/source are for display only."""

    latitude: float
    longitude: float
    name: str = ""
    source: str = "unknown"

    def display_name(self) -> str:
        if self.name:
            return self.name
        return f"{self.latitude:.2f}°N, {self.longitude:.2f}°E"


@dataclass(frozen=True)
class RequestConfig:
    """
    One forecast request. Immutable: the with_* helpers return a new config.

    latitude/longitude are required before any request; api_key only for
    direct mode. The base URL is not stored here, it depends on the mode.
    """

    timestep: Timestep = Timestep.HOURLY
    exclude_metadata: bool = False
    include_location_name: bool = True
    latitude: float | None = None
    longitude: float | None = None
    api_key: str | None = None

    def with_coordinates(self, latitude, longitude) -> "RequestConfig":
        # Stored verbatim, no range check.
        return replace(self, latitude=latitude, longitude=longitude)

    def with_timestep(self, value) -> "RequestConfig":
        return replace(self, timestep=Timestep.parse(value))

    def with_api_key(self, api_key: str | None) -> "RequestConfig":
        return replace(self, api_key=api_key)

    def require_coordinates(self) -> tuple[float, float]:
        """Return (lat, lon) or raise MissingCoordinates if either is unset."""
        if self.latitude is None or self.longitude is None:
            raise MissingCoordinates("Latitude and longitude must be supplied.")
        return self.latitude, self.longitude

    def query_params(self) -> dict:
        """Query string for the site-specific endpoint, in the order the API documents."""
        latitude, longitude = self.require_coordinates()
        return {
            "excludeParameterMetadata": _flag(self.exclude_metadata),
            "includeLocationName": _flag(self.include_location_name),
            "latitude": latitude,
            "longitude": longitude,
        }


@dataclass(frozen=True)
class Settings:
    """Values taken from the environment (and .env) at the composition root."""

    mode: str = PRODUCTION
    dev_api_base_url: str = DEFAULT_DEV_API_BASE_URL
    prod_api_base_url: str | None = None
    api_key: str | None = None
    request_timeout: float = 10.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from a mapping (defaults to os.environ). Empty values count as unset."""
        env = os.environ if environ is None else environ

        def get(key: str) -> str | None:
            value = env.get(key)
            return value.strip() if value and value.strip() else None

        timeout = get("REQUEST_TIMEOUT")
        try:
            request_timeout = float(timeout) if timeout else 10.0
        except ValueError:
            raise InvalidParameter(f"REQUEST_TIMEOUT must be a number of seconds, got {timeout!r}") from None
        return cls(
            mode=(get("METFORECAST_MODE") or PRODUCTION).lower(),
            dev_api_base_url=get("DEV_API_BASE_URL") or DEFAULT_DEV_API_BASE_URL,
            prod_api_base_url=get("PROD_API_BASE_URL"),
            api_key=get("MET_OFFICE_API_KEY"),
            request_timeout=request_timeout,
            log_level=(get("LOG_LEVEL") or "INFO").upper(),
        )


def load_settings(env_file: str | None = None) -> Settings:
    """Load .env (if present) into the process environment, then read Settings."""
    load_dotenv(env_file)
    return Settings.from_env()
