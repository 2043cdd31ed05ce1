"""Met Office forecast client: geolocation, direct or backend transport, retry with backoff."""

from metforecast.client import ForecastClient
from metforecast.config import Coordinates, RequestConfig, Settings, Timestep, load_settings
from metforecast.errors import (
    ForecastError,
    InvalidParameter,
    LocationUnavailable,
    MissingCoordinates,
    MissingCredential,
    UpstreamError,
)
from metforecast.geocode import IPLocationProvider, PlaceLocationProvider, StaticLocationProvider

__all__ = [
    "ForecastClient",
    "Coordinates",
    "RequestConfig",
    "Settings",
    "Timestep",
    "load_settings",
    "ForecastError",
    "InvalidParameter",
    "LocationUnavailable",
    "MissingCoordinates",
    "MissingCredential",
    "UpstreamError",
    "IPLocationProvider",
    "PlaceLocationProvider",
    "StaticLocationProvider",
]
