"""Build the HTTP request for each data source: the Met Office API directly, or our backend."""

from dataclasses import dataclass, field
from urllib.parse import urljoin

from metforecast.config import RequestConfig, Settings, Timestep
from metforecast.errors import InvalidParameter, MissingCredential
from metforecast.http_client import DEFAULT_HEADERS


@dataclass(frozen=True)
class ForecastRequest:
    """Everything needed to send one forecast request; built once, sent on every attempt."""

    method: str
    url: str
    params: dict | None = None
    headers: dict = field(default_factory=dict)
    json: dict | None = None


def build_direct_request(config: RequestConfig, settings: Settings) -> ForecastRequest:
    """
    GET {dev_api_base_url}{timestep} against the Met Office site-specific API.

    Checks, in order: API key (config, then settings), coordinates, timestep.
    Nothing is sent if any of them is missing or invalid.
    """
    api_key = config.api_key or settings.api_key
    if not api_key:
        raise MissingCredential(
            "API key must be provided either via set_api_key() or the MET_OFFICE_API_KEY environment variable."
        )
    params = config.query_params()
    timestep = Timestep.parse(config.timestep)
    return ForecastRequest(
        method="GET",
        url=settings.dev_api_base_url + timestep.value,
        params=params,
        headers={**DEFAULT_HEADERS, "apikey": api_key},
    )


def build_backend_request(config: RequestConfig, settings: Settings) -> ForecastRequest:
    """PUT {prod_api_base_url}/weather with the coordinates as strings. The backend holds the key."""
    latitude, longitude = config.require_coordinates()
    if not settings.prod_api_base_url:
        raise InvalidParameter("PROD_API_BASE_URL must be set to use the backend.")
    return ForecastRequest(
        method="PUT",
        url=urljoin(settings.prod_api_base_url, "/weather"),
        headers={"Content-Type": "application/json"},
        json={"longitude": str(longitude), "latitude": str(latitude)},
    )

