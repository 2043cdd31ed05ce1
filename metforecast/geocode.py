"""Resolve the user's location: IP geolocation, a place name via Open-Meteo Geocoding, or fixed coordinates."""

import asyncio
import logging

import requests

from metforecast.config import Coordinates
from metforecast.errors import LocationUnavailable
from metforecast.http_client import make_session

logger = logging.getLogger(__name__)

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"

# Tried in order; coordinates are the only required fields.
IP_SERVICES = (
    {
        "name": "ipwho.is",
        "url": "https://ipwho.is/",
        "lat_key": "latitude",
        "lon_key": "longitude",
        "city_key": "city",
    },
    {
        "name": "ip-api.com",
        "url": "http://ip-api.com/json/?fields=lat,lon,city,status",
        "lat_key": "lat",
        "lon_key": "lon",
        "city_key": "city",
    },
    {
        "name": "ipapi.co",
        "url": "https://ipapi.co/json/",
        "lat_key": "latitude",
        "lon_key": "longitude",
        "city_key": "city",
    },
)


class IPLocationProvider:
    """Device location from the public IP address. Falls through the services until one answers."""

    def __init__(self, session: requests.Session | None = None, *, services=IP_SERVICES, timeout: float = 5):
        self.session = session or make_session()
        self.services = services
        self.timeout = timeout

    async def locate(self) -> Coordinates:
        for service in self.services:
            try:
                coords = await asyncio.to_thread(self._query, service)
            except (requests.RequestException, ValueError, TypeError) as e:
                logger.debug("Geolocation via %s failed: %s", service["name"], e)
                continue
            if coords is not None:
                logger.info("Location %s via %s", coords.display_name(), coords.source)
                return coords
        raise LocationUnavailable("Could not detect location from IP address.")

    def _query(self, service: dict) -> Coordinates | None:
        response = self.session.get(service["url"], timeout=self.timeout)
        if response.status_code != 200:
            return None
        data = response.json()
        if not isinstance(data, dict):
            return None
        if data.get("status") == "fail" or data.get("success") is False:
            return None

        lat = data.get(service["lat_key"])
        lon = data.get(service["lon_key"])
        if lat is None or lon is None:
            return None
        lat, lon = float(lat), float(lon)
        if not (-90 <= lat <= 90 and -180 <= lon <= 180):
            return None
        return Coordinates(
            latitude=lat,
            longitude=lon,
            name=data.get(service["city_key"]) or "",
            source=service["name"],
        )


class PlaceLocationProvider:
    """
    Location of a named city/region (e.g. "Exeter", "Porto").

    Args:
        place: free-text place name passed to the geocoding search.
        session: optional requests session to reuse.
        timeout: request timeout in seconds.
    """

    def __init__(self, place: str, session: requests.Session | None = None, *, timeout: float = 10):
        self.place = place
        self.session = session or make_session()
        self.timeout = timeout

    async def locate(self) -> Coordinates:
        try:
            res = await asyncio.to_thread(self._search)
        except (requests.RequestException, ValueError) as e:
            raise LocationUnavailable(f"Geocoding failed for '{self.place}': {e}") from e

        if not isinstance(res, dict):
            raise LocationUnavailable(f"Unexpected geocoding response for '{self.place}'")
        if res.get("error"):
            raise LocationUnavailable(res.get("reason", "Geocoding API error"))
        results = res.get("results") or []
        if not isinstance(results, list) or not results:
            raise LocationUnavailable(f"No coordinates found for '{self.place}'")
        loc = results[0]
        if not isinstance(loc, dict) or loc.get("latitude") is None or loc.get("longitude") is None:
            raise LocationUnavailable(f"No coordinates found for '{self.place}'")
        name = ", ".join(part for part in (loc.get("name"), loc.get("country")) if part)
        logger.info("Location: %s", name)
        return Coordinates(
            latitude=loc["latitude"],
            longitude=loc["longitude"],
            name=name,
            source="open-meteo",
        )

    def _search(self):
        params = {"name": self.place, "count": 1, "language": "en", "format": "json"}
        return self.session.get(GEOCODING_URL, params=params, timeout=self.timeout).json()


class StaticLocationProvider:
    """Always returns the same coordinates (a saved home location, tests)."""

    def __init__(self, latitude: float, longitude: float, name: str = ""):
        self.coordinates = Coordinates(latitude, longitude, name=name, source="static")

    async def locate(self) -> Coordinates:
        return self.coordinates
