"""
Shared fixtures: settings, a fake requests session and a sleep that records delays.
"""

from unittest.mock import MagicMock

import pytest
import requests

from metforecast.config import Settings

NOT_JSON = object()


class FakeResponse:
    """Just enough of requests.Response for the retry loop and providers."""

    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self._body = {} if body is None else body

    def json(self):
        if self._body is NOT_JSON:
            raise requests.exceptions.JSONDecodeError("Expecting value", "<html>", 0)
        return self._body


class RecordingSleep:
    """Async stand-in for asyncio.sleep; records each delay instead of waiting."""

    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def sample_forecast():
    """Trimmed Met Office site-specific hourly payload."""
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": [-0.1, 51.5, 11.0]},
                "properties": {
                    "location": {"name": "London"},
                    "requestPointDistance": 120.5,
                    "modelRunDate": "2025-07-19T12:00Z",
                    "timeSeries": [
                        {"time": "2025-07-19T12:00Z", "screenTemperature": 21.4, "significantWeatherCode": 1},
                        {"time": "2025-07-19T13:00Z", "screenTemperature": 22.5, "significantWeatherCode": 3},
                        {"time": "2025-07-19T14:00Z", "screenTemperature": 23.6, "significantWeatherCode": 3},
                        {"time": "2025-07-20T09:00Z", "screenTemperature": 15.2, "significantWeatherCode": 12},
                        {"time": "2025-07-20T10:00Z", "screenTemperature": 16.5, "significantWeatherCode": 12},
                        {"time": "2025-07-20T11:00Z", "screenTemperature": 18.0, "significantWeatherCode": 7},
                    ],
                },
            }
        ],
    }


@pytest.fixture
def settings():
    return Settings(
        mode="development",
        dev_api_base_url="https://api.example.com/point/",
        prod_api_base_url="https://backend.example.com",
        api_key=None,
        request_timeout=5.0,
    )


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def sleep():
    return RecordingSleep()
