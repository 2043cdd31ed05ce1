"""
Tests for the console entry point (run.py).
"""

from datetime import datetime

import pytest

import run
from metforecast.errors import LocationUnavailable


def test_lat_without_lon_rejected():
    with pytest.raises(SystemExit):
        run.parse_args(["--lat", "51.5"])


def test_invalid_timestep_rejected():
    with pytest.raises(SystemExit):
        run.parse_args(["--timestep", "weekly"])


@pytest.mark.asyncio
async def test_manual_location(monkeypatch, sample_forecast, capsys):
    calls = {}

    class FakeClient:
        def __init__(self, settings, *, mode=None, location_provider=None):
            self.location = None

        async def fetch_manual(self, latitude, longitude, timestep):
            calls["args"] = (latitude, longitude, timestep)
            return sample_forecast

    monkeypatch.setattr(run, "ForecastClient", FakeClient)

    assert await run.main(["--lat", "51.5", "--lon", "-0.1"]) == 0
    assert calls["args"] == (51.5, -0.1, "hourly")
    out = capsys.readouterr().out
    assert "LONDON" in out
    assert "Now: 21°C" in out


@pytest.mark.asyncio
async def test_errors_reported_with_exit_code(monkeypatch, capsys):
    class FailingClient:
        def __init__(self, settings, *, mode=None, location_provider=None):
            self.location = None

        def set_timestep(self, timestep):
            pass

        async def fetch_current(self):
            raise LocationUnavailable("User denied Geolocation")

    monkeypatch.setattr(run, "ForecastClient", FailingClient)

    assert await run.main([]) == 1
    assert "User denied Geolocation" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_malformed_timeout_reported_without_traceback(monkeypatch, capsys):
    monkeypatch.setenv("REQUEST_TIMEOUT", "soon")

    assert await run.main(["--lat", "51.5", "--lon", "-0.1"]) == 1
    assert "REQUEST_TIMEOUT" in capsys.readouterr().out


def test_daily_outlook_uses_local_timezone(monkeypatch, sample_forecast):
    seen = {}
    real_daily_outlook = run.daily_outlook

    def recording_daily_outlook(payload, **kwargs):
        seen.update(kwargs)
        return real_daily_outlook(payload, **kwargs)

    monkeypatch.setattr(run, "daily_outlook", recording_daily_outlook)

    run.print_display(sample_forecast, "Somewhere")

    assert seen["tz"] == datetime.now().astimezone().tzinfo
