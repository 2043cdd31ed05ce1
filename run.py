"""Console weather dashboard: forecast for this device's location (or --lat/--lon). Loads .env from project root."""

import argparse
import asyncio
import logging
import os
import sys
from datetime import datetime

from metforecast import ForecastClient, ForecastError, PlaceLocationProvider, load_settings
from metforecast.forecast import current_conditions, daily_outlook, location_name

ENV_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), ".env")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Met Office forecast for your location")
    parser.add_argument("--lat", type=float, help="Latitude (use with --lon; skips geolocation)")
    parser.add_argument("--lon", type=float, help="Longitude (use with --lat)")
    parser.add_argument("--place", help="Place name to geocode instead of IP geolocation")
    parser.add_argument(
        "--timestep", default="hourly", choices=["hourly", "three-hourly", "daily"]
    )
    parser.add_argument("--mode", help="Override METFORECAST_MODE (development = direct API)")
    args = parser.parse_args(argv)
    if (args.lat is None) != (args.lon is None):
        parser.error("--lat and --lon must be given together")
    return args


def print_display(payload: dict, fallback_name: str) -> None:
    """Print current conditions and the daily outlook."""
    name = location_name(payload) or fallback_name
    now = current_conditions(payload)
    print("\n" + "=" * 45)
    print(f"🌤️  {name.upper()}")
    print(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}")
    print("-" * 45)
    if "screenTemperature" in now:
        feels_like = now.get("feelsLikeTemperature", now["screenTemperature"])
        print(f"Now: {round(now['screenTemperature'])}°C, feels like {round(feels_like)}°C")
        print(f"Wind: {now.get('windSpeed10m', '?')} m/s  Rain chance: {now.get('probOfPrecipitation', '?')}%")
        print("-" * 45)
        local_tz = datetime.now().astimezone().tzinfo
        for row in daily_outlook(payload, tz=local_tz).itertuples():
            print(f"• {row.day_name}  {row.min_temp:>3}° / {row.max_temp:>3}°  (code {row.dominant_code})")
    else:
        for key, value in now.items():
            print(f"• {key}: {value}")
    print("=" * 45 + "\n")


async def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        settings = load_settings(ENV_FILE)
    except ForecastError as e:
        print(f"❌ {e}")
        return 1
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    provider = PlaceLocationProvider(args.place) if args.place else None
    client = ForecastClient(settings, mode=args.mode, location_provider=provider)
    try:
        if args.lat is not None:
            payload = await client.fetch_manual(args.lat, args.lon, args.timestep)
        else:
            client.set_timestep(args.timestep)
            payload = await client.fetch_current()
        print_display(payload, client.location.display_name() if client.location else "Unknown location")
    except ForecastError as e:
        print(f"❌ {e}")
        return 1
    except ValueError as e:
        print(f"⚠️ No weather data available: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
