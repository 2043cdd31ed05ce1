"""Read a Met Office site-specific forecast payload into pandas views (current, hourly, daily)."""

import math

import pandas as pd


def _time_series(payload: dict) -> list[dict]:
    features = (payload or {}).get("features") or []
    if not features:
        raise ValueError("Forecast payload has no features")
    return (features[0].get("properties") or {}).get("timeSeries") or []


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _dominant_code(codes: pd.Series):
    # Ties go to the code seen last in the day.
    counts = codes.value_counts()
    tied = counts[counts == counts.max()].index
    return codes[codes.isin(tied)].iloc[-1]


def location_name(payload: dict) -> str | None:
    """Name of the forecast site, if the API was asked to include it."""
    features = (payload or {}).get("features") or []
    if not features:
        return None
    properties = features[0].get("properties") or {}
    return (properties.get("location") or {}).get("name")


def timeseries_frame(payload: dict) -> pd.DataFrame:
    """One row per forecast timestep; `time` parsed as UTC timestamps."""
    df = pd.DataFrame(_time_series(payload))
    if not df.empty:
        df["time"] = pd.to_datetime(df["time"], utc=True, format="ISO8601")
    return df


def current_conditions(payload: dict, now=None) -> dict:
    """
    Timestep for the current UTC hour, or the first timestep when the hour
    is not in the series (e.g. a daily forecast).
    """
    series = _time_series(payload)
    if not series:
        raise ValueError("Forecast payload has an empty time series")

    now = pd.Timestamp.now(tz="UTC") if now is None else pd.Timestamp(now)
    now = now.tz_localize("UTC") if now.tzinfo is None else now.tz_convert("UTC")
    df = timeseries_frame(payload)
    matches = df.index[df["time"] == now.floor("h")]
    return series[matches[0] if len(matches) else 0]


def hourly_outlook(payload: dict, hours: int = 24) -> pd.DataFrame:
    """The `hours` timesteps after the first one."""
    return timeseries_frame(payload).iloc[1 : hours + 1].reset_index(drop=True)


def daily_outlook(payload: dict, days: int = 7, tz="UTC") -> pd.DataFrame:
    """
    Per-day summary of an hourly forecast.

    Columns: day (YYYY-MM-DD in `tz`), day_name (Mon, Tue, ...), min_temp and
    max_temp (screenTemperature, rounded half up) and dominant_code (most
    frequent significantWeatherCode, latest wins a tie).
    """
    df = timeseries_frame(payload)
    if df.empty:
        return pd.DataFrame(columns=["day", "day_name", "min_temp", "max_temp", "dominant_code"])

    local = df["time"].dt.tz_convert(tz)
    df = df.assign(day=local.dt.strftime("%Y-%m-%d"), day_name=local.dt.strftime("%a"))
    daily = (
        df.groupby("day", sort=True)
        .agg(
            day_name=("day_name", "first"),
            min_temp=("screenTemperature", "min"),
            max_temp=("screenTemperature", "max"),
            dominant_code=("significantWeatherCode", _dominant_code),
        )
        .reset_index()
        .head(days)
    )
    daily["min_temp"] = daily["min_temp"].map(_round_half_up)
    daily["max_temp"] = daily["max_temp"].map(_round_half_up)
    return daily
