from __future__ import annotations

from dataclasses import dataclass
import os


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    return normalized in {"1", "true", "yes", "on"}


def _as_int(value: str | None, default: int) -> int:
    if value is None or value.strip() == "":
        return default
    return int(value)


def _as_float(value: str | None, default: float) -> float:
    if value is None or value.strip() == "":
        return default
    return float(value)


def _as_url(value: str | None, default: str) -> str:
    raw = (value or "").strip().strip('"').strip("'")
    if not raw:
        return default
    if "://" not in raw:
        raw = f"https://{raw}"
    return raw.rstrip("/")


OPENSKY_BASE_URL = "https://opensky-network.org/api"
POLYMARKET_BASE_URL = "https://gamma-api.polymarket.com"
AVIATION_WEATHER_BASE_URL = "https://aviationweather.gov/api/data"


@dataclass(frozen=True)
class Settings:
    opensky_base_url: str = OPENSKY_BASE_URL
    flights_ttl_seconds: float = 30.0
    flights_timeout_seconds: float = 15.0
    flights_region_delay_seconds: float = 0.3
    polymarket_base_url: str = POLYMARKET_BASE_URL
    predictions_ttl_seconds: float = 30.0
    predictions_timeout_seconds: float = 15.0
    predictions_fetch_limit: int = 50
    predictions_max_results: int = 15
    aviation_weather_base_url: str = AVIATION_WEATHER_BASE_URL
    weather_ttl_seconds: float = 300.0
    weather_timeout_seconds: float = 15.0
    weather_max_alerts: int = 10
    weather_include_pireps: bool = False
    poll_interval_seconds: int = 30

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = cls()
        return cls(
            opensky_base_url=_as_url(os.getenv("OPENSKY_BASE_URL"), defaults.opensky_base_url),
            flights_ttl_seconds=_as_float(
                os.getenv("FLIGHTS_TTL_SECONDS"), defaults.flights_ttl_seconds
            ),
            flights_timeout_seconds=_as_float(
                os.getenv("FLIGHTS_TIMEOUT_SECONDS"), defaults.flights_timeout_seconds
            ),
            flights_region_delay_seconds=_as_float(
                os.getenv("FLIGHTS_REGION_DELAY_SECONDS"),
                defaults.flights_region_delay_seconds,
            ),
            polymarket_base_url=_as_url(
                os.getenv("POLYMARKET_BASE_URL"), defaults.polymarket_base_url
            ),
            predictions_ttl_seconds=_as_float(
                os.getenv("PREDICTIONS_TTL_SECONDS"), defaults.predictions_ttl_seconds
            ),
            predictions_timeout_seconds=_as_float(
                os.getenv("PREDICTIONS_TIMEOUT_SECONDS"), defaults.predictions_timeout_seconds
            ),
            predictions_fetch_limit=_as_int(
                os.getenv("PREDICTIONS_FETCH_LIMIT"), defaults.predictions_fetch_limit
            ),
            predictions_max_results=_as_int(
                os.getenv("PREDICTIONS_MAX_RESULTS"), defaults.predictions_max_results
            ),
            aviation_weather_base_url=_as_url(
                os.getenv("AVIATION_WEATHER_BASE_URL"), defaults.aviation_weather_base_url
            ),
            weather_ttl_seconds=_as_float(
                os.getenv("WEATHER_TTL_SECONDS"), defaults.weather_ttl_seconds
            ),
            weather_timeout_seconds=_as_float(
                os.getenv("WEATHER_TIMEOUT_SECONDS"), defaults.weather_timeout_seconds
            ),
            weather_max_alerts=_as_int(os.getenv("WEATHER_MAX_ALERTS"), defaults.weather_max_alerts),
            weather_include_pireps=_as_bool(
                os.getenv("WEATHER_INCLUDE_PIREPS"), defaults.weather_include_pireps
            ),
            poll_interval_seconds=_as_int(
                os.getenv("POLL_INTERVAL_SECONDS"), defaults.poll_interval_seconds
            ),
        )
