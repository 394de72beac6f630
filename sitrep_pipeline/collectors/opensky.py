from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import logging
import math
from typing import Any

import requests

from ..config import OPENSKY_BASE_URL
from ..models import FetchResult, RawAircraftState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryBox:
    name: str
    lamin: float
    lamax: float
    lomin: float
    lomax: float

    def as_params(self) -> dict[str, float]:
        return {"lamin": self.lamin, "lamax": self.lamax, "lomin": self.lomin, "lomax": self.lomax}


HOTSPOT_REGIONS: tuple[QueryBox, ...] = (
    QueryBox("Ukraine/Black Sea", 40, 52, 25, 42),
    QueryBox("Eastern Mediterranean", 30, 40, 28, 40),
    QueryBox("Israel/Lebanon", 28, 36, 32, 38),
    QueryBox("Taiwan Strait", 20, 30, 115, 128),
    QueryBox("Red Sea", 10, 22, 38, 55),
    QueryBox("Baltic Region", 52, 66, 10, 32),
    QueryBox("Persian Gulf", 22, 32, 45, 60),
    QueryBox("Korea Peninsula", 33, 43, 123, 132),
    QueryBox("Central Europe", 45, 55, 5, 25),
)

# OpenSky state vector positions.
_ICAO24 = 0
_CALLSIGN = 1
_ORIGIN_COUNTRY = 2
_LAST_CONTACT = 4
_LONGITUDE = 5
_LATITUDE = 6
_BARO_ALTITUDE = 7
_ON_GROUND = 8
_VELOCITY = 9
_TRUE_TRACK = 10


def _as_float(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    return parsed if math.isfinite(parsed) else None


def _as_epoch(value: object) -> datetime | None:
    seconds = _as_float(value)
    if seconds is None:
        return None
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def parse_state_vector(row: Any) -> RawAircraftState | None:
    if not isinstance(row, (list, tuple)) or len(row) <= _TRUE_TRACK:
        return None
    icao24 = row[_ICAO24]
    if not isinstance(icao24, str) or not icao24.strip():
        return None
    callsign = row[_CALLSIGN] if isinstance(row[_CALLSIGN], str) else ""
    origin_country = row[_ORIGIN_COUNTRY] if isinstance(row[_ORIGIN_COUNTRY], str) else ""
    return RawAircraftState(
        icao24=icao24.strip().lower(),
        callsign=callsign.strip(),
        origin_country=origin_country.strip(),
        latitude=_as_float(row[_LATITUDE]),
        longitude=_as_float(row[_LONGITUDE]),
        baro_altitude_m=_as_float(row[_BARO_ALTITUDE]),
        velocity_ms=_as_float(row[_VELOCITY]),
        true_track_deg=_as_float(row[_TRUE_TRACK]),
        on_ground=bool(row[_ON_GROUND]),
        last_contact=_as_epoch(row[_LAST_CONTACT]),
    )


def parse_states_payload(payload: Any) -> list[RawAircraftState]:
    if not isinstance(payload, dict):
        return []
    rows = payload.get("states")
    if not isinstance(rows, list):
        return []
    states: list[RawAircraftState] = []
    for row in rows:
        state = parse_state_vector(row)
        if state is not None:
            states.append(state)
    return states


class OpenSkyCollector:
    def __init__(
        self,
        *,
        base_url: str = OPENSKY_BASE_URL,
        timeout: float = 15.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch_region(self, box: QueryBox) -> FetchResult[RawAircraftState]:
        try:
            response = self.session.get(
                f"{self.base_url}/states/all",
                params=box.as_params(),
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
            if response.status_code == 429:
                logger.warning("opensky_rate_limited region=%s", box.name)
                return FetchResult.failed("rate_limited")
            response.raise_for_status()
            payload = response.json()
        except requests.Timeout:
            logger.warning("opensky_region_timeout region=%s timeout=%s", box.name, self.timeout)
            return FetchResult.failed("timeout")
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else "unknown"
            logger.warning("opensky_region_failed region=%s status=%s", box.name, status)
            return FetchResult.failed(f"http_{status}")
        except requests.exceptions.JSONDecodeError:
            logger.warning("opensky_region_bad_json region=%s", box.name)
            return FetchResult.failed("bad_json")
        except requests.RequestException:
            logger.warning("opensky_region_failed region=%s", box.name, exc_info=True)
            return FetchResult.failed("request_error")

        return FetchResult.from_items(parse_states_payload(payload))
