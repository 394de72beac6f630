from __future__ import annotations

import logging
import math
from typing import Any

import requests

from ..config import AVIATION_WEATHER_BASE_URL
from ..models import FetchResult, HazardReportType, RawHazardReport

logger = logging.getLogger(__name__)

SIGMET_HAZARDS = "convective,turb,ice,ash"
_REPORT_TYPES: dict[str, HazardReportType] = {
    "SIGMET": "SIGMET",
    "AIRMET": "AIRMET",
    "PIREP": "PIREP",
}


def _as_int(value: object) -> int | None:
    parsed = _as_float(value)
    if parsed is None:
        return None
    return int(parsed)


def _as_float(value: object) -> float | None:
    try:
        if value is None or isinstance(value, bool):
            return None
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    return parsed if math.isfinite(parsed) else None


def _as_text(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _as_time(value: object) -> str | None:
    text = _as_text(value)
    return text or None


def parse_sigmet(row: Any) -> RawHazardReport | None:
    if not isinstance(row, dict):
        return None
    report_id = row.get("airSigmetId")
    if report_id is None:
        return None
    report_type = _REPORT_TYPES.get(_as_text(row.get("airSigmetType")).upper(), "SIGMET")
    coords = row.get("coords")
    if not isinstance(coords, (str, list)):
        coords = None
    return RawHazardReport(
        report_id=str(report_id),
        report_type=report_type,
        icao_id=_as_text(row.get("icaoId")),
        hazard=_as_text(row.get("hazard")),
        severity=_as_text(row.get("severity")),
        valid_from=_as_time(row.get("validTimeFrom")),
        valid_to=_as_time(row.get("validTimeTo")),
        raw_text=_as_text(row.get("rawAirSigmet")),
        flight_level_low=_as_int(row.get("altLow")),
        flight_level_high=_as_int(row.get("altHigh")),
        coords=coords,
    )


def _pirep_hazard(row: dict[str, Any]) -> tuple[str, str]:
    if row.get("turbType") or row.get("turbInten"):
        return "TURB", _as_text(row.get("turbInten")).upper()
    if row.get("icgType") or row.get("icgInten"):
        return "ICE", _as_text(row.get("icgInten")).upper()
    return _as_text(row.get("wxString")), ""


def parse_pirep(row: Any) -> RawHazardReport | None:
    if not isinstance(row, dict):
        return None
    report_id = row.get("pirepId")
    lat = _as_float(row.get("lat"))
    lon = _as_float(row.get("lon"))
    if report_id is None or lat is None or lon is None:
        return None
    hazard, severity = _pirep_hazard(row)
    altitude_ft = _as_int(row.get("altFt"))
    flight_level = altitude_ft // 100 if altitude_ft else None
    return RawHazardReport(
        report_id=str(report_id),
        report_type="PIREP",
        icao_id=_as_text(row.get("icaoId")),
        hazard=hazard,
        severity=severity,
        valid_from=_as_time(row.get("obsTime")),
        valid_to=None,
        raw_text=_as_text(row.get("rawOb")),
        flight_level_low=flight_level,
        flight_level_high=flight_level,
        latitude=lat,
        longitude=lon,
    )


def _parse_rows(payload: Any, parser) -> list[RawHazardReport]:
    if not isinstance(payload, list):
        return []
    reports: list[RawHazardReport] = []
    for row in payload:
        report = parser(row)
        if report is not None:
            reports.append(report)
    return reports


class AviationWeatherCollector:
    def __init__(
        self,
        *,
        base_url: str = AVIATION_WEATHER_BASE_URL,
        timeout: float = 15.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get_json(self, path: str, params: dict[str, Any], label: str) -> tuple[Any, str | None]:
        try:
            response = self.session.get(
                f"{self.base_url}{path}",
                params=params,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
            if response.status_code == 429:
                logger.warning("aviation_weather_rate_limited feed=%s", label)
                return None, "rate_limited"
            response.raise_for_status()
            if response.status_code == 204:
                return [], None
            return response.json(), None
        except requests.Timeout:
            logger.warning("aviation_weather_timeout feed=%s timeout=%s", label, self.timeout)
            return None, "timeout"
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else "unknown"
            logger.warning("aviation_weather_failed feed=%s status=%s", label, status)
            return None, f"http_{status}"
        except requests.exceptions.JSONDecodeError:
            logger.warning("aviation_weather_bad_json feed=%s", label)
            return None, "bad_json"
        except requests.RequestException:
            logger.warning("aviation_weather_failed feed=%s", label, exc_info=True)
            return None, "request_error"

    def fetch_sigmets(self) -> FetchResult[RawHazardReport]:
        payload, error = self._get_json(
            "/airsigmet",
            {"format": "json", "hazard": SIGMET_HAZARDS},
            "sigmet",
        )
        if error is not None:
            return FetchResult.failed(error)
        return FetchResult.from_items(_parse_rows(payload, parse_sigmet))

    def fetch_pireps(self) -> FetchResult[RawHazardReport]:
        payload, error = self._get_json("/pirep", {"format": "json"}, "pirep")
        if error is not None:
            return FetchResult.failed(error)
        return FetchResult.from_items(_parse_rows(payload, parse_pirep))
