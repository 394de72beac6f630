from __future__ import annotations

import math
import re
from typing import Any

from ..models import (
    AltitudeBand,
    GeoLocation,
    NormalizedWeatherAlert,
    RawHazardReport,
    SeverityTier,
)

DEFAULT_SEVERITY: SeverityTier = "advisory"
DESCRIPTION_MAX_CHARS = 200

SEVERITY_TIERS_BY_CODE: dict[str, SeverityTier] = {
    "SEV": "warning",
    "MOD": "watch",
    "LGT": "advisory",
}

HAZARD_NAMES: dict[str, str] = {
    "TS": "Thunderstorm",
    "TURB": "Turbulence",
    "ICE": "Icing",
    "MTN OBSCN": "Mountain Obscuration",
    "IFR": "Instrument Flight Rules",
    "LLWS": "Low Level Wind Shear",
    "ASH": "Volcanic Ash",
    "SFC WND": "Surface Winds",
    "CONVECTIVE": "Convective Activity",
}

THUNDERSTORM_TEXT = (
    "Severe thunderstorms in the area. Expect turbulence, lightning, and potential hail. "
    "Aircraft should avoid this region."
)
SEVERE_TURBULENCE_TEXT = (
    "Extremely rough air. Flights may experience violent shaking. "
    "Secure all loose items and fasten seatbelts."
)
TURBULENCE_TEXT = (
    "Bumpy conditions expected. Minor discomfort for passengers but safe for operations."
)
ICING_TEXT = (
    "Freezing conditions that can cause ice buildup on aircraft. "
    "Anti-icing systems required for flight through this area."
)
VOLCANIC_ASH_TEXT = (
    "Volcanic ash detected in atmosphere. Extremely hazardous to aircraft engines. "
    "All flights should avoid this area."
)
SURFACE_WIND_TEXT = (
    "Strong surface winds making takeoffs and landings challenging. Crosswind limits may apply."
)
GENERIC_HAZARD_TEXT = (
    "Aviation hazard reported in this area. "
    "Pilots should exercise caution and check current NOTAMs."
)

# (substrings, text) pairs tried in order; turbulence is split by severity below.
HAZARD_FAMILIES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("ts", "convective"), THUNDERSTORM_TEXT),
    (("turb",), TURBULENCE_TEXT),
    (("ice",), ICING_TEXT),
    (("ash",), VOLCANIC_ASH_TEXT),
    (("sfc wnd", "wind"), SURFACE_WIND_TEXT),
)

REGIONAL_CENTERS: dict[str, tuple[float, float]] = {
    "K": (40.0, -100.0),
    "E": (50.0, 10.0),
    "L": (45.0, 10.0),
    "U": (55.0, 40.0),
    "O": (30.0, 45.0),
    "Z": (35.0, 120.0),
}
DEFAULT_REGIONAL_CENTER = (40.0, 0.0)

ICAO_REGIONS: dict[str, str] = {
    "K": "North America",
    "E": "Northern Europe",
    "L": "Southern Europe",
    "U": "Eastern Europe",
    "O": "Middle East",
    "Z": "Asia Pacific",
    "V": "South Asia",
}
DEFAULT_ICAO_REGION = "Global"

_COORD_PAIR_RE = re.compile(
    r"(\d+(?:\.\d+)?)\s*([NS])\s*(\d+(?:\.\d+)?)\s*([EW])",
    flags=re.IGNORECASE,
)


def severity_tier(code: str | None) -> SeverityTier:
    if not code:
        return DEFAULT_SEVERITY
    return SEVERITY_TIERS_BY_CODE.get(str(code).strip().upper(), DEFAULT_SEVERITY)


def hazard_display_name(code: str | None) -> str:
    if not code:
        return "Weather Hazard"
    return HAZARD_NAMES.get(code.strip().upper(), code.strip())


def laymans_description(hazard: str | None, severity: str | None) -> str:
    lowered = (hazard or "").lower()
    severe = (severity or "").strip().upper() == "SEV"
    for needles, text in HAZARD_FAMILIES:
        if not any(needle in lowered for needle in needles):
            continue
        if text is TURBULENCE_TEXT and severe:
            return SEVERE_TURBULENCE_TEXT
        return text
    return GENERIC_HAZARD_TEXT


def truncate_description(raw_text: str | None) -> str:
    if not raw_text:
        return "Aviation weather alert"
    return raw_text[:DESCRIPTION_MAX_CHARS]


def _as_float(value: Any) -> float | None:
    try:
        if value is None:
            return None
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    return parsed if math.isfinite(parsed) else None


def parse_coordinates(coords: Any) -> tuple[float, float] | None:
    """Resolve an encoded coordinate string, or a list of lat/lon points, to one position."""
    if not coords:
        return None
    if isinstance(coords, list):
        points = []
        for point in coords:
            if not isinstance(point, dict):
                continue
            lat = _as_float(point.get("lat"))
            lon = _as_float(point.get("lon", point.get("lng")))
            if lat is None or lon is None:
                continue
            points.append((lat, lon))
        if not points:
            return None
        return (
            sum(lat for lat, _ in points) / len(points),
            sum(lon for _, lon in points) / len(points),
        )
    match = _COORD_PAIR_RE.search(str(coords))
    if not match:
        return None
    lat = float(match.group(1))
    lng = float(match.group(3))
    if match.group(2).upper() == "S":
        lat = -lat
    if match.group(4).upper() == "W":
        lng = -lng
    return lat, lng


def _icao_prefix(icao_id: str | None) -> str:
    return (icao_id or "").strip()[:1].upper()


def regional_center(icao_id: str | None) -> tuple[float, float]:
    return REGIONAL_CENTERS.get(_icao_prefix(icao_id), DEFAULT_REGIONAL_CENTER)


def region_from_icao(icao_id: str | None) -> str:
    return ICAO_REGIONS.get(_icao_prefix(icao_id), DEFAULT_ICAO_REGION)


def altitude_band(flight_level_low: int | None, flight_level_high: int | None) -> AltitudeBand | None:
    if not flight_level_low or not flight_level_high:
        return None
    return AltitudeBand(min_ft=flight_level_low * 100, max_ft=flight_level_high * 100)


def translate_report(report: RawHazardReport) -> NormalizedWeatherAlert:
    position = None
    if report.latitude is not None and report.longitude is not None:
        position = (report.latitude, report.longitude)
    if position is None:
        position = parse_coordinates(report.coords)
    if position is None:
        position = regional_center(report.icao_id)
    lat, lng = position

    station = report.icao_id or "Unknown"
    return NormalizedWeatherAlert(
        id=f"{report.report_type.lower()}-{report.report_id}",
        type=report.report_type,
        title=f"{hazard_display_name(report.hazard)} - {station}",
        description=truncate_description(report.raw_text),
        laymans_description=laymans_description(report.hazard, report.severity),
        severity=severity_tier(report.severity),
        location=GeoLocation(lat=lat, lng=lng, region=region_from_icao(report.icao_id)),
        affected_altitude=altitude_band(report.flight_level_low, report.flight_level_high),
        valid_from=report.valid_from,
        valid_to=report.valid_to,
    )
