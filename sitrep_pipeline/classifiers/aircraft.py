from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import math
import re
from typing import Iterable

from ..geo import resolve_region
from ..models import AircraftCategory, GeoLocation, NormalizedFlight, RawAircraftState

FEET_PER_METER = 3.28084
KNOTS_PER_MS = 1.944
WATCHLIST_ALTITUDE_FT = 35000
CIVIL_REGISTRATION_ALTITUDE_FT = 40000

# Known military/government callsign prefixes with their pre-associated category.
MILITARY_CALLSIGN_REGISTRY: dict[str, AircraftCategory] = {
    "RRR": "surveillance",
    "FORTE": "drone",
    "LAGR": "tanker",
    "DUKE": "surveillance",
    "VIPER": "fighter",
    "JAKE": "surveillance",
    "REDEYE": "surveillance",
    "RCH": "transport",
    "REACH": "transport",
    "NCHO": "surveillance",
    "SPAR": "government",
    "SAM": "government",
    "NAVY": "military",
    "USAF": "military",
    "RAF": "military",
    "GAF": "military",
    "IAF": "military",
    "PLN": "military",
    "CHAOS": "military",
    "OMNI": "military",
    "EVAC": "military",
    "JUDGE": "military",
    "HOMER": "tanker",
    "EVIL": "military",
    "DOOM": "bomber",
    "BATT": "military",
    "BOXER": "military",
    "CODY": "military",
    "COBRA": "fighter",
    "DARK": "bomber",
    "DEMON": "fighter",
    "EAGLE": "fighter",
    "GIANT": "transport",
    "HAWK": "military",
    "IRON": "military",
    "LANCE": "military",
    "MAGMA": "military",
    "NIGHT": "bomber",
    "ORCA": "military",
    "PANTH": "military",
    "QUID": "military",
    "RAZOR": "military",
    "REAPER": "drone",
    "SLAM": "military",
    "SWORD": "military",
    "TIGER": "military",
    "VENOM": "military",
    "WOLF": "military",
    "ZERO": "military",
    "MMF": "military",
    "RFF": "military",
    "IAM": "military",
    "CNV": "military",
    "CFC": "military",
    "AIO": "military",
}

# Origin countries whose military aircraft are of standing interest.
WATCHLIST_COUNTRIES: frozenset[str] = frozenset(
    {
        "United States",
        "Russia",
        "China",
        "United Kingdom",
        "France",
        "Germany",
        "Israel",
        "Ukraine",
        "Poland",
        "Turkey",
        "Japan",
        "South Korea",
        "Australia",
        "Canada",
        "Italy",
        "Spain",
        "Netherlands",
        "Belgium",
        "Norway",
        "Sweden",
        "Finland",
        "Romania",
        "Greece",
    }
)

AIRCRAFT_TYPE_NAMES: dict[str, str] = {
    "RRR": "Boeing RC-135 Rivet Joint",
    "FORTE": "RQ-4B Global Hawk",
    "LAGR": "KC-135 Stratotanker",
    "DUKE": "E-3 Sentry AWACS",
    "JAKE": "P-8A Poseidon",
    "REDEYE": "E-8C JSTARS",
    "RCH": "C-17 Globemaster III",
    "REACH": "C-17 Globemaster III",
    "HOMER": "KC-10 Extender",
    "NCHO": "E-6B Mercury",
    "REAPER": "MQ-9 Reaper",
}

CATEGORY_TYPE_LABELS: dict[str, str] = {
    "surveillance": "Reconnaissance Aircraft",
    "tanker": "Aerial Refueling Tanker",
    "transport": "Military Transport",
    "government": "Government VIP Aircraft",
    "fighter": "Fighter Aircraft",
    "bomber": "Strategic Bomber",
    "helicopter": "Military Helicopter",
    "drone": "Unmanned Aerial Vehicle",
    "military": "Military Aircraft",
}

_SQUAWK_LIKE_RE = re.compile(r"^[A-Z]{2,4}\d{2,4}$")


@dataclass(frozen=True)
class CategoryRule:
    category: AircraftCategory
    prefixes: tuple[str, ...] = ()
    pattern: re.Pattern[str] | None = None

    def matches(self, callsign: str) -> bool:
        if any(callsign.startswith(prefix) for prefix in self.prefixes):
            return True
        return self.pattern is not None and self.pattern.match(callsign) is not None


# Evaluated first-match-wins against the upper-cased callsign.
CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule("drone", ("FORTE", "REAPER"), re.compile(r"^(RQ|MQ)")),
    CategoryRule("surveillance", ("RRR", "JAKE", "REDEYE", "DUKE", "NCHO")),
    CategoryRule("tanker", ("LAGR", "HOMER", "SHELL", "TEXAN")),
    CategoryRule("transport", ("RCH", "REACH", "GIANT")),
    CategoryRule("government", ("SAM", "SPAR", "EXEC", "AF1", "AF2")),
    CategoryRule("fighter", ("VIPER", "EAGLE", "COBRA", "DEMON")),
    CategoryRule("bomber", ("DOOM", "DARK", "NIGHT")),
)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def meters_to_feet(value: float | None) -> int:
    return _round_half_up((value or 0.0) * FEET_PER_METER)


def ms_to_knots(value: float | None) -> int:
    return _round_half_up((value or 0.0) * KNOTS_PER_MS)


def round_heading(value: float | None) -> int:
    return _round_half_up(value or 0.0)


def registry_category(callsign: str) -> AircraftCategory | None:
    upper = callsign.strip().upper()
    if not upper:
        return None
    best: str | None = None
    for prefix in MILITARY_CALLSIGN_REGISTRY:
        if upper.startswith(prefix) and (best is None or len(prefix) > len(best)):
            best = prefix
    if best is None:
        return None
    return MILITARY_CALLSIGN_REGISTRY[best]


def is_military_callsign(callsign: str) -> bool:
    return registry_category(callsign) is not None


def is_interesting(callsign: str, origin_country: str, altitude_ft: int) -> bool:
    upper = callsign.strip().upper()
    if not upper:
        return False
    if is_military_callsign(upper):
        return True
    if origin_country in WATCHLIST_COUNTRIES:
        if _SQUAWK_LIKE_RE.match(upper):
            return True
        if altitude_ft > WATCHLIST_ALTITUDE_FT:
            return True
    if upper.startswith("N") and len(upper) <= 6:
        return altitude_ft > CIVIL_REGISTRATION_ALTITUDE_FT
    return False


def classify_category(callsign: str, origin_country: str) -> AircraftCategory:
    upper = callsign.strip().upper()
    if not upper:
        return "civil"
    for rule in CATEGORY_RULES:
        if rule.matches(upper):
            return rule.category
    if origin_country in WATCHLIST_COUNTRIES and is_military_callsign(upper):
        return "military"
    return "civil"


def aircraft_type_label(callsign: str, category: str) -> str:
    upper = callsign.strip().upper()
    if upper:
        for prefix, name in AIRCRAFT_TYPE_NAMES.items():
            if upper.startswith(prefix):
                return name
    return CATEGORY_TYPE_LABELS.get(category, "Aircraft")


def classify_state(state: RawAircraftState, observed_at: datetime) -> NormalizedFlight | None:
    if state.latitude is None or state.longitude is None or state.on_ground:
        return None
    if not (math.isfinite(state.latitude) and math.isfinite(state.longitude)):
        return None

    callsign = state.callsign.strip()
    altitude_ft = meters_to_feet(state.baro_altitude_m)
    if not is_interesting(callsign, state.origin_country, altitude_ft):
        return None

    category = classify_category(callsign, state.origin_country)
    if category == "civil":
        return None

    label = resolve_region(state.latitude, state.longitude)
    return NormalizedFlight(
        id=f"opensky-{state.icao24}",
        callsign=callsign or state.icao24.upper(),
        aircraft_type=aircraft_type_label(callsign, category),
        category=category,
        location=GeoLocation(
            lat=state.latitude,
            lng=state.longitude,
            region=label.region,
            country=label.country,
        ),
        altitude_ft=altitude_ft,
        speed_kt=ms_to_knots(state.velocity_ms),
        heading_deg=round_heading(state.true_track_deg),
        timestamp=state.last_contact or observed_at,
    )


def normalize_states(
    states: Iterable[RawAircraftState],
    observed_at: datetime,
    *,
    seen: set[str] | None = None,
) -> list[NormalizedFlight]:
    """Classify one batch of states; the first record per icao24 decides.

    A repeat of an icao24 already seen is skipped whether or not the first
    record was emitted. Pass the same ``seen`` set across the regional batches
    of one poll cycle so overlapping query boxes do not produce duplicates.
    """
    seen_icao = seen if seen is not None else set()
    flights: list[NormalizedFlight] = []
    for state in states:
        if state.icao24 in seen_icao:
            continue
        seen_icao.add(state.icao24)
        flight = classify_state(state, observed_at)
        if flight is None:
            continue
        flights.append(flight)
    return flights
