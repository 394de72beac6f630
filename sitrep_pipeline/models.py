from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, Iterable, Literal, TypeVar

T = TypeVar("T")

AircraftCategory = Literal[
    "military",
    "government",
    "surveillance",
    "tanker",
    "transport",
    "civil",
    "fighter",
    "bomber",
    "helicopter",
    "drone",
]
PredictionCategory = Literal["military", "political", "economic", "cyber", "social"]
SeverityTier = Literal["warning", "watch", "advisory", "info"]
HazardReportType = Literal["SIGMET", "AIRMET", "METAR", "TAF", "PIREP"]

AIRCRAFT_CATEGORIES: frozenset[str] = frozenset(
    {
        "military",
        "government",
        "surveillance",
        "tanker",
        "transport",
        "civil",
        "fighter",
        "bomber",
        "helicopter",
        "drone",
    }
)
PREDICTION_CATEGORIES: frozenset[str] = frozenset(
    {"military", "political", "economic", "cyber", "social"}
)
SEVERITY_TIERS: frozenset[str] = frozenset({"warning", "watch", "advisory", "info"})


def _iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()


@dataclass(frozen=True)
class GeoLocation:
    lat: float
    lng: float
    region: str | None = None
    country: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"lat": self.lat, "lng": self.lng}
        if self.region is not None:
            payload["region"] = self.region
        if self.country is not None:
            payload["country"] = self.country
        return payload


@dataclass(frozen=True)
class AltitudeBand:
    min_ft: int
    max_ft: int

    def to_dict(self) -> dict[str, Any]:
        return {"min": self.min_ft, "max": self.max_ft}


@dataclass(frozen=True)
class RawAircraftState:
    icao24: str
    callsign: str
    origin_country: str
    latitude: float | None
    longitude: float | None
    baro_altitude_m: float | None
    velocity_ms: float | None
    true_track_deg: float | None
    on_ground: bool
    last_contact: datetime | None = None


@dataclass(frozen=True)
class NormalizedFlight:
    id: str
    callsign: str
    aircraft_type: str
    category: AircraftCategory
    location: GeoLocation
    altitude_ft: int
    speed_kt: int
    heading_deg: int
    timestamp: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "callsign": self.callsign,
            "aircraftType": self.aircraft_type,
            "category": self.category,
            "location": self.location.to_dict(),
            "altitude": self.altitude_ft,
            "speed": self.speed_kt,
            "heading": self.heading_deg,
            "timestamp": _iso(self.timestamp),
        }


@dataclass(frozen=True)
class RawMarketEvent:
    id: str
    title: str
    description: str
    outcome_prices: str | None
    volume: float | None
    liquidity: float | None
    end_date: str | None
    raw_json: dict[str, Any]


@dataclass(frozen=True)
class NormalizedPrediction:
    id: str
    question: str
    probability: float
    previous_probability: float
    change_24h: float
    volume: int
    source: Literal["polymarket", "manifold"]
    category: PredictionCategory
    resolution_date: str | None
    sparkline: tuple[float, ...]
    change_is_synthetic: bool

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "question": self.question,
            "probability": self.probability,
            "previousProbability": self.previous_probability,
            "change24h": self.change_24h,
            "volume": self.volume,
            "source": self.source,
            "category": self.category,
            "sparklineData": list(self.sparkline),
            "changeIsSynthetic": self.change_is_synthetic,
        }
        if self.resolution_date is not None:
            payload["resolutionDate"] = self.resolution_date
        return payload


@dataclass(frozen=True)
class RawHazardReport:
    report_id: str
    report_type: HazardReportType
    icao_id: str
    hazard: str
    severity: str
    valid_from: str | None
    valid_to: str | None
    raw_text: str
    flight_level_low: int | None = None
    flight_level_high: int | None = None
    coords: str | list[dict[str, Any]] | None = None
    latitude: float | None = None
    longitude: float | None = None


@dataclass(frozen=True)
class NormalizedWeatherAlert:
    id: str
    type: HazardReportType
    title: str
    description: str
    laymans_description: str
    severity: SeverityTier
    location: GeoLocation
    affected_altitude: AltitudeBand | None
    valid_from: str | None
    valid_to: str | None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "description": self.description,
            "laymansDescription": self.laymans_description,
            "severity": self.severity,
            "location": self.location.to_dict(),
            "validFrom": self.valid_from,
            "validTo": self.valid_to,
        }
        if self.affected_altitude is not None:
            payload["affectedAltitude"] = self.affected_altitude.to_dict()
        return payload


def serialize_records(records: list[Any] | tuple[Any, ...]) -> list[dict[str, Any]]:
    return [record.to_dict() for record in records]


FetchStatus = Literal["ok", "empty", "failed"]


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Outcome of one upstream attempt; keeps "nothing there" apart from "could not ask"."""

    status: FetchStatus
    items: tuple[T, ...] = ()
    reason: str | None = None

    @classmethod
    def from_items(cls, items: Iterable[T]) -> "FetchResult[T]":
        collected = tuple(items)
        if not collected:
            return cls(status="empty")
        return cls(status="ok", items=collected)

    @classmethod
    def empty(cls) -> "FetchResult[T]":
        return cls(status="empty")

    @classmethod
    def failed(cls, reason: str) -> "FetchResult[T]":
        return cls(status="failed", reason=reason)

    @property
    def is_ok(self) -> bool:
        return self.status == "ok"
