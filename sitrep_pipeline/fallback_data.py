from __future__ import annotations

from datetime import datetime, timedelta, timezone

from .geo import resolve_region
from .models import (
    AircraftCategory,
    AltitudeBand,
    GeoLocation,
    NormalizedFlight,
    NormalizedPrediction,
    NormalizedWeatherAlert,
)

# callsign, aircraft type, category, lat, lng, altitude ft, speed kt, heading
_SAMPLE_FLIGHTS: tuple[tuple[str, str, AircraftCategory, float, float, int, int, int], ...] = (
    ("RRR6601", "Boeing RC-135W Rivet Joint", "surveillance", 43.5, 34.0, 28000, 420, 90),
    ("FORTE11", "RQ-4B Global Hawk", "drone", 44.2, 35.8, 55000, 340, 180),
    ("LAGR135", "KC-135 Stratotanker", "tanker", 50.5, 25.3, 28000, 380, 270),
    ("DUKE01", "E-3 Sentry AWACS", "surveillance", 54.2, 18.5, 32000, 360, 45),
    ("RCH421", "C-17 Globemaster III", "transport", 49.8, 24.2, 35000, 450, 120),
    ("JAKE15", "P-8A Poseidon", "surveillance", 33.5, 34.8, 25000, 380, 220),
    ("VIPER21", "F-16 Fighting Falcon", "fighter", 51.2, 21.5, 38000, 520, 85),
    ("REAPER01", "MQ-9 Reaper", "drone", 15.2, 45.5, 22000, 180, 140),
)


def default_flights(now: datetime | None = None) -> list[NormalizedFlight]:
    ts = now or datetime.now(timezone.utc)
    flights: list[NormalizedFlight] = []
    for callsign, aircraft_type, category, lat, lng, altitude, speed, heading in _SAMPLE_FLIGHTS:
        label = resolve_region(lat, lng)
        flights.append(
            NormalizedFlight(
                id=f"sample-{callsign.lower()}",
                callsign=callsign,
                aircraft_type=aircraft_type,
                category=category,
                location=GeoLocation(lat=lat, lng=lng, region=label.region, country=label.country),
                altitude_ft=altitude,
                speed_kt=speed,
                heading_deg=heading,
                timestamp=ts,
            )
        )
    return flights


def default_predictions(now: datetime | None = None) -> list[NormalizedPrediction]:
    ts = now or datetime.now(timezone.utc)
    return [
        NormalizedPrediction(
            id="default-1",
            question="Loading real-time prediction markets...",
            probability=50.0,
            previous_probability=50.0,
            change_24h=0.0,
            volume=0,
            source="polymarket",
            category="political",
            resolution_date=(ts + timedelta(days=30)).isoformat(),
            sparkline=(50.0,) * 6,
            change_is_synthetic=True,
        )
    ]


def default_weather_alerts(now: datetime | None = None) -> list[NormalizedWeatherAlert]:
    ts = now or datetime.now(timezone.utc)
    return [
        NormalizedWeatherAlert(
            id="default-wx-1",
            type="SIGMET",
            title="Convective Activity - Eastern Mediterranean",
            description=(
                "SIGMET CHARLIE 3 - Convective activity observed over eastern Mediterranean"
            ),
            laymans_description=(
                "Thunderstorm activity in the region. Expect turbulence and lightning. "
                "Commercial flights are routing around this area."
            ),
            severity="watch",
            location=GeoLocation(lat=35.0, lng=33.0, region="Middle East"),
            affected_altitude=AltitudeBand(min_ft=25000, max_ft=45000),
            valid_from=ts.isoformat(),
            valid_to=(ts + timedelta(hours=6)).isoformat(),
        ),
        NormalizedWeatherAlert(
            id="default-wx-2",
            type="AIRMET",
            title="Moderate Turbulence - Black Sea Region",
            description="AIRMET TANGO - Moderate turbulence between FL250 and FL350",
            laymans_description=(
                "Bumpy conditions for aircraft flying through this region. "
                "Seatbelts recommended for passengers."
            ),
            severity="advisory",
            location=GeoLocation(lat=43.0, lng=35.0, region="Eastern Europe"),
            affected_altitude=AltitudeBand(min_ft=25000, max_ft=35000),
            valid_from=ts.isoformat(),
            valid_to=(ts + timedelta(hours=4)).isoformat(),
        ),
    ]
