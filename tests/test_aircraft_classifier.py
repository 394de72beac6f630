from __future__ import annotations

from datetime import datetime, timezone
import unittest

from sitrep_pipeline.classifiers.aircraft import (
    MILITARY_CALLSIGN_REGISTRY,
    aircraft_type_label,
    classify_category,
    classify_state,
    is_interesting,
    meters_to_feet,
    ms_to_knots,
    normalize_states,
    round_heading,
)
from sitrep_pipeline.models import AIRCRAFT_CATEGORIES, RawAircraftState


def _state(
    *,
    icao24: str = "ae1234",
    callsign: str = "RRR6601",
    origin_country: str = "United States",
    latitude: float | None = 43.5,
    longitude: float | None = 34.0,
    baro_altitude_m: float | None = 8534.4,
    velocity_ms: float | None = 216.05,
    true_track_deg: float | None = 90.0,
    on_ground: bool = False,
) -> RawAircraftState:
    return RawAircraftState(
        icao24=icao24,
        callsign=callsign,
        origin_country=origin_country,
        latitude=latitude,
        longitude=longitude,
        baro_altitude_m=baro_altitude_m,
        velocity_ms=velocity_ms,
        true_track_deg=true_track_deg,
        on_ground=on_ground,
    )


class UnitConversionTests(unittest.TestCase):
    def test_meters_to_feet(self) -> None:
        self.assertEqual(meters_to_feet(10000), 32808)
        self.assertEqual(meters_to_feet(None), 0)

    def test_ms_to_knots(self) -> None:
        self.assertEqual(ms_to_knots(100), 194)
        self.assertEqual(ms_to_knots(None), 0)

    def test_heading_rounds_half_up_and_defaults_to_zero(self) -> None:
        self.assertEqual(round_heading(89.5), 90)
        self.assertEqual(round_heading(None), 0)


class InterestTests(unittest.TestCase):
    def test_registry_prefix_is_interesting_anywhere(self) -> None:
        self.assertTrue(is_interesting("FORTE11", "Unknown", 0))
        self.assertTrue(is_interesting("rch421", "", 10000))

    def test_empty_callsign_never_interesting(self) -> None:
        self.assertFalse(is_interesting("", "United States", 50000))
        self.assertFalse(is_interesting("   ", "Russia", 50000))

    def test_watchlist_country_squawk_like_callsign(self) -> None:
        self.assertTrue(is_interesting("ABC123", "Poland", 5000))
        self.assertFalse(is_interesting("ABC123", "Brazil", 5000))

    def test_watchlist_country_high_altitude(self) -> None:
        self.assertTrue(is_interesting("LUFTHANSA", "Germany", 36000))
        self.assertFalse(is_interesting("LUFTHANSA", "Germany", 35000))

    def test_short_n_registration_needs_very_high_altitude(self) -> None:
        self.assertTrue(is_interesting("N12AB", "Brazil", 41000))
        self.assertFalse(is_interesting("N12AB", "Brazil", 39000))


class CategoryTests(unittest.TestCase):
    def test_rules_are_checked_in_order(self) -> None:
        self.assertEqual(classify_category("FORTE11", "United States"), "drone")
        self.assertEqual(classify_category("MQ9X", "Brazil"), "drone")
        self.assertEqual(classify_category("RRR6601", "United States"), "surveillance")
        self.assertEqual(classify_category("LAGR135", "United States"), "tanker")
        self.assertEqual(classify_category("REACH42", "United States"), "transport")
        self.assertEqual(classify_category("SAM44", "United States"), "government")
        self.assertEqual(classify_category("VIPER21", "Poland"), "fighter")
        self.assertEqual(classify_category("DOOM11", "United States"), "bomber")

    def test_watchlist_military_callsign_without_rule_is_military(self) -> None:
        self.assertEqual(classify_category("NAVY01", "United States"), "military")

    def test_unlisted_country_military_callsign_is_civil(self) -> None:
        self.assertEqual(classify_category("NAVY01", "Brazil"), "civil")

    def test_registry_agrees_with_rule_chain(self) -> None:
        for prefix, category in MILITARY_CALLSIGN_REGISTRY.items():
            with self.subTest(prefix=prefix):
                self.assertEqual(classify_category(f"{prefix}01", "United States"), category)

    def test_type_label_prefers_curated_name(self) -> None:
        self.assertEqual(aircraft_type_label("RRR6601", "surveillance"), "Boeing RC-135 Rivet Joint")
        self.assertEqual(aircraft_type_label("DOOM11", "bomber"), "Strategic Bomber")
        self.assertEqual(aircraft_type_label("", "unknown"), "Aircraft")


class ClassifyStateTests(unittest.TestCase):
    def setUp(self) -> None:
        self.observed_at = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

    def test_rivet_joint_over_black_sea(self) -> None:
        flight = classify_state(_state(), self.observed_at)
        self.assertIsNotNone(flight)
        assert flight is not None
        self.assertEqual(flight.id, "opensky-ae1234")
        self.assertEqual(flight.category, "surveillance")
        self.assertIn("Rivet Joint", flight.aircraft_type)
        self.assertEqual(flight.altitude_ft, 28000)
        self.assertEqual(flight.speed_kt, 420)
        self.assertEqual(flight.heading_deg, 90)
        self.assertEqual(flight.location.region, "Eastern Europe")
        self.assertEqual(flight.location.country, "Black Sea Region")
        self.assertEqual(flight.timestamp, self.observed_at)

    def test_missing_position_is_dropped(self) -> None:
        self.assertIsNone(classify_state(_state(latitude=None), self.observed_at))
        self.assertIsNone(classify_state(_state(longitude=None), self.observed_at))

    def test_non_finite_position_is_dropped(self) -> None:
        self.assertIsNone(classify_state(_state(latitude=float("nan")), self.observed_at))
        self.assertIsNone(classify_state(_state(longitude=float("inf")), self.observed_at))

    def test_on_ground_is_dropped(self) -> None:
        self.assertIsNone(classify_state(_state(on_ground=True), self.observed_at))

    def test_interesting_civil_traffic_is_dropped(self) -> None:
        state = _state(callsign="N12AB", origin_country="United States", baro_altitude_m=12500)
        self.assertIsNone(classify_state(state, self.observed_at))

    def test_last_contact_overrides_observed_time(self) -> None:
        contact = datetime(2026, 3, 1, 11, 59, tzinfo=timezone.utc)
        state = RawAircraftState(
            icao24="ae9999",
            callsign="DUKE01",
            origin_country="United States",
            latitude=54.2,
            longitude=18.5,
            baro_altitude_m=9753.6,
            velocity_ms=185.0,
            true_track_deg=45.0,
            on_ground=False,
            last_contact=contact,
        )
        flight = classify_state(state, self.observed_at)
        assert flight is not None
        self.assertEqual(flight.timestamp, contact)
        self.assertEqual(flight.location.country, "Baltic/Nordic Region")


class NormalizeStatesTests(unittest.TestCase):
    def test_duplicate_icao_emitted_once_across_batches(self) -> None:
        observed_at = datetime(2026, 3, 1, tzinfo=timezone.utc)
        seen: set[str] = set()
        first = normalize_states([_state(), _state()], observed_at, seen=seen)
        second = normalize_states([_state(latitude=44.0)], observed_at, seen=seen)
        self.assertEqual(len(first), 1)
        self.assertEqual(second, [])

    def test_first_record_per_icao_decides_even_when_dropped(self) -> None:
        observed_at = datetime(2026, 3, 1, tzinfo=timezone.utc)
        seen: set[str] = set()
        grounded = normalize_states([_state(on_ground=True)], observed_at, seen=seen)
        airborne = normalize_states([_state()], observed_at, seen=seen)
        self.assertEqual(grounded, [])
        self.assertEqual(airborne, [])
        self.assertEqual(seen, {"ae1234"})
        self.assertEqual(normalize_states([_state(latitude=None), _state()], observed_at), [])

    def test_categories_are_closed_and_never_civil(self) -> None:
        observed_at = datetime(2026, 3, 1, tzinfo=timezone.utc)
        states = [
            _state(icao24=f"a{idx:05d}", callsign=callsign, origin_country=country)
            for idx, (callsign, country) in enumerate(
                [
                    ("RRR6601", "United States"),
                    ("N12AB", "United States"),
                    ("ABC123", "Poland"),
                    ("NAVY01", "United States"),
                    ("SHELL77", "Canada"),
                    ("XYZ", "Brazil"),
                ]
            )
        ]
        flights = normalize_states(states, observed_at)
        self.assertTrue(flights)
        for flight in flights:
            self.assertIn(flight.category, AIRCRAFT_CATEGORIES)
            self.assertNotEqual(flight.category, "civil")


if __name__ == "__main__":
    unittest.main()
