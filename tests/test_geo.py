from __future__ import annotations

import unittest

from sitrep_pipeline.geo import DEFAULT_REGION, REGION_BOXES, RegionLabel, resolve_region


class ResolveRegionTests(unittest.TestCase):
    def test_black_sea_point_is_eastern_europe(self) -> None:
        label = resolve_region(43.5, 34.0)
        self.assertEqual(label, RegionLabel("Eastern Europe", "Black Sea Region"))

    def test_overlap_resolves_to_first_box(self) -> None:
        # Inside both the Black Sea and Eastern Mediterranean boxes.
        label = resolve_region(37.0, 35.0)
        self.assertEqual(label.country, "Black Sea Region")

    def test_later_box_used_when_earlier_boxes_miss(self) -> None:
        label = resolve_region(29.0, 33.0)
        self.assertEqual(label, RegionLabel("Middle East", "Israel/Lebanon"))

    def test_box_edges_are_inclusive(self) -> None:
        self.assertEqual(resolve_region(55.0, 45.0).region, "Eastern Europe")
        self.assertEqual(resolve_region(10.0, 55.0).country, "Red Sea/Yemen")

    def test_open_ocean_falls_back_to_default(self) -> None:
        self.assertEqual(resolve_region(-40.0, -30.0), DEFAULT_REGION)
        self.assertEqual(DEFAULT_REGION.region, "Global")
        self.assertEqual(DEFAULT_REGION.country, "International Airspace")

    def test_repeated_calls_agree_and_labels_are_known(self) -> None:
        known = {label for _, label in REGION_BOXES} | {DEFAULT_REGION}
        for lat in range(-90, 91, 15):
            for lng in range(-180, 181, 20):
                first = resolve_region(lat, lng)
                self.assertEqual(first, resolve_region(lat, lng))
                self.assertIn(first, known)


if __name__ == "__main__":
    unittest.main()
