"""Coarse geofencing of coordinates into named macro-regions."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RegionLabel:
    region: str
    country: str


@dataclass(frozen=True)
class BoundingBox:
    lat_min: float
    lat_max: float
    lng_min: float
    lng_max: float

    def contains(self, lat: float, lng: float) -> bool:
        return self.lat_min <= lat <= self.lat_max and self.lng_min <= lng <= self.lng_max


DEFAULT_REGION = RegionLabel("Global", "International Airspace")

# Order matters: boxes overlap and the first match wins.
REGION_BOXES: tuple[tuple[BoundingBox, RegionLabel], ...] = (
    (BoundingBox(35, 55, 25, 45), RegionLabel("Eastern Europe", "Black Sea Region")),
    (BoundingBox(30, 40, 30, 40), RegionLabel("Middle East", "Eastern Mediterranean")),
    (BoundingBox(28, 35, 32, 37), RegionLabel("Middle East", "Israel/Lebanon")),
    (BoundingBox(20, 30, 115, 130), RegionLabel("Asia Pacific", "Taiwan Strait")),
    (BoundingBox(10, 20, 40, 55), RegionLabel("Middle East", "Red Sea/Yemen")),
    (BoundingBox(50, 70, 15, 35), RegionLabel("Europe", "Baltic/Nordic Region")),
    (BoundingBox(35, 45, -10, 5), RegionLabel("Europe", "Western Europe")),
    (BoundingBox(30, 50, -130, -60), RegionLabel("North America", "Continental US")),
    (BoundingBox(32, 42, 125, 145), RegionLabel("Asia Pacific", "Japan/Korea")),
)


def resolve_region(
    lat: float,
    lng: float,
    boxes: tuple[tuple[BoundingBox, RegionLabel], ...] = REGION_BOXES,
    default: RegionLabel = DEFAULT_REGION,
) -> RegionLabel:
    for box, label in boxes:
        if box.contains(lat, lng):
            return label
    return default
