from __future__ import annotations

from dataclasses import dataclass
import json
import random
from typing import Any

from ..models import PredictionCategory

DEFAULT_PROBABILITY = 50.0
SYNTHETIC_JITTER = 5.0
SPARKLINE_POINTS = 12
SPARKLINE_SPREAD = 10.0

CONFLICT_KEYWORDS: tuple[str, ...] = (
    "war",
    "conflict",
    "military",
    "ukraine",
    "russia",
    "china",
    "taiwan",
    "iran",
    "israel",
    "gaza",
    "hamas",
    "hezbollah",
    "nato",
    "missile",
    "nuclear",
    "attack",
    "invasion",
    "strike",
    "troops",
    "defense",
    "sanctions",
    "escalation",
    "ceasefire",
    "peace",
    "korea",
    "yemen",
    "houthi",
    "red sea",
    "middle east",
    "syria",
    "lebanon",
)

# First matching group wins; anything unmatched is political.
CATEGORY_KEYWORD_GROUPS: tuple[tuple[PredictionCategory, tuple[str, ...]], ...] = (
    ("military", ("war", "military", "attack", "strike")),
    ("economic", ("sanction", "trade", "economy")),
    ("cyber", ("hack", "cyber")),
)


@dataclass(frozen=True)
class ProbabilityDelta:
    previous: float
    change: float
    synthetic: bool


def is_conflict_related(title: str, description: str | None) -> bool:
    combined = f"{title or ''} {description or ''}".lower()
    return any(keyword in combined for keyword in CONFLICT_KEYWORDS)


def classify_category(title: str) -> PredictionCategory:
    lowered = (title or "").lower()
    for category, keywords in CATEGORY_KEYWORD_GROUPS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return "political"


def clamp_probability(value: float) -> float:
    return max(0.0, min(100.0, value))


def round_probability(value: float) -> float:
    return round(clamp_probability(value), 1)


def parse_outcome_price(raw: Any) -> float:
    """Return the first outcome price as a 0-100 percentage, 50 when unusable."""
    prices: Any = raw
    if isinstance(raw, str):
        try:
            prices = json.loads(raw)
        except (json.JSONDecodeError, ValueError):
            return DEFAULT_PROBABILITY
    if not isinstance(prices, list) or not prices:
        return DEFAULT_PROBABILITY
    try:
        first = float(prices[0])
    except (TypeError, ValueError):
        return DEFAULT_PROBABILITY
    if first != first:  # NaN
        return DEFAULT_PROBABILITY
    return clamp_probability(first * 100.0)


def synthetic_delta(probability: float, rng: random.Random) -> ProbabilityDelta:
    # Upstream carries no history; this is jitter, not an observed change.
    current = round_probability(probability)
    previous = round_probability(
        probability - rng.uniform(-SYNTHETIC_JITTER, SYNTHETIC_JITTER)
    )
    return ProbabilityDelta(
        previous=previous,
        change=round(current - previous, 1),
        synthetic=True,
    )


def observed_delta(probability: float, previous_observed: float) -> ProbabilityDelta:
    current = round_probability(probability)
    previous = round_probability(previous_observed)
    return ProbabilityDelta(previous=previous, change=round(current - previous, 1), synthetic=False)


def synthetic_sparkline(
    probability: float, rng: random.Random, points: int = SPARKLINE_POINTS
) -> tuple[float, ...]:
    low = probability - SPARKLINE_SPREAD
    high = probability + SPARKLINE_SPREAD
    return tuple(float(round(clamp_probability(rng.uniform(low, high)))) for _ in range(points))
