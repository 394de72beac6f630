from __future__ import annotations

from collections import deque
from datetime import datetime, timedelta

SAMPLE_INTERVAL = timedelta(minutes=5)
# 24h at one sample per interval, plus headroom.
MAX_SAMPLES_PER_MARKET = 320
DELTA_WINDOW = timedelta(hours=24)


class ProbabilityHistory:
    """In-memory probability samples per market id, oldest first."""

    def __init__(
        self,
        *,
        sample_interval: timedelta = SAMPLE_INTERVAL,
        max_samples: int = MAX_SAMPLES_PER_MARKET,
    ) -> None:
        self.sample_interval = sample_interval
        self.max_samples = max_samples
        self._samples: dict[str, deque[tuple[datetime, float]]] = {}

    def __len__(self) -> int:
        return len(self._samples)

    def record(self, market_id: str, observed_at: datetime, probability: float) -> bool:
        samples = self._samples.get(market_id)
        if samples is None:
            samples = deque(maxlen=self.max_samples)
            self._samples[market_id] = samples
        if samples and observed_at - samples[-1][0] < self.sample_interval:
            return False
        samples.append((observed_at, probability))
        return True

    def previous_at_least(
        self, market_id: str, now: datetime, age: timedelta = DELTA_WINDOW
    ) -> float | None:
        """Most recent sample that is at least ``age`` old, if any."""
        samples = self._samples.get(market_id)
        if not samples:
            return None
        cutoff = now - age
        found: float | None = None
        for observed_at, probability in samples:
            if observed_at > cutoff:
                break
            found = probability
        return found

    def recent_values(self, market_id: str, limit: int) -> list[float]:
        samples = self._samples.get(market_id)
        if not samples or limit <= 0:
            return []
        return [probability for _, probability in list(samples)[-limit:]]

    def prune(self, active_ids: set[str]) -> None:
        for market_id in list(self._samples):
            if market_id not in active_ids:
                del self._samples[market_id]
