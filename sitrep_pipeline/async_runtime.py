from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

from .config import Settings
from .data.providers import FlightProvider, PredictionProvider, WeatherProvider

logger = logging.getLogger(__name__)


class AsyncRuntime:
    def __init__(
        self,
        settings: Settings,
        *,
        flights: FlightProvider | None = None,
        predictions: PredictionProvider | None = None,
        weather: WeatherProvider | None = None,
    ) -> None:
        self.settings = settings
        self.flights = flights or FlightProvider(settings=settings)
        self.predictions = predictions or PredictionProvider(settings=settings)
        self.weather = weather or WeatherProvider(settings=settings)
        self._running = True

    def stop(self) -> None:
        self._running = False

    async def collect_snapshots(self) -> dict[str, Any]:
        flights, predictions, weather = await asyncio.gather(
            self.flights.snapshot(),
            self.predictions.snapshot(),
            self.weather.snapshot(),
        )
        return {"flights": flights, "predictions": predictions, "weather": weather}

    async def run_once(self) -> dict[str, Any]:
        snapshots = await self.collect_snapshots()
        stats: dict[str, Any] = {}
        for name, snapshot in snapshots.items():
            stats[f"{name}_count"] = len(snapshot.items)
            stats[f"{name}_provenance"] = snapshot.provenance
        return stats

    async def periodic_poll_loop(self) -> None:
        while self._running:
            started = time.monotonic()
            try:
                stats = await self.run_once()
                metrics = " ".join(f"{key}={value}" for key, value in stats.items())
                logger.info("poll_complete %s", metrics)
            except Exception:
                logger.exception("poll_failed")

            if not self._running:
                break
            elapsed = time.monotonic() - started
            sleep_seconds = max(1, self.settings.poll_interval_seconds - int(elapsed))
            await asyncio.sleep(sleep_seconds)

    async def run(self) -> None:
        task = asyncio.create_task(self.periodic_poll_loop())
        try:
            await task
        finally:
            self._running = False
            task.cancel()
