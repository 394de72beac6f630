from __future__ import annotations

import asyncio
from datetime import datetime, timezone
import logging
import math
import random
import time
from typing import Awaitable, Callable

from ..classifiers.aircraft import normalize_states
from ..classifiers.hazards import translate_report
from ..classifiers.markets import (
    SPARKLINE_POINTS,
    classify_category,
    is_conflict_related,
    observed_delta,
    parse_outcome_price,
    round_probability,
    synthetic_delta,
    synthetic_sparkline,
)
from ..collectors.aviation_weather import AviationWeatherCollector
from ..collectors.opensky import HOTSPOT_REGIONS, OpenSkyCollector, QueryBox
from ..collectors.polymarket import PolymarketCollector
from ..config import Settings
from ..fallback_data import default_flights, default_predictions, default_weather_alerts
from ..models import (
    FetchResult,
    NormalizedFlight,
    NormalizedPrediction,
    NormalizedWeatherAlert,
    RawHazardReport,
    RawMarketEvent,
)
from .probability_history import ProbabilityHistory
from .snapshot_cache import FeedSnapshot, SnapshotCache

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FlightProvider:
    """Military and government flights over the hotspot regions."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        collector: OpenSkyCollector | None = None,
        regions: tuple[QueryBox, ...] = HOTSPOT_REGIONS,
        region_delay_seconds: float | None = None,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        settings = settings or Settings()
        self.collector = collector or OpenSkyCollector(
            base_url=settings.opensky_base_url,
            timeout=settings.flights_timeout_seconds,
        )
        self.regions = regions
        self.region_delay_seconds = (
            settings.flights_region_delay_seconds
            if region_delay_seconds is None
            else region_delay_seconds
        )
        self._sleep = sleep
        self.cache: SnapshotCache[NormalizedFlight] = SnapshotCache(
            "flights",
            ttl_seconds=settings.flights_ttl_seconds if ttl_seconds is None else ttl_seconds,
            fetch=self._fetch,
            fallback=default_flights,
            clock=clock,
        )

    async def _fetch(self) -> FetchResult[NormalizedFlight]:
        observed_at = _utc_now()
        seen: set[str] = set()
        flights: list[NormalizedFlight] = []
        failed_regions: list[str] = []
        for index, box in enumerate(self.regions):
            if index and self.region_delay_seconds > 0:
                await self._sleep(self.region_delay_seconds)
            try:
                result = await asyncio.to_thread(self.collector.fetch_region, box)
            except Exception:
                logger.warning("opensky_region_failed region=%s", box.name, exc_info=True)
                result = FetchResult.failed("exception")
            if result.status == "failed":
                failed_regions.append(box.name)
                continue
            flights.extend(normalize_states(result.items, observed_at, seen=seen))

        if failed_regions:
            logger.warning(
                "opensky_regions_failed count=%s regions=%s",
                len(failed_regions),
                ",".join(failed_regions),
            )
        if flights:
            return FetchResult.from_items(flights)
        if self.regions and len(failed_regions) == len(self.regions):
            return FetchResult.failed("all_regions_failed")
        return FetchResult.empty()

    async def snapshot(self) -> FeedSnapshot[NormalizedFlight]:
        return await self.cache.get()

    async def get_flights(self) -> list[NormalizedFlight]:
        return list((await self.snapshot()).items)


class PredictionProvider:
    """Conflict-related prediction markets from Polymarket."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        collector: PolymarketCollector | None = None,
        history: ProbabilityHistory | None = None,
        max_results: int | None = None,
        ttl_seconds: float | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        settings = settings or Settings()
        self.collector = collector or PolymarketCollector(
            base_url=settings.polymarket_base_url,
            timeout=settings.predictions_timeout_seconds,
            limit=settings.predictions_fetch_limit,
        )
        self.history = history if history is not None else ProbabilityHistory()
        self.max_results = settings.predictions_max_results if max_results is None else max_results
        self._rng = rng or random.Random()
        self._now = now
        self.cache: SnapshotCache[NormalizedPrediction] = SnapshotCache(
            "predictions",
            ttl_seconds=settings.predictions_ttl_seconds if ttl_seconds is None else ttl_seconds,
            fetch=self._fetch,
            fallback=default_predictions,
            clock=clock,
        )

    def normalize_event(self, event: RawMarketEvent, now: datetime) -> NormalizedPrediction:
        probability = round_probability(parse_outcome_price(event.outcome_prices))
        previous_observed = self.history.previous_at_least(event.id, now)
        if previous_observed is None:
            delta = synthetic_delta(probability, self._rng)
        else:
            delta = observed_delta(probability, previous_observed)
        self.history.record(event.id, now, probability)

        recent = self.history.recent_values(event.id, SPARKLINE_POINTS)
        if len(recent) >= 2:
            sparkline = tuple(recent)
        else:
            sparkline = synthetic_sparkline(probability, self._rng)

        raw_volume = event.volume or event.liquidity or 0.0
        return NormalizedPrediction(
            id=event.id,
            question=event.title,
            probability=probability,
            previous_probability=delta.previous,
            change_24h=delta.change,
            volume=int(math.floor(raw_volume + 0.5)),
            source="polymarket",
            category=classify_category(event.title),
            resolution_date=event.end_date,
            sparkline=sparkline,
            change_is_synthetic=delta.synthetic,
        )

    async def _fetch(self) -> FetchResult[NormalizedPrediction]:
        result = await asyncio.to_thread(self.collector.fetch_events)
        if result.status == "failed":
            return FetchResult.failed(result.reason or "unknown")

        now = self._now()
        relevant = [
            event
            for event in result.items
            if is_conflict_related(event.title, event.description)
        ][: self.max_results]
        predictions = [self.normalize_event(event, now) for event in relevant]
        if result.items:
            self.history.prune({event.id for event in result.items})
        logger.info(
            "polymarket_events_filtered fetched=%s relevant=%s",
            len(result.items),
            len(predictions),
        )
        return FetchResult.from_items(predictions)

    async def snapshot(self) -> FeedSnapshot[NormalizedPrediction]:
        return await self.cache.get()

    async def get_predictions(self) -> list[NormalizedPrediction]:
        return list((await self.snapshot()).items)


class WeatherProvider:
    """Plain-language aviation weather hazards."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        collector: AviationWeatherCollector | None = None,
        max_alerts: int | None = None,
        include_pireps: bool | None = None,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        settings = settings or Settings()
        self.collector = collector or AviationWeatherCollector(
            base_url=settings.aviation_weather_base_url,
            timeout=settings.weather_timeout_seconds,
        )
        self.max_alerts = settings.weather_max_alerts if max_alerts is None else max_alerts
        self.include_pireps = (
            settings.weather_include_pireps if include_pireps is None else include_pireps
        )
        self.cache: SnapshotCache[NormalizedWeatherAlert] = SnapshotCache(
            "weather",
            ttl_seconds=settings.weather_ttl_seconds if ttl_seconds is None else ttl_seconds,
            fetch=self._fetch,
            fallback=default_weather_alerts,
            clock=clock,
        )

    async def _fetch_feed(
        self, label: str, fetch: Callable[[], FetchResult[RawHazardReport]]
    ) -> FetchResult[RawHazardReport]:
        try:
            return await asyncio.to_thread(fetch)
        except Exception:
            logger.warning("weather_fetch_failed feed=%s", label, exc_info=True)
            return FetchResult.failed("exception")

    async def _fetch(self) -> FetchResult[NormalizedWeatherAlert]:
        results: list[FetchResult[RawHazardReport]] = [
            await self._fetch_feed("sigmet", self.collector.fetch_sigmets)
        ]
        if self.include_pireps:
            results.append(await self._fetch_feed("pirep", self.collector.fetch_pireps))

        reports: list[RawHazardReport] = []
        for result in results:
            reports.extend(result.items)
        if not reports:
            if all(result.status == "failed" for result in results):
                return FetchResult.failed(results[0].reason or "unknown")
            return FetchResult.empty()

        alerts = [translate_report(report) for report in reports[: self.max_alerts]]
        return FetchResult.from_items(alerts)

    async def snapshot(self) -> FeedSnapshot[NormalizedWeatherAlert]:
        return await self.cache.get()

    async def get_weather_alerts(self) -> list[NormalizedWeatherAlert]:
        return list((await self.snapshot()).items)
