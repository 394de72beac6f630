from __future__ import annotations

import json
import logging
import math
from typing import Any

import requests

from ..config import POLYMARKET_BASE_URL
from ..models import FetchResult, RawMarketEvent

logger = logging.getLogger(__name__)


def _as_float(value: object) -> float | None:
    try:
        if value is None:
            return None
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    return parsed if math.isfinite(parsed) else None


def _as_price_string(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return json.dumps(value)
    return None


def _event_outcome_prices(row: dict[str, Any]) -> str | None:
    prices = _as_price_string(row.get("outcomePrices"))
    if prices:
        return prices
    # Events usually carry prices only on their nested markets.
    markets = row.get("markets")
    if isinstance(markets, list):
        for market in markets:
            if not isinstance(market, dict):
                continue
            nested = _as_price_string(market.get("outcomePrices"))
            if nested:
                return nested
    return None


def parse_event(row: Any) -> RawMarketEvent | None:
    if not isinstance(row, dict):
        return None
    event_id = row.get("id")
    title = row.get("title") or row.get("question")
    if event_id is None or not isinstance(title, str) or not title.strip():
        return None
    description = row.get("description")
    end_date = row.get("endDate")
    return RawMarketEvent(
        id=str(event_id),
        title=title.strip(),
        description=description if isinstance(description, str) else "",
        outcome_prices=_event_outcome_prices(row),
        volume=_as_float(row.get("volume")),
        liquidity=_as_float(row.get("liquidity")),
        end_date=str(end_date) if end_date else None,
        raw_json=row,
    )


def parse_events_payload(payload: Any) -> list[RawMarketEvent]:
    if isinstance(payload, dict):
        rows = payload.get("data") or payload.get("events") or []
    else:
        rows = payload
    if not isinstance(rows, list):
        return []
    events: list[RawMarketEvent] = []
    for row in rows:
        event = parse_event(row)
        if event is not None:
            events.append(event)
    return events


class PolymarketCollector:
    """Reads active events from the Polymarket gamma API."""

    def __init__(
        self,
        *,
        base_url: str = POLYMARKET_BASE_URL,
        timeout: float = 15.0,
        limit: int = 50,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.limit = limit
        self.session = session or requests.Session()

    def fetch_events(self) -> FetchResult[RawMarketEvent]:
        params = {"active": "true", "closed": "false", "limit": self.limit}
        try:
            response = self.session.get(
                f"{self.base_url}/events",
                params=params,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
            if response.status_code == 429:
                logger.warning("polymarket_rate_limited")
                return FetchResult.failed("rate_limited")
            response.raise_for_status()
            payload = response.json()
        except requests.Timeout:
            logger.warning("polymarket_timeout timeout=%s", self.timeout)
            return FetchResult.failed("timeout")
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else "unknown"
            logger.warning("polymarket_fetch_failed status=%s", status)
            return FetchResult.failed(f"http_{status}")
        except requests.exceptions.JSONDecodeError:
            logger.warning("polymarket_bad_json")
            return FetchResult.failed("bad_json")
        except requests.RequestException:
            logger.warning("polymarket_fetch_failed", exc_info=True)
            return FetchResult.failed("request_error")

        return FetchResult.from_items(parse_events_payload(payload))
