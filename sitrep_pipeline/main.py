from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from .async_runtime import AsyncRuntime
from .config import Settings
from .models import serialize_records


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Situational awareness feed pipeline")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("flights", help="Print military/government flights as JSON")
    subparsers.add_parser("predictions", help="Print conflict prediction markets as JSON")
    subparsers.add_parser("weather", help="Print aviation weather alerts as JSON")
    subparsers.add_parser("snapshot", help="Print all feeds with provenance")
    subparsers.add_parser("run", help="Run continuous polling loop")
    return parser


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


async def _feed_payload(runtime: AsyncRuntime, command: str) -> Any:
    if command == "flights":
        return serialize_records(await runtime.flights.get_flights())
    if command == "predictions":
        return serialize_records(await runtime.predictions.get_predictions())
    if command == "weather":
        return serialize_records(await runtime.weather.get_weather_alerts())

    snapshots = await runtime.collect_snapshots()
    return {
        name: {**snapshot.to_dict(), "items": serialize_records(snapshot.items)}
        for name, snapshot in snapshots.items()
    }


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    logger = logging.getLogger(__name__)
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    logger.info(
        "startup opensky_base_url=%s polymarket_base_url=%s aviation_weather_base_url=%s flights_ttl_seconds=%s predictions_ttl_seconds=%s weather_ttl_seconds=%s weather_include_pireps=%s poll_interval_seconds=%s",
        settings.opensky_base_url,
        settings.polymarket_base_url,
        settings.aviation_weather_base_url,
        settings.flights_ttl_seconds,
        settings.predictions_ttl_seconds,
        settings.weather_ttl_seconds,
        settings.weather_include_pireps,
        settings.poll_interval_seconds,
    )

    runtime = AsyncRuntime(settings)

    if args.command in {"flights", "predictions", "weather", "snapshot"}:
        payload = asyncio.run(_feed_payload(runtime, args.command))
        print(json.dumps(payload, indent=2))
        return 0

    if args.command == "run":
        try:
            asyncio.run(runtime.run())
        except KeyboardInterrupt:
            logger.info("shutdown_requested")
        return 0

    return 1


if __name__ == "__main__":
    sys.exit(main())
