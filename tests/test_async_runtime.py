from __future__ import annotations

from datetime import datetime, timezone
import unittest

from sitrep_pipeline.async_runtime import AsyncRuntime
from sitrep_pipeline.config import Settings
from sitrep_pipeline.data.snapshot_cache import FeedSnapshot
from sitrep_pipeline.main import build_parser


class _FakeProvider:
    def __init__(self, items: tuple[str, ...], provenance: str, on_snapshot=None) -> None:
        self._snapshot = FeedSnapshot(
            items=items,
            provenance=provenance,  # type: ignore[arg-type]
            fetched_at=datetime(2026, 3, 1, tzinfo=timezone.utc),
            age_seconds=0.0,
        )
        self._on_snapshot = on_snapshot
        self.calls = 0

    async def snapshot(self) -> FeedSnapshot[str]:
        self.calls += 1
        if self._on_snapshot is not None:
            self._on_snapshot()
        return self._snapshot


class AsyncRuntimeTests(unittest.IsolatedAsyncioTestCase):
    def _runtime(self, on_snapshot=None) -> AsyncRuntime:
        return AsyncRuntime(
            Settings(),
            flights=_FakeProvider(("f1", "f2"), "live", on_snapshot),  # type: ignore[arg-type]
            predictions=_FakeProvider(("p1",), "cached"),  # type: ignore[arg-type]
            weather=_FakeProvider((), "fallback"),  # type: ignore[arg-type]
        )

    async def test_run_once_reports_counts_and_provenance(self) -> None:
        stats = await self._runtime().run_once()
        self.assertEqual(stats["flights_count"], 2)
        self.assertEqual(stats["flights_provenance"], "live")
        self.assertEqual(stats["predictions_provenance"], "cached")
        self.assertEqual(stats["weather_count"], 0)

    async def test_poll_loop_logs_poll_complete(self) -> None:
        runtime: AsyncRuntime | None = None

        def stop_after_first_poll() -> None:
            assert runtime is not None
            runtime.stop()

        runtime = self._runtime(on_snapshot=stop_after_first_poll)
        with self.assertLogs("sitrep_pipeline.async_runtime", level="INFO") as logs:
            await runtime.periodic_poll_loop()
        self.assertTrue(any("poll_complete" in line and "flights_count=2" in line for line in logs.output))


class ParserTests(unittest.TestCase):
    def test_feed_commands(self) -> None:
        parser = build_parser()
        for command in ("flights", "predictions", "weather", "snapshot", "run"):
            self.assertEqual(parser.parse_args([command]).command, command)

    def test_command_required(self) -> None:
        with self.assertRaises(SystemExit):
            build_parser().parse_args([])


if __name__ == "__main__":
    unittest.main()
