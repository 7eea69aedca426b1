"""Tests for the crawl progress reporter."""

import asyncio

from app.services.progress import ProgressReporter


class TestProgressReporter:
    def test_defaults(self):
        reporter = ProgressReporter()
        assert reporter.progress.phase == "initializing"
        assert reporter.progress.pages_discovered == 1
        assert reporter.progress.message == "Starting crawl..."

    def test_emit_applies_updates_and_returns_snapshot(self):
        reporter = ProgressReporter(current_url="https://example.com")
        snapshot = asyncio.run(reporter.emit(phase="crawling", pages_crawled=2))

        assert snapshot.phase == "crawling"
        assert snapshot.pages_crawled == 2
        assert snapshot.current_url == "https://example.com"

    def test_snapshots_do_not_change_afterwards(self):
        received = []
        reporter = ProgressReporter(received.append)

        async def run():
            await reporter.emit(phase="discovering")
            await reporter.emit(phase="crawling", pages_crawled=1)

        asyncio.run(run())

        assert [s.phase for s in received] == ["discovering", "crawling"]
        assert received[0].pages_crawled == 0

    def test_async_callback_is_awaited_before_returning(self):
        received = []

        async def slow_consumer(progress):
            await asyncio.sleep(0)
            received.append(progress.phase)

        reporter = ProgressReporter(slow_consumer)
        asyncio.run(reporter.emit(phase="aggregating"))

        assert received == ["aggregating"]

    def test_fail_sets_error_phase(self):
        reporter = ProgressReporter()
        snapshot = asyncio.run(reporter.fail("Crawl failed"))
        assert snapshot.phase == "error"
        assert snapshot.message == "Crawl failed"
