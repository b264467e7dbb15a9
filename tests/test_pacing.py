"""Tests for snippetfeed.ingestion.pacing: fixed-delay Pacer."""

from __future__ import annotations

import asyncio

from snippetfeed.ingestion.pacing import Pacer


def _recording_sleep():
    calls: list[float] = []

    async def sleep(seconds: float) -> None:
        calls.append(seconds)

    return sleep, calls


def _wait_n(pacer: Pacer, n: int) -> None:
    async def _go():
        for _ in range(n):
            await pacer.wait()

    asyncio.run(_go())


class TestPacer:
    def test_first_request_not_delayed(self):
        sleep, calls = _recording_sleep()
        _wait_n(Pacer(2.0, sleep=sleep), 1)
        assert calls == []

    def test_delay_between_consecutive_requests(self):
        sleep, calls = _recording_sleep()
        _wait_n(Pacer(3.0, sleep=sleep), 4)
        assert calls == [3.0, 3.0, 3.0]

    def test_zero_delay_never_sleeps(self):
        sleep, calls = _recording_sleep()
        _wait_n(Pacer(0, sleep=sleep), 5)
        assert calls == []

    def test_counts_calls(self):
        sleep, _ = _recording_sleep()
        pacer = Pacer(1.0, sleep=sleep)
        _wait_n(pacer, 3)
        assert pacer.calls == 3
