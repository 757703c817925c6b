# tests/test_aggregate.py
from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass

import pytest

from fanbench.aggregate import (
    ERROR_MARKER,
    SUCCESS,
    ParallelAggregator,
    Source,
    sources_from_delays,
)
from fanbench.executor import InvalidArgument


@dataclass(frozen=True)
class _FailingSource(Source):
    error: BaseException

    async def fetch(self) -> str:
        await asyncio.sleep(self.delay_ms / 1000)
        raise self.error


def test_default_sources_succeed() -> None:
    result = ParallelAggregator().fetch_all()

    assert result.status == SUCCESS
    assert result.ok
    assert "source 1" in result.source1_data
    assert "source 2" in result.source2_data
    assert "source 3" in result.source3_data


def test_payloads_follow_source_order() -> None:
    # Slowest source first, payloads must still line up with their sources.
    result = ParallelAggregator(sources_from_delays([30, 1, 10])).fetch_all()

    assert (result.source1_data, result.source2_data, result.source3_data) == (
        "Data from source 1",
        "Data from source 2",
        "Data from source 3",
    )


def test_fetches_run_concurrently() -> None:
    aggregator = ParallelAggregator(sources_from_delays([200, 200, 200]))

    start = time.perf_counter()
    result = aggregator.fetch_all()
    elapsed = time.perf_counter() - start

    assert result.ok
    assert elapsed < 0.55


@pytest.mark.parametrize("failing", [0, 1, 2])
def test_any_failure_collapses_every_payload(failing: int) -> None:
    sources = list(sources_from_delays([5, 5, 5]))
    name = sources[failing].name
    sources[failing] = _FailingSource(name, 1, RuntimeError(f"{name} unavailable"))

    result = ParallelAggregator(sources).fetch_all()

    assert not result.ok
    assert result.status == f"{name} unavailable"
    assert result.source1_data == ERROR_MARKER
    assert result.source2_data == ERROR_MARKER
    assert result.source3_data == ERROR_MARKER


def test_failure_cancels_slow_siblings() -> None:
    sources = [
        Source("slow", 5000),
        _FailingSource("broken", 1, ValueError("boom")),
        Source("also slow", 5000),
    ]

    start = time.perf_counter()
    result = ParallelAggregator(sources).fetch_all()
    elapsed = time.perf_counter() - start

    assert result.status == "boom"
    assert elapsed < 2


def test_interrupted_fetch_degrades_result() -> None:
    sources = [
        Source("a", 1),
        _FailingSource("b", 1, asyncio.CancelledError()),
        Source("c", 1),
    ]

    result = ParallelAggregator(sources).fetch_all()

    assert not result.ok
    assert result.status != SUCCESS
    assert result.source2_data == ERROR_MARKER


def test_empty_error_message_uses_exception_name() -> None:
    sources = [Source("a", 1), Source("b", 1), _FailingSource("c", 1, KeyError())]

    result = ParallelAggregator(sources).fetch_all()

    assert result.status == "KeyError"


def test_exactly_three_sources_are_required() -> None:
    with pytest.raises(InvalidArgument):
        ParallelAggregator(sources_from_delays([1, 1]))


def test_to_dict_has_status_and_payloads() -> None:
    result = ParallelAggregator(sources_from_delays([1, 1, 1])).fetch_all()

    assert result.to_dict() == {
        "source1_data": "Data from source 1",
        "source2_data": "Data from source 2",
        "source3_data": "Data from source 3",
        "status": "Success",
    }


def test_collect_can_be_awaited_inside_a_loop() -> None:
    aggregator = ParallelAggregator(sources_from_delays([1, 1, 1]))

    async def main() -> tuple:
        ok = await aggregator.collect()
        broken = await ParallelAggregator(
            [Source("a", 1), Source("b", 1), _FailingSource("c", 1, OSError("down"))]
        ).collect()
        return ok, broken

    ok, broken = asyncio.run(main())

    assert ok.ok
    assert broken.status == "down"
    assert broken.source1_data == ERROR_MARKER
