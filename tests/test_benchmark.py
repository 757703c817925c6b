# tests/test_benchmark.py
from __future__ import annotations

import pytest

from fanbench.benchmark import Benchmark, BenchmarkResult, speedup
from fanbench.executor import (
    BoundedPool,
    ExecutionAggregateError,
    ExecutionStrategy,
    InvalidArgument,
    TaskExecutor,
    TaskResult,
)


class _BrokenExecutor(TaskExecutor):
    def execute_batch(
        self, count: int, strategy: ExecutionStrategy | None = None
    ) -> list[TaskResult]:
        raise ExecutionAggregateError("join interrupted")


def test_benchmark_completes_both_strategies() -> None:
    bench = Benchmark(TaskExecutor(unit_delay_ms=10))

    result = bench.run(100)

    assert result.task_count == 100
    assert result.lightweight_completed == 100
    assert result.capped_pool_completed == 100
    assert result.lightweight_duration_ms > 0
    assert result.capped_pool_duration_ms > 0
    assert result.speedup_ratio > 0


def test_repeated_runs_keep_completed_counts() -> None:
    bench = Benchmark(TaskExecutor(unit_delay_ms=1))

    for _ in range(3):
        result = bench.run(25)
        assert result.lightweight_completed == 25
        assert result.capped_pool_completed == 25


def test_small_pool_queues_units() -> None:
    # 10 units over 2 threads means 5 sequential delays per thread.
    bench = Benchmark(TaskExecutor(unit_delay_ms=20), capped=BoundedPool(cap=2))

    result = bench.run(10)

    assert result.capped_pool_duration_ms >= 100
    assert result.speedup_ratio == pytest.approx(
        result.capped_pool_duration_ms / result.lightweight_duration_ms
    )


@pytest.mark.parametrize("count", [0, -1])
def test_non_positive_count_is_rejected(count: int) -> None:
    with pytest.raises(InvalidArgument):
        Benchmark(TaskExecutor(unit_delay_ms=1)).run(count)


def test_coordination_error_propagates_unwrapped() -> None:
    bench = Benchmark(_BrokenExecutor(unit_delay_ms=1))

    with pytest.raises(ExecutionAggregateError, match="join interrupted"):
        bench.run(5)


def test_speedup_guards_zero_lightweight_duration() -> None:
    assert speedup(120.0, 0) == 0.0
    assert speedup(120.0, 60.0) == 2.0


def test_summary_and_serialization() -> None:
    result = BenchmarkResult(
        task_count=100,
        lightweight_duration_ms=110.4,
        capped_pool_duration_ms=230.6,
        lightweight_completed=100,
        capped_pool_completed=100,
        speedup_ratio=2.0887,
    )

    assert result.summary() == (
        "Benchmark: 100 tasks | Lightweight: 110ms | Capped pool: 231ms | Speedup: 2.09x"
    )
    assert result.to_dict()["capped_pool_completed"] == 100
    assert result.to_dict()["speedup_ratio"] == 2.0887
