import time

from loguru import logger

from fanbench.executor import (
    BoundedPool,
    ExecutionStrategy,
    InvalidArgument,
    TaskExecutor,
    Unbounded,
)

from .types import BenchmarkResult


def speedup(capped_ms: float, lightweight_ms: float) -> float:
    if lightweight_ms == 0:
        return 0.0
    return capped_ms / lightweight_ms


class Benchmark:
    def __init__(
        self,
        executor: TaskExecutor,
        lightweight: ExecutionStrategy | None = None,
        capped: ExecutionStrategy | None = None,
    ):
        self.executor = executor
        self.lightweight = lightweight or Unbounded()
        self.capped = capped or BoundedPool()

    def run(self, count: int) -> BenchmarkResult:
        if count <= 0:
            raise InvalidArgument(f"Number of tasks must be positive, got {count}")

        logger.info(
            "Benchmarking {} vs {} with {} tasks",
            self.lightweight.label,
            self.capped.label,
            count,
        )

        # The two runs never overlap.
        lightweight_ms, lightweight_done = self._measure(self.lightweight, count)
        capped_ms, capped_done = self._measure(self.capped, count)

        result = BenchmarkResult(
            task_count=count,
            lightweight_duration_ms=lightweight_ms,
            capped_pool_duration_ms=capped_ms,
            lightweight_completed=lightweight_done,
            capped_pool_completed=capped_done,
            speedup_ratio=speedup(capped_ms, lightweight_ms),
        )
        logger.info(result.summary())
        return result

    def _measure(self, strategy: ExecutionStrategy, count: int) -> tuple[float, int]:
        start = time.perf_counter()
        results = self.executor.execute_batch(count, strategy)
        duration_ms = (time.perf_counter() - start) * 1000
        return duration_ms, len(results)
