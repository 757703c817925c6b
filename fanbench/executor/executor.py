import asyncio
import random
from collections.abc import Coroutine
from typing import Any, TypeVar

from loguru import logger

from .strategy import Blocker, ExecutionStrategy, Stopwatch, Unbounded
from .types import ExecutionAggregateError, InvalidArgument, TaskResult

T = TypeVar("T")


class TaskExecutor:
    def __init__(
        self,
        unit_delay_ms: float = 100,
        strategy: ExecutionStrategy | None = None,
    ):
        if unit_delay_ms < 0:
            raise InvalidArgument(
                f"Unit delay must be non-negative, got {unit_delay_ms}ms"
            )
        self.unit_delay_ms = unit_delay_ms
        self.strategy = strategy or Unbounded()

    # execute_batch and simulate_blocking_io start their own event loop.
    # Callers already inside a loop await run_batch and run_blocking_io.

    def execute_batch(
        self, count: int, strategy: ExecutionStrategy | None = None
    ) -> list[TaskResult]:
        _require_positive(count)
        return self._join(
            self.run_batch(count, strategy), "Error executing concurrent tasks"
        )

    def simulate_blocking_io(self, delay_ms: int) -> TaskResult:
        _require_delay(delay_ms)
        return self._join(
            self.run_blocking_io(delay_ms),
            "Error executing blocking I/O simulation",
        )

    async def run_batch(
        self, count: int, strategy: ExecutionStrategy | None = None
    ) -> list[TaskResult]:
        _require_positive(count)
        strategy = strategy or self.strategy
        logger.info("Executing {} tasks with {} strategy", count, strategy.label)

        async with strategy.session(count) as block:
            async with asyncio.TaskGroup() as group:
                tasks = [
                    group.create_task(
                        self._run_unit(
                            tid, block, strategy.lightweight, self.unit_delay_ms
                        ),
                        name=f"unit-{tid}",
                    )
                    for tid in range(count)
                ]

        # Completion order is arbitrary, tasks were created in index order.
        results = [task.result() for task in tasks]

        failed = sum(1 for r in results if not r.succeeded)
        logger.info("Completed {} tasks, {} failed", len(results), failed)
        return results

    async def run_blocking_io(self, delay_ms: int) -> TaskResult:
        _require_delay(delay_ms)
        task_id = random.randrange(1000)
        logger.debug("Simulating blocking I/O for {}ms as task {}", delay_ms, task_id)

        strategy = Unbounded()
        async with strategy.session(1) as block:
            return await asyncio.create_task(
                self._run_unit(
                    task_id,
                    block,
                    strategy.lightweight,
                    delay_ms,
                    message=f"Blocking I/O completed after {delay_ms}ms",
                ),
                name=f"unit-{task_id}",
            )

    def _join(self, coro: Coroutine[Any, Any, T], what: str) -> T:
        try:
            return asyncio.run(coro)
        except asyncio.CancelledError as exc:
            logger.error("{}: coordinating call was cancelled", what)
            raise ExecutionAggregateError(what) from exc

    async def _run_unit(
        self,
        task_id: int,
        block: Blocker,
        lightweight: bool,
        delay_ms: float,
        message: str | None = None,
    ) -> TaskResult:
        # Used only if the unit never reaches a worker.
        fallback = Stopwatch()

        try:
            span = await block(delay_ms / 1000)
        except (Exception, asyncio.CancelledError) as exc:
            span = fallback.stop(exc)

        if span.error is not None:
            logger.warning("Task {} failed on {}: {}", task_id, span.worker, span.error)
            return TaskResult.failure(
                task_id,
                span.worker,
                lightweight,
                span.start_time,
                span.end_time,
                span.error,
            )

        return TaskResult.success(
            task_id,
            span.worker,
            lightweight,
            span.start_time,
            span.end_time,
            message or f"Task {task_id} completed on {span.worker}",
        )


def _require_positive(count: int) -> None:
    if count <= 0:
        raise InvalidArgument(f"Number of tasks must be positive, got {count}")


def _require_delay(delay_ms: float) -> None:
    if delay_ms < 0:
        raise InvalidArgument(f"Delay must be non-negative, got {delay_ms}ms")
