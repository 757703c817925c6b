from __future__ import annotations

import asyncio
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Awaitable, Callable
from concurrent.futures import ThreadPoolExecutor
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from datetime import datetime, timedelta
from typing import Any

from .types import Span

# Runs one unit's delay on a worker and times it there.
Blocker = Callable[[float], Awaitable[Span]]

DEFAULT_POOL_CAP = 200


class Stopwatch:
    def __init__(self) -> None:
        self.worker = current_worker()
        self.started = datetime.now()
        self._clock = time.monotonic()

    def stop(self, exc: BaseException | None = None) -> Span:
        # End time follows the monotonic clock so the duration is never negative.
        ended = self.started + timedelta(seconds=time.monotonic() - self._clock)
        error = None if exc is None else str(exc) or type(exc).__name__
        return Span(self.worker, self.started, ended, error)


class ExecutionStrategy(ABC):
    label: str
    lightweight: bool

    @abstractmethod
    def pool_size(self, count: int) -> int | None:
        """Number of workers for a batch of `count` units, None if uncapped."""

    @abstractmethod
    def session(self, count: int) -> AbstractAsyncContextManager[Blocker]:
        """Async context manager yielding the blocker for one batch."""


class Unbounded(ExecutionStrategy):
    label = "lightweight"
    lightweight = True

    def pool_size(self, count: int) -> int | None:
        return None

    @asynccontextmanager
    async def session(self, count: int) -> AsyncIterator[Blocker]:
        yield _sleep_on_task


class BoundedPool(ExecutionStrategy):
    label = "pool"
    lightweight = False

    def __init__(self, cap: int = DEFAULT_POOL_CAP) -> None:
        if cap < 1:
            raise ValueError(f"Pool cap must be at least 1, got {cap}")
        self.cap = cap

    def pool_size(self, count: int) -> int | None:
        return max(1, min(count, self.cap))

    @asynccontextmanager
    async def session(self, count: int) -> AsyncIterator[Blocker]:
        loop = asyncio.get_running_loop()
        pool = ThreadPoolExecutor(
            max_workers=self.pool_size(count), thread_name_prefix="pool-worker"
        )

        async def block(seconds: float) -> Span:
            return await loop.run_in_executor(pool, _sleep_on_thread, seconds)

        try:
            yield block
        except BaseException:
            # Threads still sleeping are left to finish on their own.
            pool.shutdown(wait=False, cancel_futures=True)
            raise
        await asyncio.to_thread(pool.shutdown)


async def _sleep_on_task(seconds: float) -> Span:
    watch = Stopwatch()
    try:
        await asyncio.sleep(seconds)
    except (Exception, asyncio.CancelledError) as exc:
        return watch.stop(exc)
    return watch.stop()


def _sleep_on_thread(seconds: float) -> Span:
    watch = Stopwatch()
    try:
        time.sleep(seconds)
    except Exception as exc:
        return watch.stop(exc)
    return watch.stop()


def current_worker() -> str:
    try:
        task = asyncio.current_task()
    except RuntimeError:
        task = None
    if task is not None:
        return task.get_name()
    return threading.current_thread().name


def describe_worker() -> dict[str, Any]:
    thread = threading.current_thread()
    try:
        task = asyncio.current_task()
    except RuntimeError:
        task = None
    return {
        "name": current_worker(),
        "thread": thread.name,
        "ident": thread.ident,
        "native_id": thread.native_id,
        "daemon": thread.daemon,
        "main_thread": thread is threading.main_thread(),
        "task": task.get_name() if task is not None else None,
    }


def strategy_for(label: str, *, pool_cap: int = DEFAULT_POOL_CAP) -> ExecutionStrategy:
    match label:
        case "lightweight":
            return Unbounded()
        case "pool":
            return BoundedPool(pool_cap)
        case _:
            raise ValueError(f"Unknown strategy: {label}")
