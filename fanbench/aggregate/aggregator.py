from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass

from loguru import logger

from fanbench.executor import InvalidArgument

from .types import SUCCESS, AggregatedResult


@dataclass(frozen=True)
class Source:
    name: str
    delay_ms: float

    async def fetch(self) -> str:
        await asyncio.sleep(self.delay_ms / 1000)
        return f"Data from {self.name}"


DEFAULT_SOURCES = (
    Source("source 1", 100),
    Source("source 2", 150),
    Source("source 3", 120),
)


def sources_from_delays(delays_ms: Sequence[float]) -> tuple[Source, ...]:
    return tuple(Source(f"source {i}", d) for i, d in enumerate(delays_ms, start=1))


class ParallelAggregator:
    def __init__(self, sources: Sequence[Source] | None = None):
        sources = tuple(DEFAULT_SOURCES if sources is None else sources)
        if len(sources) != 3:
            raise InvalidArgument(f"Exactly 3 sources are required, got {len(sources)}")
        self.sources = sources

    def fetch_all(self) -> AggregatedResult:
        return asyncio.run(self.collect())

    async def collect(self) -> AggregatedResult:
        logger.info(
            "Fetching data from {} sources in parallel",
            ", ".join(s.name for s in self.sources),
        )
        try:
            # The group cancels the remaining fetches on the first failure.
            async with asyncio.TaskGroup() as group:
                tasks = [
                    group.create_task(source.fetch(), name=f"fetch-{source.name}")
                    for source in self.sources
                ]
        except ExceptionGroup as errors:
            return self._degraded(errors.exceptions[0])

        try:
            first, second, third = (task.result() for task in tasks)
        except asyncio.CancelledError as exc:
            # a fetch was interrupted on its own
            return self._degraded(exc)

        return AggregatedResult(first, second, third, SUCCESS)

    def _degraded(self, exc: BaseException) -> AggregatedResult:
        reason = str(exc) or type(exc).__name__
        logger.error("Error fetching parallel data: {}", reason)
        return AggregatedResult.failed(reason)
