from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any


@dataclass(frozen=True)
class Span:
    worker: str
    start_time: datetime
    end_time: datetime
    error: str | None = None


@dataclass(frozen=True)
class TaskResult:
    task_id: int
    worker: str
    lightweight: bool
    start_time: datetime
    end_time: datetime
    message: str
    succeeded: bool

    @classmethod
    def success(
        cls,
        task_id: int,
        worker: str,
        lightweight: bool,
        start_time: datetime,
        end_time: datetime,
        message: str,
    ) -> TaskResult:
        return cls(task_id, worker, lightweight, start_time, end_time, message, True)

    @classmethod
    def failure(
        cls,
        task_id: int,
        worker: str,
        lightweight: bool,
        start_time: datetime,
        end_time: datetime,
        error: str,
    ) -> TaskResult:
        return cls(task_id, worker, lightweight, start_time, end_time, error, False)

    @property
    def execution_duration(self) -> timedelta:
        return self.end_time - self.start_time

    @property
    def duration_ms(self) -> float:
        return self.execution_duration / timedelta(milliseconds=1)

    def to_dict(self) -> dict[str, Any]:
        return {
            "task_id": self.task_id,
            "worker": self.worker,
            "lightweight": self.lightweight,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "duration_ms": round(self.duration_ms, 3),
            "message": self.message,
            "succeeded": self.succeeded,
        }


class ExecutorError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class InvalidArgument(ExecutorError, ValueError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class ExecutionAggregateError(ExecutorError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)
