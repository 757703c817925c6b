from .executor import TaskExecutor
from .strategy import (
    BoundedPool,
    ExecutionStrategy,
    Stopwatch,
    Unbounded,
    describe_worker,
    strategy_for,
)
from .types import (
    ExecutionAggregateError,
    ExecutorError,
    InvalidArgument,
    Span,
    TaskResult,
)

__all__ = [
    "TaskExecutor",
    "TaskResult",
    "ExecutionStrategy",
    "Unbounded",
    "BoundedPool",
    "strategy_for",
    "describe_worker",
    "Stopwatch",
    "Span",
    "ExecutorError",
    "InvalidArgument",
    "ExecutionAggregateError",
]
