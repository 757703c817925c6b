from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class BenchmarkResult:
    task_count: int
    lightweight_duration_ms: float
    capped_pool_duration_ms: float
    lightweight_completed: int
    capped_pool_completed: int
    speedup_ratio: float

    def summary(self) -> str:
        return (
            f"Benchmark: {self.task_count} tasks"
            f" | Lightweight: {self.lightweight_duration_ms:.0f}ms"
            f" | Capped pool: {self.capped_pool_duration_ms:.0f}ms"
            f" | Speedup: {self.speedup_ratio:.2f}x"
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
