from .driver import Benchmark, speedup
from .types import BenchmarkResult

__all__ = ["Benchmark", "BenchmarkResult", "speedup"]
